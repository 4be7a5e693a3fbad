"""Records and reports produced by the analysis pipeline."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import httpx

from analyzers.scoring import round_half_up

TECHNICAL_CATEGORIES = (
    "crawlability",
    "mobileFriendly",
    "siteSpeed",
    "security",
    "htmlStructure",
    "metaData",
)

GEO_FACTORS = (
    "directAnswers",
    "structuredContent",
    "faqSections",
    "comprehensiveness",
    "readability",
    "questionFormat",
)


@dataclass
class AnalysisRequest:
    """Input for a full analysis run."""

    url: str | None
    keyword: str | None = None
    topic: str | None = None
    caller_id: str | None = None


@dataclass
class FetchResult:
    """A single HTTP response. Created per fetch, never cached."""

    status: int
    headers: httpx.Headers  # case-insensitive
    body: str
    final_url: str


@dataclass
class LinkRecord:
    url: str
    anchor_text: str
    is_internal: bool

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "text": self.anchor_text,
            "isInternal": self.is_internal,
        }


@dataclass
class BrokenLinkRecord:
    url: str
    status: int  # 0 = transport failure
    anchor_text: str
    is_internal: bool
    error: str

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "status": self.status,
            "text": self.anchor_text,
            "isInternal": self.is_internal,
            "error": self.error,
        }


@dataclass
class KeywordRecord:
    keyword: str
    frequency: int

    def to_dict(self) -> dict:
        return {"keyword": self.keyword, "frequency": self.frequency}


@dataclass
class Heading:
    level: int
    text: str


@dataclass
class PageSignals:
    """Structural signals pulled out of raw markup by the extractor."""

    title: str = ""
    meta_description: str = ""
    headings: list[Heading] = field(default_factory=list)
    images: list[bool] = field(default_factory=list)  # one has-alt flag per <img>
    visible_text: str = ""
    body_text: str = ""  # visible text of <body> only
    clean_markup: str = ""
    first_paragraph: str = ""
    paragraph_count: int = 0
    list_count: int = 0
    bullet_item_count: int = 0
    has_h1: bool = False
    has_structured_data: bool = False
    has_canonical: bool = False
    has_viewport: bool = False
    has_device_width: bool = False
    has_lang: bool = False
    has_charset: bool = False
    robots_meta: str | None = None
    og_tag_count: int = 0
    has_twitter_card: bool = False
    has_schema_org_marker: bool = False

    @property
    def has_title(self) -> bool:
        return bool(self.title)

    @property
    def has_meta_description(self) -> bool:
        return bool(self.meta_description)

    @property
    def images_with_alt(self) -> int:
        return sum(1 for has_alt in self.images if has_alt)


@dataclass
class LinkAudit:
    """Link Auditor output."""

    links: list[LinkRecord] = field(default_factory=list)
    broken_links: list[BrokenLinkRecord] = field(default_factory=list)
    checked_links: int = 0
    deep_link_ratio: int = 0
    error: str | None = None

    @property
    def total_links(self) -> int:
        return len(self.links)

    @property
    def internal_count(self) -> int:
        return sum(1 for link in self.links if link.is_internal)

    @property
    def external_count(self) -> int:
        return self.total_links - self.internal_count

    def to_dict(self) -> dict:
        data = {
            "totalLinks": self.total_links,
            "checkedLinks": self.checked_links,
            "brokenLinks": [b.to_dict() for b in self.broken_links],
            "internalLinks": self.internal_count,
            "externalLinks": self.external_count,
            "deepLinkRatio": self.deep_link_ratio,
        }
        if self.error:
            data["error"] = self.error
        return data


@dataclass
class KeywordReport:
    keywords: list[KeywordRecord] = field(default_factory=list)
    word_count: int = 0
    title: str = ""
    meta_description: str = ""
    heading_count: int = 0
    error: str | None = None

    def to_dict(self) -> dict:
        data = {
            "keywords": [k.to_dict() for k in self.keywords],
            "title": self.title,
            "metaDescription": self.meta_description,
            "headingCount": self.heading_count,
            "wordCount": self.word_count,
        }
        if self.error:
            data["error"] = self.error
        return data


@dataclass
class TechnicalReport:
    sub_scores: dict[str, int]
    issues: list[str]
    recommendations: list[str]
    analysis_details: dict[str, Any]
    error: str | None = None

    @property
    def overall_score(self) -> int:
        return round_half_up(
            sum(self.sub_scores[name] for name in TECHNICAL_CATEGORIES)
            / len(TECHNICAL_CATEGORIES)
        )

    @property
    def failed(self) -> bool:
        return self.error is not None

    @classmethod
    def unavailable(cls, reason: str) -> "TechnicalReport":
        """Total-failure fallback used when the primary page can't be fetched."""
        return cls(
            sub_scores={name: 0 for name in TECHNICAL_CATEGORIES},
            issues=["Unable to analyze website technical aspects"],
            recommendations=["Website may be inaccessible or behind authentication"],
            analysis_details={},
            error=reason,
        )

    def to_dict(self) -> dict:
        data = {
            "overallScore": self.overall_score,
            "scores": dict(self.sub_scores),
            "issues": list(self.issues),
            "recommendations": list(self.recommendations),
            "analysis": dict(self.analysis_details),
        }
        if self.error:
            data["error"] = self.error
        return data


@dataclass
class GEOReport:
    factor_scores: dict[str, int]
    recommendations: list[str]
    insights: list[str]
    analysis: dict[str, Any] = field(default_factory=dict)
    error: str | None = None
    max_score: int = 100

    @property
    def score(self) -> int:
        return sum(self.factor_scores.values())

    @property
    def percentage(self) -> int:
        return round_half_up(self.score / self.max_score * 100)

    @classmethod
    def unavailable(cls, reason: str) -> "GEOReport":
        return cls(
            factor_scores={name: 0 for name in GEO_FACTORS},
            recommendations=["Unable to analyze website content for GEO optimization"],
            insights=[],
            error=reason,
        )

    def to_dict(self) -> dict:
        data = {
            "geoScore": self.score,
            "maxScore": self.max_score,
            "percentage": self.percentage,
            "factors": dict(self.factor_scores),
            "recommendations": list(self.recommendations),
            "insights": list(self.insights),
            "analysis": dict(self.analysis),
        }
        if self.error:
            data["error"] = self.error
        return data


@dataclass
class SERPReport:
    """Synthetic SERP profile. Not a measurement."""

    keyword: str
    location: str
    serp_type: str
    competition_score: int
    opportunity: str
    recommended_strategy: str
    serp_features: dict[str, Any]
    pivot_recommendations: list[dict[str, str]]
    analysis: dict[str, Any]
    simulated: bool = True

    def to_dict(self) -> dict:
        return {
            "keyword": self.keyword,
            "location": self.location,
            "serpType": self.serp_type,
            "competitionScore": self.competition_score,
            "opportunity": self.opportunity,
            "recommendedStrategy": self.recommended_strategy,
            "serpFeatures": dict(self.serp_features),
            "pivotRecommendations": list(self.pivot_recommendations),
            "analysis": dict(self.analysis),
            "simulated": self.simulated,
        }


@dataclass
class PageSpeedResult:
    score: int
    load_time: str


@dataclass
class AggregateReport:
    url: str
    timestamp: datetime
    scores: dict[str, int]
    technical: dict[str, Any]
    broken_links: list[BrokenLinkRecord]
    extracted_keywords: list[KeywordRecord]
    issues: list[str]
    opportunities: list[str]
    recommendations: list[str]
    geo: GEOReport | None = None

    def to_dict(self) -> dict:
        data = {
            "url": self.url,
            "timestamp": self.timestamp.isoformat(),
            "scores": dict(self.scores),
            "technical": dict(self.technical),
            "brokenLinks": [b.to_dict() for b in self.broken_links],
            "extractedKeywords": [k.to_dict() for k in self.extracted_keywords],
            "issues": list(self.issues),
            "opportunities": list(self.opportunities),
            "recommendations": list(self.recommendations),
        }
        if self.geo is not None:
            data["geo"] = self.geo.to_dict()
        return data
