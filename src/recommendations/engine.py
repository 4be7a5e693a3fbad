"""Aggregation of analyzer outputs into a single report."""

import logging
from datetime import datetime, timezone

from analyzers.models import (
    AggregateReport,
    GEOReport,
    KeywordReport,
    LinkAudit,
    PageSpeedResult,
    TechnicalReport,
)
from analyzers.scoring import clamp, round_half_up
from recommendations.rules import ISSUE_RULES, OPPORTUNITY_RULES, Rule

logger = logging.getLogger(__name__)

BASE_SCORE = 30
PAGE_SPEED_WEIGHT = 25
PRESENCE_BONUS = 8  # title, meta description, HTTPS
NO_BROKEN_LINKS_BONUS = 10
KEYWORD_RICHNESS_BONUS = 5
KEYWORD_RICHNESS_THRESHOLD = 5


class RecommendationEngine:
    """
    Merges analyzer outputs into an AggregateReport.

    The engine:
    1. Builds a unified context from all analyzers
    2. Evaluates issue and opportunity rules in their fixed order
    3. Derives the overall score
    4. Picks the recommendation list (AI when available, else technical)
    """

    def aggregate(
        self,
        url: str,
        technical: TechnicalReport,
        links: LinkAudit,
        keywords: KeywordReport,
        geo: GEOReport | None = None,
        ai_recommendations: list[str] | None = None,
        page_speed: PageSpeedResult | None = None,
        target_keyword: str | None = None,
    ) -> AggregateReport:
        context = self._build_context(technical, links, keywords, geo, page_speed)
        if target_keyword:
            context["targetKeyword"] = target_keyword
            context["targetKeywordFound"] = self._keyword_found(target_keyword, keywords)

        if technical.failed:
            # The diagnostic entry is the only meaningful issue when nothing loaded
            issues = list(technical.issues)
            opportunities = []
        else:
            issues = self._evaluate(ISSUE_RULES, context)
            opportunities = self._evaluate(OPPORTUNITY_RULES, context)

        scores = {"overall": self.overall_score(context)}
        scores["technical"] = technical.overall_score
        if geo is not None:
            scores["geo"] = geo.score
        if page_speed is not None:
            scores["pageSpeed"] = page_speed.score

        if ai_recommendations is not None:
            recommendations = list(ai_recommendations)
        else:
            recommendations = list(technical.recommendations)

        logger.info(
            f"Aggregated report for {url}: overall={scores['overall']}, "
            f"{len(issues)} issues, {len(opportunities)} opportunities"
        )

        return AggregateReport(
            url=url,
            timestamp=datetime.now(timezone.utc),
            scores=scores,
            technical=self._technical_summary(technical, links, page_speed),
            broken_links=list(links.broken_links),
            extracted_keywords=list(keywords.keywords),
            issues=issues,
            opportunities=opportunities,
            recommendations=recommendations,
            geo=geo,
        )

    def overall_score(self, context: dict) -> int:
        """30 base + page speed share + presence bonuses, clamped to 0-100."""
        score = BASE_SCORE
        technical = context["technical"]

        if context["pageSpeed"] is not None:
            score += context["pageSpeed"] / 100 * PAGE_SPEED_WEIGHT
        if technical.get("hasTitle"):
            score += PRESENCE_BONUS
        if technical.get("hasMetaDescription"):
            score += PRESENCE_BONUS
        if technical.get("hasHTTPS"):
            score += PRESENCE_BONUS
        if context["links"]["brokenCount"] == 0:
            score += NO_BROKEN_LINKS_BONUS
        if context["keywordCount"] >= KEYWORD_RICHNESS_THRESHOLD:
            score += KEYWORD_RICHNESS_BONUS

        return clamp(round_half_up(score))

    def _build_context(
        self,
        technical: TechnicalReport,
        links: LinkAudit,
        keywords: KeywordReport,
        geo: GEOReport | None,
        page_speed: PageSpeedResult | None,
    ) -> dict:
        return {
            "technical": dict(technical.analysis_details),
            "links": {
                "totalLinks": links.total_links,
                "brokenCount": len(links.broken_links),
                "deepLinkRatio": links.deep_link_ratio,
            },
            "keywordCount": len(keywords.keywords),
            "geo": geo.score if geo is not None and geo.error is None else None,
            "pageSpeed": page_speed.score if page_speed is not None else None,
        }

    @staticmethod
    def _keyword_found(target_keyword: str, keywords: KeywordReport) -> bool:
        """True when every significant word of the target is a ranked keyword."""
        ranked = {record.keyword for record in keywords.keywords}
        words = [word for word in target_keyword.lower().split() if len(word) > 2]
        return bool(words) and all(word in ranked for word in words)

    def _evaluate(self, rules: list[Rule], context: dict) -> list[str]:
        messages = []
        for rule in rules:
            if rule.condition(context):
                messages.append(rule.render(context))
                logger.debug(f"Rule triggered: {rule.id}")
        return messages

    def _technical_summary(
        self,
        technical: TechnicalReport,
        links: LinkAudit,
        page_speed: PageSpeedResult | None,
    ) -> dict:
        details = technical.analysis_details
        summary = {
            "hasTitle": details.get("hasTitle", False),
            "hasMetaDescription": details.get("hasMetaDescription", False),
            "hasH1": details.get("hasH1", False),
            "hasSchemaMarkup": details.get("hasStructuredData", False),
            "hasSSL": details.get("hasHTTPS", False),
            "imageCount": details.get("imageCount", 0),
            "linkCount": links.total_links,
            "totalLinks": links.total_links,
            "internalLinks": links.internal_count,
            "externalLinks": links.external_count,
            "deepLinkRatio": links.deep_link_ratio,
            **technical.to_dict(),
        }
        if page_speed is not None:
            summary["loadTime"] = page_speed.load_time
        return summary
