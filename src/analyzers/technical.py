"""Technical SEO scoring."""

import logging
import re
from dataclasses import dataclass
from urllib.parse import urljoin, urlparse

from analyzers.fetcher import Fetcher
from analyzers.models import (
    TECHNICAL_CATEGORIES,
    FetchResult,
    PageSignals,
    TechnicalReport,
)
from analyzers.scoring import clamp, round_half_up
from errors import AuxiliaryFetchError

logger = logging.getLogger(__name__)

MIXED_CONTENT_RE = re.compile(
    r"\bsrc\s*=\s*[\"']?http://|<link[^>]+href\s*=\s*[\"']?http://",
    re.IGNORECASE,
)

MAX_RECOMMENDATIONS = 8
NEUTRAL_SPEED_SCORE = 50


@dataclass
class AuxiliarySignals:
    """Results of the robots.txt and sitemap.xml lookups."""

    robots_txt_reachable: bool = False
    robots_has_sitemap_directive: bool = False
    sitemap_reachable_and_valid: bool = False


class TechnicalScorer:
    """
    Scores a page across six technical categories.

    Categories (each 0-100, additive points from a fixed base):
    - crawlability: robots.txt, sitemap, robots directives
    - mobileFriendly: viewport, responsive hints, Flash
    - siteSpeed: external page-speed score, neutral 50 otherwise
    - security: HTTPS, security headers, mixed content
    - htmlStructure: title, H1, meta description, lang, image alt text
    - metaData: charset, Open Graph, Twitter card, canonical, JSON-LD

    Checks run in a fixed order so issue and recommendation lists are
    reproducible for identical input.
    """

    def __init__(self, fetcher: Fetcher | None = None):
        self.fetcher = fetcher or Fetcher()

    def check_auxiliary(self, url: str) -> AuxiliarySignals:
        """Look up robots.txt and sitemap.xml. Failures become absence flags."""
        signals = AuxiliarySignals()

        try:
            robots = self.fetcher.fetch_auxiliary(urljoin(url, "/robots.txt"))
            if robots.status == 200:
                signals.robots_txt_reachable = True
                signals.robots_has_sitemap_directive = "sitemap:" in robots.body.lower()
        except AuxiliaryFetchError as e:
            logger.debug(f"robots.txt unavailable for {url}: {e}")

        try:
            sitemap = self.fetcher.fetch_auxiliary(urljoin(url, "/sitemap.xml"))
            body = sitemap.body.lower()
            signals.sitemap_reachable_and_valid = sitemap.status == 200 and (
                "<urlset" in body or "<sitemapindex" in body
            )
        except AuxiliaryFetchError as e:
            logger.debug(f"sitemap.xml unavailable for {url}: {e}")

        return signals

    def score(
        self,
        url: str,
        fetch_result: FetchResult,
        signals: PageSignals,
        auxiliary: AuxiliarySignals,
        page_speed: int | None = None,
    ) -> TechnicalReport:
        """
        Score a fetched page.

        Args:
            url: Requested URL
            fetch_result: Primary page response
            signals: Extractor output for the response body
            auxiliary: robots.txt / sitemap lookups
            page_speed: External page-speed score, if one was obtained

        Returns:
            TechnicalReport with six sub-scores, issues and recommendations
        """
        page_url = fetch_result.final_url or url
        is_https = urlparse(page_url).scheme == "https"
        markup = fetch_result.body.lower()

        checks = {
            "crawlability": self._check_crawlability(signals, auxiliary, fetch_result),
            "mobileFriendly": self._check_mobile(signals, markup),
            "security": self._check_security(is_https, fetch_result, markup),
            "htmlStructure": self._check_structure(signals),
            "metaData": self._check_metadata(signals),
            "siteSpeed": self._check_speed(page_speed),
        }

        sub_scores = {name: checks[name]["score"] for name in TECHNICAL_CATEGORIES}

        issues = []
        recommendations = []
        for check in checks.values():
            issues.extend(check["issues"])
            recommendations.extend(check["recommendations"])

        recommendations.extend(self._summary_recommendations(sub_scores))

        images = len(signals.images)
        with_alt = signals.images_with_alt
        details = {
            "imageCount": images,
            "imagesWithAlt": with_alt,
            "altTextRatio": round_half_up(self._alt_ratio(signals)),
            "hasRobotsTxt": auxiliary.robots_txt_reachable,
            "hasXMLSitemap": auxiliary.sitemap_reachable_and_valid,
            "hasHTTPS": is_https,
            "hasViewport": signals.has_viewport,
            "hasCanonical": signals.has_canonical,
            "hasStructuredData": signals.has_structured_data,
            "ogTagsCount": signals.og_tag_count,
            "hasTwitterCard": signals.has_twitter_card,
            "hasTitle": signals.has_title,
            "hasMetaDescription": signals.has_meta_description,
            "hasH1": signals.has_h1,
        }

        return TechnicalReport(
            sub_scores=sub_scores,
            issues=issues,
            recommendations=recommendations[:MAX_RECOMMENDATIONS],
            analysis_details=details,
        )

    def _check_crawlability(
        self,
        signals: PageSignals,
        auxiliary: AuxiliarySignals,
        fetch_result: FetchResult,
    ) -> dict:
        result = {"score": 50, "issues": [], "recommendations": []}

        if auxiliary.robots_txt_reachable:
            result["score"] += 15
            if auxiliary.robots_has_sitemap_directive:
                result["score"] += 10
        else:
            result["issues"].append("No robots.txt file found")
            result["recommendations"].append(
                "Create a robots.txt file to guide search engine crawlers"
            )

        if auxiliary.sitemap_reachable_and_valid:
            result["score"] += 15
        else:
            result["issues"].append("No XML sitemap found")
            result["recommendations"].append(
                "Create an XML sitemap to help search engines discover your pages"
            )

        x_robots = fetch_result.headers.get("x-robots-tag", "").lower()
        if signals.robots_meta is not None or x_robots:
            directives = f"{signals.robots_meta or ''} {x_robots}"
            if "noindex" in directives or "nofollow" in directives:
                result["issues"].append("Robots directives block indexing or link following")
            else:
                result["score"] += 10
        else:
            result["score"] += 5  # crawlable by default

        result["score"] = clamp(result["score"])
        return result

    def _check_mobile(self, signals: PageSignals, markup: str) -> dict:
        result = {"score": 30, "issues": [], "recommendations": []}

        if signals.has_viewport:
            result["score"] += 25
            if signals.has_device_width:
                result["score"] += 15
        else:
            result["issues"].append("Missing viewport meta tag")
            result["recommendations"].append(
                "Add viewport meta tag for mobile responsiveness"
            )

        if "@media" in markup or "responsive" in markup or "mobile" in markup:
            result["score"] += 15

        if ".swf" in markup or "shockwave-flash" in markup:
            result["score"] -= 20
            result["issues"].append("Flash content detected (not mobile-friendly)")

        result["score"] = clamp(result["score"])
        return result

    def _check_security(
        self,
        is_https: bool,
        fetch_result: FetchResult,
        markup: str,
    ) -> dict:
        result = {"score": 0, "issues": [], "recommendations": []}
        headers = fetch_result.headers

        if is_https:
            result["score"] += 30
        else:
            result["issues"].append("Website not using HTTPS")
            result["recommendations"].append(
                "Migrate to HTTPS for security and SEO benefits"
            )

        if "strict-transport-security" in headers:
            result["score"] += 15
        if "x-frame-options" in headers:
            result["score"] += 10
        if "x-content-type-options" in headers:
            result["score"] += 10
        if "content-security-policy" in headers:
            result["score"] += 15

        if is_https and MIXED_CONTENT_RE.search(markup):
            result["score"] -= 10
            result["issues"].append(
                "Mixed content detected (HTTP resources on HTTPS page)"
            )

        if "password" not in markup or 'autocomplete="off"' in markup:
            result["score"] += 10

        result["score"] = clamp(result["score"])
        return result

    def _check_structure(self, signals: PageSignals) -> dict:
        result = {"score": 20, "issues": [], "recommendations": []}

        if signals.has_title:
            result["score"] += 15
            if len(signals.title) <= 60:
                result["score"] += 5
        else:
            result["issues"].append("Missing or empty title tag")

        if signals.has_h1:
            result["score"] += 15
        else:
            result["issues"].append("Missing H1 heading")

        if signals.has_meta_description:
            result["score"] += 15
        else:
            result["issues"].append("Missing meta description")

        if signals.has_lang:
            result["score"] += 10
        else:
            result["recommendations"].append("Add language declaration to HTML tag")

        alt_ratio = self._alt_ratio(signals)
        if alt_ratio >= 80:
            result["score"] += 15
        elif alt_ratio >= 50:
            result["score"] += 8
        else:
            result["issues"].append(
                f"{round_half_up(100 - alt_ratio)}% of images missing alt text"
            )

        result["score"] = clamp(result["score"])
        return result

    def _check_metadata(self, signals: PageSignals) -> dict:
        result = {"score": 20, "issues": [], "recommendations": []}

        if signals.has_charset:
            result["score"] += 10

        result["score"] += signals.og_tag_count * 5

        if signals.has_twitter_card:
            result["score"] += 10

        if signals.has_canonical:
            result["score"] += 15
        else:
            result["recommendations"].append(
                "Add canonical URL to prevent duplicate content issues"
            )

        if signals.has_structured_data:
            result["score"] += 20
        else:
            result["recommendations"].append(
                "Add structured data (JSON-LD) for rich snippets"
            )

        result["score"] = clamp(result["score"])
        return result

    def _check_speed(self, page_speed: int | None) -> dict:
        score = NEUTRAL_SPEED_SCORE if page_speed is None else clamp(page_speed)
        return {"score": score, "issues": [], "recommendations": []}

    def _summary_recommendations(self, sub_scores: dict[str, int]) -> list[str]:
        recommendations = []
        if sub_scores["crawlability"] < 70:
            recommendations.append(
                "Improve crawlability by adding robots.txt and XML sitemap"
            )
        if sub_scores["mobileFriendly"] < 80:
            recommendations.append("Enhance mobile-friendliness with responsive design")
        if sub_scores["security"] < 80:
            recommendations.append(
                "Strengthen security with HTTPS and security headers"
            )
        if sub_scores["htmlStructure"] < 80:
            recommendations.append(
                "Fix HTML structure issues and add missing meta tags"
            )
        return recommendations

    @staticmethod
    def _alt_ratio(signals: PageSignals) -> float:
        if not signals.images:
            return 100.0
        return signals.images_with_alt / len(signals.images) * 100
