"""Coordinates the analyzers for a single request."""

import functools
import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

from analyzers.extractor import extract
from analyzers.fetcher import Fetcher, is_absolute_http_url
from analyzers.geo import GEOScorer
from analyzers.keywords import extract_keywords
from analyzers.links import LinkAuditor
from analyzers.models import (
    AggregateReport,
    AnalysisRequest,
    FetchResult,
    GEOReport,
    KeywordReport,
    LinkAudit,
    PageSignals,
    PageSpeedResult,
    SERPReport,
    TechnicalReport,
)
from analyzers.serp import SERPSimulator
from analyzers.technical import NEUTRAL_SPEED_SCORE, TechnicalScorer
from errors import (
    AccessDeniedError,
    ExternalServiceError,
    FetchError,
    InputError,
    InternalError,
    PageLensError,
)
from recommendations.engine import RecommendationEngine
from services.completion import CANNED_RECOMMENDATIONS, CompletionClient
from services.pagespeed import PageSpeedClient

logger = logging.getLogger(__name__)

# Primary fetch is done; these run side by side: link probes, robots/sitemap,
# page speed, completion
FAN_OUT_WORKERS = 4


def _internal_errors(method):
    """Let expected errors through; turn anything else into InternalError."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except PageLensError:
            raise
        except Exception as e:
            logger.exception(f"{method.__name__} failed: {e}")
            raise InternalError("Analysis failed due to an internal error") from e

    return wrapper


class AnalysisPipeline:
    """
    Runs the page-analysis pipeline.

    The primary page is fetched once; every analyzer then works from that
    response (fetching its own auxiliary resources where needed). An analyzer
    that cannot do its job returns its documented degraded report instead of
    failing the request. Only InputError, AccessDeniedError and InternalError
    reach the caller.
    """

    def __init__(
        self,
        fetcher: Fetcher | None = None,
        page_speed: PageSpeedClient | None = None,
        completion: CompletionClient | None = None,
        entitlement: Callable[[str], bool] | None = None,
        serp: SERPSimulator | None = None,
    ):
        self.fetcher = fetcher or Fetcher()
        self.link_auditor = LinkAuditor(self.fetcher)
        self.technical = TechnicalScorer(self.fetcher)
        self.geo = GEOScorer()
        self.serp = serp or SERPSimulator()
        self.engine = RecommendationEngine()
        self.page_speed = page_speed or PageSpeedClient()
        self.completion = completion or CompletionClient()
        self.entitlement = entitlement

    # ------------------------------------------------------------------
    # Full analysis
    # ------------------------------------------------------------------

    @_internal_errors
    def analyze(self, request: AnalysisRequest) -> AggregateReport:
        """
        Run every analyzer against a URL and merge the results.

        Raises:
            InputError: the URL is missing or not absolute http(s)
            AccessDeniedError: a caller id was given and is not entitled
            InternalError: an analyzer hit an unexpected fault
        """
        url = self._validate_url(request.url)
        self._check_entitlement(request.caller_id)

        logger.info(f"Running SEO analysis for {url}")
        page, error = self._fetch_primary(url)

        with ThreadPoolExecutor(max_workers=FAN_OUT_WORKERS) as pool:
            speed_future = (
                pool.submit(self._measure_page_speed, url)
                if self.page_speed.enabled
                else None
            )

            if page is None:
                technical = TechnicalReport.unavailable(error)
                links = LinkAudit(error=error)
                keywords = KeywordReport(error=error)
                geo = GEOReport.unavailable(error)
                ai_recommendations = None
                page_speed = speed_future.result() if speed_future else None
            else:
                links_future = pool.submit(
                    self.link_auditor.audit, page.final_url, page.body
                )
                auxiliary_future = pool.submit(
                    self.technical.check_auxiliary, page.final_url
                )

                signals = extract(page.body)
                ai_future = (
                    pool.submit(self._ai_recommendations, signals.visible_text)
                    if self.completion.enabled
                    else None
                )

                keywords = self._keyword_report(signals)
                geo = self.geo.score_signals(signals, request.topic)

                page_speed = speed_future.result() if speed_future else None
                technical = self.technical.score(
                    url,
                    page,
                    signals,
                    auxiliary_future.result(),
                    page_speed.score if page_speed else None,
                )
                links = links_future.result()
                ai_recommendations = ai_future.result() if ai_future else None

        return self.engine.aggregate(
            url,
            technical,
            links,
            keywords,
            geo=geo,
            ai_recommendations=ai_recommendations,
            page_speed=page_speed,
            target_keyword=request.keyword,
        )

    # ------------------------------------------------------------------
    # Single-analyzer operations
    # ------------------------------------------------------------------

    @_internal_errors
    def audit_links(self, url: str | None) -> LinkAudit:
        """Broken-link audit only."""
        url = self._validate_url(url)
        logger.info(f"Analyzing broken links for {url}")

        page, error = self._fetch_primary(url)
        if page is None:
            return LinkAudit(error=error)
        return self.link_auditor.audit(page.final_url, page.body)

    @_internal_errors
    def extract_keywords(self, url: str | None) -> KeywordReport:
        """Keyword extraction only."""
        url = self._validate_url(url)
        logger.info(f"Extracting keywords for {url}")

        page, error = self._fetch_primary(url)
        if page is None:
            return KeywordReport(error=error)
        return self._keyword_report(extract(page.body))

    @_internal_errors
    def analyze_technical(self, url: str | None) -> TechnicalReport:
        """Technical SEO scoring only."""
        url = self._validate_url(url)
        logger.info(f"Running technical SEO analysis for {url}")

        page, error = self._fetch_primary(url)
        if page is None:
            return TechnicalReport.unavailable(error)

        with ThreadPoolExecutor(max_workers=2) as pool:
            auxiliary_future = pool.submit(self.technical.check_auxiliary, page.final_url)
            speed_future = (
                pool.submit(self._measure_page_speed, url)
                if self.page_speed.enabled
                else None
            )
            signals = extract(page.body)
            page_speed = speed_future.result() if speed_future else None
            return self.technical.score(
                url,
                page,
                signals,
                auxiliary_future.result(),
                page_speed.score if page_speed else None,
            )

    @_internal_errors
    def analyze_geo(self, url: str | None, topic: str | None = None) -> GEOReport:
        """GEO scoring only."""
        url = self._validate_url(url)
        logger.info(f"Running GEO analysis for {url}")

        page, error = self._fetch_primary(url)
        if page is None:
            return GEOReport.unavailable(error)
        return self.geo.score(page.body, topic)

    @_internal_errors
    def simulate_serp(
        self,
        keyword: str | None,
        location: str | None = None,
    ) -> SERPReport:
        """Synthetic SERP competition profile. No search engine is queried."""
        if not keyword or not keyword.strip():
            raise InputError("Keyword is required")
        return self.serp.simulate(keyword.strip(), location or "United States")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _validate_url(self, url: str | None) -> str:
        if not url or not str(url).strip():
            raise InputError("URL is required")
        url = str(url).strip()
        if not is_absolute_http_url(url):
            raise InputError(f"URL must be an absolute http(s) URL: {url}")
        return url

    def _check_entitlement(self, caller_id: str | None) -> None:
        if not caller_id or self.entitlement is None:
            return
        if not self.entitlement(caller_id):
            logger.warning(f"Caller {caller_id} is not entitled to run an analysis")
            raise AccessDeniedError("Access expired or not found for this customer")

    def _fetch_primary(self, url: str) -> tuple[FetchResult | None, str | None]:
        """Fetch the page under analysis; on failure return (None, reason)."""
        try:
            return self.fetcher.fetch(url), None
        except FetchError as e:
            logger.error(f"Primary fetch failed for {url}: {e}")
            return None, str(e)

    def _keyword_report(self, signals: PageSignals) -> KeywordReport:
        keywords, word_count = extract_keywords(
            signals.title,
            [heading.text for heading in signals.headings],
            signals.meta_description,
            signals.body_text,
        )
        return KeywordReport(
            keywords=keywords,
            word_count=word_count,
            title=signals.title,
            meta_description=signals.meta_description,
            heading_count=len(signals.headings),
        )

    def _measure_page_speed(self, url: str) -> PageSpeedResult:
        try:
            return self.page_speed.measure(url)
        except ExternalServiceError as e:
            logger.warning(f"PageSpeed unavailable for {url}: {e}")
            return PageSpeedResult(score=NEUTRAL_SPEED_SCORE, load_time="Unknown")

    def _ai_recommendations(self, text: str) -> list[str]:
        try:
            return self.completion.recommend(text)
        except ExternalServiceError as e:
            logger.warning(f"AI recommendations unavailable: {e}")
            return list(CANNED_RECOMMENDATIONS)
