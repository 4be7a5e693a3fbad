"""Outbound link extraction and broken-link probing."""

import logging
from concurrent.futures import ThreadPoolExecutor
from urllib.parse import urldefrag, urljoin, urlparse

from bs4 import BeautifulSoup

from analyzers.extractor import strip_scripts
from analyzers.fetcher import Fetcher
from analyzers.models import BrokenLinkRecord, LinkAudit, LinkRecord
from analyzers.scoring import round_half_up
from config import settings
from errors import AuxiliaryFetchError

logger = logging.getLogger(__name__)

SKIPPED_PREFIXES = ("#", "mailto:", "tel:", "javascript:")


def _same_page(url: str, other: str) -> bool:
    return urldefrag(url)[0].rstrip("/") == urldefrag(other)[0].rstrip("/")


class LinkAuditor:
    """
    Finds the anchors on a page and checks whether they still resolve.

    Only the first ``probe_limit`` links (document order) are probed, so two
    audits of identical markup probe the same set. Each probe is isolated:
    a timeout or refused connection marks that link broken and the rest of
    the batch carries on.
    """

    def __init__(self, fetcher: Fetcher | None = None):
        self.fetcher = fetcher or Fetcher()

    def extract_links(self, base_url: str, markup: str) -> list[LinkRecord]:
        """Anchors in document order, resolved to absolute URLs. Not deduplicated."""
        soup = BeautifulSoup(strip_scripts(markup or ""), "lxml")
        base_host = urlparse(base_url).hostname

        links = []
        for anchor in soup.find_all("a", href=True):
            href = anchor.get("href", "").strip()
            if not href or href.lower().startswith(SKIPPED_PREFIXES):
                continue

            full_url = urljoin(base_url, href)
            parsed = urlparse(full_url)
            if parsed.scheme not in ("http", "https") or not parsed.hostname:
                continue

            links.append(
                LinkRecord(
                    url=full_url,
                    anchor_text=anchor.get_text(" ", strip=True),
                    is_internal=parsed.hostname == base_host,
                )
            )

        return links

    def audit(
        self,
        base_url: str,
        markup: str,
        probe_limit: int | None = None,
        probe_timeout: float | None = None,
        concurrency: int | None = None,
    ) -> LinkAudit:
        """
        Extract links from markup and probe the first ``probe_limit`` of them.

        Args:
            base_url: URL the markup was fetched from
            markup: Raw page markup
            probe_limit: How many links to probe (default: settings.probe_limit)
            probe_timeout: Per-probe timeout in seconds
            concurrency: Max probes in flight

        Returns:
            LinkAudit with all links, broken ones and the deep-link ratio
        """
        probe_limit = settings.probe_limit if probe_limit is None else probe_limit
        probe_timeout = settings.probe_timeout if probe_timeout is None else probe_timeout
        concurrency = concurrency or settings.probe_concurrency

        links = self.extract_links(base_url, markup)
        to_check = links[:probe_limit]

        broken = []
        if to_check:
            with self.fetcher.client(
                timeout=probe_timeout,
                max_redirects=settings.probe_max_redirects,
            ) as client, ThreadPoolExecutor(max_workers=concurrency) as pool:
                # map() keeps document order in the results
                results = pool.map(lambda link: self._probe_link(client, link), to_check)
                broken = [record for record in results if record is not None]

        logger.info(
            f"Link audit for {base_url}: {len(links)} links, "
            f"{len(to_check)} checked, {len(broken)} broken"
        )

        return LinkAudit(
            links=links,
            broken_links=broken,
            checked_links=len(to_check),
            deep_link_ratio=self.deep_link_ratio(base_url, links),
        )

    def _probe_link(self, client, link: LinkRecord) -> BrokenLinkRecord | None:
        """Probe one link; return a BrokenLinkRecord or None if it resolves."""
        try:
            status = self.fetcher.probe(client, link.url)
        except AuxiliaryFetchError as e:
            logger.debug(f"Probe failed for {link.url}: {e}")
            return BrokenLinkRecord(
                url=link.url,
                status=0,
                anchor_text=link.anchor_text,
                is_internal=link.is_internal,
                error=e.kind.value,
            )

        if status >= 400:
            return BrokenLinkRecord(
                url=link.url,
                status=status,
                anchor_text=link.anchor_text,
                is_internal=link.is_internal,
                error=f"HTTP {status}",
            )
        return None

    @staticmethod
    def deep_link_ratio(base_url: str, links: list[LinkRecord]) -> int:
        """Percent of all links that are internal and point away from base_url."""
        if not links:
            return 0
        deep = sum(
            1 for link in links if link.is_internal and not _same_page(link.url, base_url)
        )
        return round_half_up(deep / len(links) * 100)
