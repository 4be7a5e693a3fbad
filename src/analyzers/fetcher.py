"""HTTP fetching shared by every analyzer."""

import logging
from urllib.parse import urlparse

import httpx

from analyzers.models import FetchResult
from config import settings
from errors import AuxiliaryFetchError, FetchError, FetchErrorKind

logger = logging.getLogger(__name__)

_DNS_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "temporary failure in name resolution",
    "no address associated",
)


def is_absolute_http_url(url: str | None) -> bool:
    """True for absolute http(s) URLs with a host."""
    if not url or not isinstance(url, str):
        return False
    parsed = urlparse(url.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def classify_error(exc: Exception) -> FetchErrorKind:
    """Map an httpx exception onto a FetchErrorKind."""
    if isinstance(exc, httpx.TimeoutException):
        return FetchErrorKind.TIMEOUT
    if isinstance(exc, httpx.ConnectError):
        message = str(exc).lower()
        if any(marker in message for marker in _DNS_MARKERS):
            return FetchErrorKind.DNS_FAILURE
        return FetchErrorKind.CONNECTION_REFUSED
    if isinstance(exc, (httpx.TooManyRedirects, httpx.HTTPStatusError)):
        return FetchErrorKind.HTTP_ERROR
    if isinstance(exc, (httpx.UnsupportedProtocol, httpx.InvalidURL)):
        return FetchErrorKind.INVALID_URL
    return FetchErrorKind.CONNECTION_REFUSED


class Fetcher:
    """
    Retrieves pages over HTTP.

    Every request carries an identifying User-Agent so site operators can
    recognise automated probes. Redirects are followed up to a bounded count.
    Failures are never retried; callers degrade instead.

    A transport can be injected (e.g. ``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        transport: httpx.BaseTransport | None = None,
        user_agent: str | None = None,
    ):
        self.transport = transport
        self.user_agent = user_agent or settings.user_agent

    def client(
        self,
        timeout: float | None = None,
        max_redirects: int | None = None,
        identify_as: str | None = None,
    ) -> httpx.Client:
        """Build a client with the fetcher's identification and limits."""
        return httpx.Client(
            timeout=timeout if timeout is not None else settings.fetch_timeout,
            follow_redirects=True,
            max_redirects=(
                max_redirects if max_redirects is not None else settings.max_redirects
            ),
            headers={"User-Agent": identify_as or self.user_agent},
            transport=self.transport,
        )

    def fetch(
        self,
        url: str,
        timeout: float | None = None,
        max_redirects: int | None = None,
        identify_as: str | None = None,
        raise_for_status: bool = True,
    ) -> FetchResult:
        """
        Fetch a URL and return its status, headers, body and final URL.

        Args:
            url: Absolute http(s) URL
            timeout: Seconds before giving up (default: settings.fetch_timeout)
            max_redirects: Redirect hops allowed (default: settings.max_redirects)
            identify_as: User-Agent override
            raise_for_status: Treat status >= 400 as a failure

        Raises:
            FetchError: on timeout, DNS/connection failure, HTTP error status
                or an unusable URL
        """
        if not is_absolute_http_url(url):
            raise FetchError(FetchErrorKind.INVALID_URL, str(url), f"Invalid URL: {url}")

        try:
            with self.client(timeout, max_redirects, identify_as) as client:
                response = client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            kind = classify_error(e)
            logger.debug(f"Fetch failed for {url}: {kind.value} ({e})")
            raise FetchError(kind, url, f"{kind.value} fetching {url}: {e}") from e

        if raise_for_status and response.status_code >= 400:
            raise FetchError(
                FetchErrorKind.HTTP_ERROR,
                url,
                f"HTTP {response.status_code} fetching {url}",
                status=response.status_code,
            )

        return FetchResult(
            status=response.status_code,
            headers=response.headers,
            body=response.text,
            final_url=str(response.url),
        )

    def fetch_auxiliary(self, url: str, timeout: float | None = None) -> FetchResult:
        """Fetch a secondary resource such as robots.txt or a sitemap."""
        try:
            return self.fetch(
                url,
                timeout=timeout if timeout is not None else settings.auxiliary_timeout,
            )
        except FetchError as e:
            raise AuxiliaryFetchError(e.kind, url, str(e), status=e.status) from e

    def probe(self, client: httpx.Client, url: str) -> int:
        """
        Issue a HEAD request and return the final status code.

        Raises:
            AuxiliaryFetchError: on any transport-level failure
        """
        try:
            response = client.head(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            kind = classify_error(e)
            raise AuxiliaryFetchError(kind, url, f"{kind.value} probing {url}: {e}") from e
        return response.status_code
