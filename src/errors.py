"""Error taxonomy shared by the pipeline, the services and the API layer."""

import enum


class PageLensError(Exception):
    """Base class for all application errors."""


class InputError(PageLensError):
    """Missing or malformed request input. Raised before any fetch."""


class FetchErrorKind(str, enum.Enum):
    """Why a fetch failed."""

    TIMEOUT = "Timeout"
    CONNECTION_REFUSED = "ConnectionRefused"
    DNS_FAILURE = "DNSFailure"
    HTTP_ERROR = "HTTPError"
    INVALID_URL = "InvalidURL"


class FetchError(PageLensError):
    """The primary page could not be retrieved."""

    def __init__(
        self,
        kind: FetchErrorKind,
        url: str,
        message: str = "",
        status: int | None = None,
    ):
        self.kind = kind
        self.url = url
        self.status = status
        super().__init__(message or f"{kind.value} fetching {url}")


class AuxiliaryFetchError(FetchError):
    """A robots.txt, sitemap or link probe failed. Never reaches the caller."""


class ExternalServiceError(PageLensError):
    """A third-party scoring or completion service failed or timed out."""

    def __init__(self, service: str, message: str):
        self.service = service
        super().__init__(f"{service}: {message}")


class AccessDeniedError(PageLensError):
    """The caller is not entitled to run an analysis."""


class RegistrationError(PageLensError):
    """A signup webhook could not be turned into a customer record."""


class InternalError(PageLensError):
    """Unexpected fault inside a scorer. Fails the whole request."""


class InvalidCredentialsError(AccessDeniedError):
    """Unknown email, wrong access code, or a missing/unknown session token."""


class CustomerCapReachedError(RegistrationError):
    """No spots left for new customers."""
