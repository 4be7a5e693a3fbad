"""Clients for third-party scoring and completion services."""

from services.completion import CANNED_RECOMMENDATIONS, CompletionClient
from services.pagespeed import PageSpeedClient

__all__ = [
    "CANNED_RECOMMENDATIONS",
    "CompletionClient",
    "PageSpeedClient",
]
