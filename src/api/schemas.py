"""Pydantic schemas for API request/response validation."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# URL fields stay plain strings: the pipeline validates them so that a bad
# URL produces the same 400 envelope as a missing one.


# =============================================================================
# Request Schemas (what clients send to us)
# =============================================================================


class CamelModel(BaseModel):
    """Accepts camelCase aliases as well as field names."""

    model_config = ConfigDict(populate_by_name=True)


class UrlRequest(CamelModel):
    """Request body for single-URL analyses."""

    url: str | None = Field(
        default=None,
        description="Absolute http(s) URL of the page to analyze",
        examples=["https://example.com"],
    )


class SEOAnalysisRequest(UrlRequest):
    """Request body for the full SEO analysis."""

    keywords: str | None = Field(
        default=None,
        description="Optional target keyword",
        examples=["running shoes"],
    )
    topic: str | None = Field(
        default=None,
        description="Optional topic for the GEO recommendations",
        examples=["home espresso"],
    )
    customer_id: str | None = Field(
        default=None,
        alias="customerId",
        description="Customer email; when given, entitlement is checked",
    )


class GEOAnalysisRequest(UrlRequest):
    """Request body for GEO analysis."""

    topic: str | None = Field(default=None, examples=["home espresso"])


class SERPCompetitionRequest(CamelModel):
    """Request body for the simulated SERP competition profile."""

    keyword: str | None = Field(default=None, examples=["running shoes"])
    location: str | None = Field(default=None, examples=["United States"])


class VerifyAccessRequest(CamelModel):
    """Email plus the access code from the signup email."""

    email: str | None = None
    access_code: str | None = Field(default=None, alias="accessCode")


class WebhookContact(CamelModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    email: str | None = None
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")


class WebhookPayment(CamelModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    amount: float | None = None


class SignupWebhookRequest(CamelModel):
    """Payload posted by the payment provider after checkout."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    contact: WebhookContact | None = None
    payment: WebhookPayment | None = None


# =============================================================================
# Response Schemas (what we send back to clients)
# =============================================================================


class Envelope(BaseModel):
    """Every endpoint answers with this shape."""

    success: bool = True
    data: Any = None
    message: str | None = None


class AccountResponse(BaseModel):
    """Public view of a customer."""

    email: str
    name: str
    join_date: datetime = Field(serialization_alias="joinDate")
    access_expires_at: datetime = Field(serialization_alias="accessExpiresAt")
    last_login: datetime | None = Field(default=None, serialization_alias="lastLogin")


class ServiceInfoResponse(BaseModel):
    """Root endpoint payload."""

    service: str
    docs: str = "/docs"
    health: str = "/api/v1/health"
    customers: int
    max_customers: int = Field(serialization_alias="maxCustomers")
    spots_left: int = Field(serialization_alias="spotsLeft")
    features: list[str]


# =============================================================================
# Health Check
# =============================================================================


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str = "healthy"
    service: str = "pagelens"
    version: str = "0.1.0"
    page_speed_enabled: bool = Field(default=False, serialization_alias="pageSpeedEnabled")
    completion_enabled: bool = Field(default=False, serialization_alias="completionEnabled")
