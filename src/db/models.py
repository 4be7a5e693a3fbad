"""SQLAlchemy database models for PageLens."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, String, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class Customer(Base):
    """
    A paying customer provisioned by the signup webhook.

    The access code is mailed to the customer and exchanged for a session
    token by /verify-access. Entitlement runs from ``issued_at`` for the
    configured validity window.
    """

    __tablename__ = "customers"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # Identity (stored lowercased)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    # Credential material
    access_code: Mapped[str] = mapped_column(String(32), nullable=False)
    session_token: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
        index=True,
    )

    payment_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    # Entitlement window starts here
    issued_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
    last_login: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
