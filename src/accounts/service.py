"""Customer registration, access verification and entitlement checks."""

import logging
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from config import settings
from db.models import Customer
from db.repositories import CustomerRepository
from errors import CustomerCapReachedError, InvalidCredentialsError, RegistrationError

logger = logging.getLogger(__name__)

DEMO_EMAIL = "test@example.com"
DEMO_ACCESS_CODE = "TEST123"

# Serialises the spot check and insert across request threads
_registration_lock = threading.Lock()


@dataclass
class Registration:
    """Outcome of a signup webhook."""

    customer: Customer
    created: bool  # False when an existing customer was renewed


class AccountService:
    """
    Customer store operations.

    Customers are keyed by lowercased email, which doubles as the caller id
    handed to the analysis pipeline's entitlement check.
    """

    def __init__(self, session: Session):
        self.session = session
        self.customers = CustomerRepository(session)

    def register_from_webhook(
        self,
        contact: dict | None,
        payment: dict | None = None,
    ) -> Registration:
        """
        Provision (or renew) a customer from a payment-provider webhook.

        A fresh 8-character access code is issued every time. Renewing an
        existing email restarts the entitlement window and does not use a spot.
        The spot check, insert and commit run under a process-wide lock so
        concurrent webhooks cannot overshoot the customer limit.

        Raises:
            RegistrationError: the contact has no email
            CustomerCapReachedError: every spot is taken
        """
        email = ((contact or {}).get("email") or "").strip().lower()
        if not email:
            raise RegistrationError("Invalid webhook data")

        name = " ".join(
            part.strip()
            for part in ((contact or {}).get("firstName"), (contact or {}).get("lastName"))
            if part and part.strip()
        )
        amount = (payment or {}).get("amount") or settings.default_payment_amount
        access_code = secrets.token_hex(4).upper()

        with _registration_lock:
            existing = self.customers.get_by_email(email)
            if existing is not None:
                existing.access_code = access_code
                existing.issued_at = datetime.now(timezone.utc)
                existing.payment_amount = amount
                existing.session_token = None
                if name:
                    existing.name = name
                self.session.commit()
                logger.info(f"Renewed access for {email}")
                return Registration(customer=existing, created=False)

            if self.spots_left() <= 0:
                logger.warning(f"Rejected registration for {email}: customer limit reached")
                raise CustomerCapReachedError("No spots left")

            customer = self.customers.create(
                email=email,
                name=name,
                access_code=access_code,
                payment_amount=amount,
            )
            self.session.commit()
        logger.info(f"New customer registration: {email}")
        return Registration(customer=customer, created=True)

    def verify_access(self, email: str, access_code: str) -> tuple[str, Customer]:
        """
        Exchange an email and access code for a session token.

        Raises:
            InvalidCredentialsError: unknown email or wrong code
        """
        logger.info(f"Access verification attempt for {email}")
        customer = self.customers.get_by_email(email.strip())
        if customer is None:
            raise InvalidCredentialsError(
                "Access code not found. Please check your email or purchase access."
            )
        if not secrets.compare_digest(
            customer.access_code.encode(), access_code.strip().encode()
        ):
            raise InvalidCredentialsError(
                "Invalid access code. Please check your email for the correct code."
            )

        token = secrets.token_hex(32)
        self.customers.start_session(customer, token)
        return token, customer

    def customer_for_token(self, token: str | None) -> Customer:
        """Resolve a bearer token to its customer."""
        if not token:
            raise InvalidCredentialsError("Access token required")
        customer = self.customers.get_by_token(token)
        if customer is None:
            raise InvalidCredentialsError("Invalid or expired token")
        return customer

    def is_entitled(self, customer_id: str) -> bool:
        """True when the customer exists and is inside the validity window."""
        customer = self.customers.get_by_email(customer_id)
        if customer is None:
            return False
        return datetime.now(timezone.utc) < self.access_expires_at(customer)

    @staticmethod
    def access_expires_at(customer: Customer) -> datetime:
        issued_at = customer.issued_at
        # SQLite hands back naive datetimes
        if issued_at.tzinfo is None:
            issued_at = issued_at.replace(tzinfo=timezone.utc)
        return issued_at + timedelta(days=settings.access_validity_days)

    def customer_count(self) -> int:
        return self.customers.count()

    def spots_left(self) -> int:
        return max(0, settings.max_customers - self.customer_count())

    def seed_demo_customer(self) -> None:
        """Create the demo account if it is missing."""
        if self.customers.get_by_email(DEMO_EMAIL) is not None:
            return
        self.customers.create(
            email=DEMO_EMAIL,
            name="Test User",
            access_code=DEMO_ACCESS_CODE,
            payment_amount=settings.default_payment_amount,
        )
        logger.info(f"Seeded demo customer {DEMO_EMAIL}")
