"""Repository pattern for database operations."""

from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from db.models import Customer


class CustomerRepository:
    """Handles all Customer-related database operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(
        self,
        email: str,
        name: str,
        access_code: str,
        payment_amount: float,
        issued_at: datetime | None = None,
    ) -> Customer:
        """Create a new customer record."""
        customer = Customer(
            email=email.lower(),
            name=name,
            access_code=access_code,
            payment_amount=payment_amount,
            issued_at=issued_at or datetime.now(timezone.utc),
        )
        self.session.add(customer)
        self.session.flush()  # Assigns the ID without committing
        return customer

    def get_by_email(self, email: str) -> Customer | None:
        """Retrieve a customer by email (case-insensitive)."""
        result = self.session.execute(
            select(Customer).where(Customer.email == email.lower())
        )
        return result.scalar_one_or_none()

    def get_by_token(self, token: str) -> Customer | None:
        """Retrieve the customer holding a session token."""
        result = self.session.execute(
            select(Customer).where(Customer.session_token == token)
        )
        return result.scalar_one_or_none()

    def count(self) -> int:
        """Number of registered customers."""
        return self.session.execute(select(func.count(Customer.id))).scalar_one()

    def start_session(self, customer: Customer, token: str) -> Customer:
        """Store a fresh session token and login time."""
        customer.session_token = token
        customer.last_login = datetime.now(timezone.utc)
        self.session.flush()
        return customer
