import re
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.orm import sessionmaker

from accounts import AccountService
from accounts.service import DEMO_ACCESS_CODE, DEMO_EMAIL
from config import settings
from db.models import Base
from db.session import build_engine
from errors import CustomerCapReachedError, InvalidCredentialsError, RegistrationError


@pytest.fixture
def accounts(db_session):
    return AccountService(db_session)


def register(accounts, email="Jane@Example.com", **payment):
    return accounts.register_from_webhook(
        {"email": email, "firstName": "Jane", "lastName": "Doe"}, payment or None
    )


def test_register_from_webhook(accounts):
    registration = register(accounts, amount=149)

    customer = registration.customer
    assert registration.created
    assert customer.email == "jane@example.com"
    assert customer.name == "Jane Doe"
    assert customer.payment_amount == 149
    assert re.fullmatch(r"[0-9A-F]{8}", customer.access_code)
    assert accounts.customer_count() == 1


def test_payment_amount_defaults(accounts):
    assert register(accounts).customer.payment_amount == settings.default_payment_amount


@pytest.mark.parametrize("contact", [None, {}, {"email": "  "}, {"firstName": "Jane"}])
def test_register_requires_email(accounts, contact):
    with pytest.raises(RegistrationError):
        accounts.register_from_webhook(contact)


def test_re_registration_renews_instead_of_using_a_spot(accounts):
    register(accounts)
    renewal = register(accounts, email="jane@example.com")

    assert not renewal.created
    assert accounts.customer_count() == 1


def test_customer_cap(accounts, monkeypatch):
    monkeypatch.setattr(settings, "max_customers", 1)
    register(accounts)

    assert accounts.spots_left() == 0
    with pytest.raises(CustomerCapReachedError):
        register(accounts, email="second@example.com")


def test_concurrent_registrations_respect_cap(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "max_customers", 2)
    database = tmp_path / "customers.db"
    engine = build_engine(f"sqlite:///{database}")
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, expire_on_commit=False)

    def signup(n):
        with factory() as session:
            try:
                return register(AccountService(session), email=f"buyer{n}@example.com").created
            except CustomerCapReachedError:
                return False

    with ThreadPoolExecutor(max_workers=8) as pool:
        outcomes = list(pool.map(signup, range(8)))

    with factory() as session:
        assert AccountService(session).customer_count() == 2
    assert outcomes.count(True) == 2
    engine.dispose()


def test_verify_access_issues_session_token(accounts):
    code = register(accounts).customer.access_code

    token, customer = accounts.verify_access("JANE@example.com", code)

    assert re.fullmatch(r"[0-9a-f]{64}", token)
    assert customer.last_login is not None
    assert accounts.customer_for_token(token).email == "jane@example.com"


def test_verify_access_rejects_bad_credentials(accounts):
    register(accounts)

    with pytest.raises(InvalidCredentialsError, match="Invalid access code"):
        accounts.verify_access("jane@example.com", "WRONG")
    with pytest.raises(InvalidCredentialsError, match="not found"):
        accounts.verify_access("nobody@example.com", "WRONG")


@pytest.mark.parametrize("token", [None, "", "deadbeef"])
def test_unknown_tokens_are_rejected(accounts, token):
    with pytest.raises(InvalidCredentialsError):
        accounts.customer_for_token(token)


def test_entitlement_window(accounts, db_session):
    customer = register(accounts).customer

    assert accounts.is_entitled("jane@example.com")
    assert not accounts.is_entitled("nobody@example.com")

    customer.issued_at = datetime.now(timezone.utc) - timedelta(days=settings.access_validity_days + 1)
    db_session.flush()

    assert not accounts.is_entitled("jane@example.com")


def test_seed_demo_customer_is_idempotent(accounts):
    accounts.seed_demo_customer()
    accounts.seed_demo_customer()

    token, _ = accounts.verify_access(DEMO_EMAIL, DEMO_ACCESS_CODE)
    assert token
    assert accounts.customer_count() == 1
