"""Shared FastAPI dependencies."""

from functools import lru_cache

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from accounts import AccountService
from analyzers.fetcher import Fetcher
from db.models import Customer
from db.session import get_db_session
from pipeline import AnalysisPipeline
from services import CompletionClient, PageSpeedClient

bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_fetcher() -> Fetcher:
    return Fetcher()


@lru_cache
def get_page_speed_client() -> PageSpeedClient:
    return PageSpeedClient()


@lru_cache
def get_completion_client() -> CompletionClient:
    return CompletionClient()


def get_account_service(db: Session = Depends(get_db_session)) -> AccountService:
    return AccountService(db)


def get_pipeline(
    accounts: AccountService = Depends(get_account_service),
    fetcher: Fetcher = Depends(get_fetcher),
    page_speed: PageSpeedClient = Depends(get_page_speed_client),
    completion: CompletionClient = Depends(get_completion_client),
) -> AnalysisPipeline:
    """A pipeline whose entitlement check reads the request's session."""
    return AnalysisPipeline(
        fetcher=fetcher,
        page_speed=page_speed,
        completion=completion,
        entitlement=accounts.is_entitled,
    )


def get_current_customer(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    accounts: AccountService = Depends(get_account_service),
) -> Customer:
    """Resolve the bearer session token issued by /verify-access."""
    token = credentials.credentials if credentials else None
    return accounts.customer_for_token(token)
