"""Shared fixtures: a fake web site served through httpx.MockTransport."""

import httpx
import pytest
from sqlalchemy.orm import sessionmaker

from analyzers.fetcher import Fetcher
from config import settings
from db.models import Base
from db.session import build_engine


class FakeSite:
    """
    URL -> response table consulted by a MockTransport handler.

    Unknown URLs answer 404. Every request is recorded so tests can assert
    on methods and headers.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, url, body="", status=200, headers=None):
        self.routes[url] = (status, body, headers or {})
        return self

    def redirect(self, url, location, status=301):
        self.routes[url] = (status, "", {"Location": location})
        return self

    def fail(self, url, exc_type, message="boom"):
        self.routes[url] = exc_type(message) if isinstance(exc_type, type) else exc_type
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(str(request.url))
        if route is None:
            return httpx.Response(404, text="not found")
        if isinstance(route, Exception):
            route.request = request
            raise route
        status, body, headers = route
        return httpx.Response(status, text=body, headers=headers)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def urls_requested(self, method=None):
        return [
            str(r.url) for r in self.requests if method is None or r.method == method
        ]


@pytest.fixture(autouse=True)
def no_external_services(monkeypatch):
    """Keep PageSpeed and OpenAI disabled unless a test opts in."""
    monkeypatch.setattr(settings, "google_api_key", None)
    monkeypatch.setattr(settings, "openai_api_key", None)


@pytest.fixture
def site() -> FakeSite:
    return FakeSite()


@pytest.fixture
def fetcher(site) -> Fetcher:
    return Fetcher(transport=site.transport())


@pytest.fixture
def session_factory():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    with session_factory() as session:
        yield session
