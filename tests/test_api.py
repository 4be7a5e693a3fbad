import pytest
from fastapi.testclient import TestClient

from api.deps import get_completion_client, get_fetcher, get_page_speed_client
from config import settings
from db.session import get_db_session
from main import app
from services import CompletionClient, PageSpeedClient

PAGE = """<html lang="en"><head><title>Home brewing</title>
<meta name="description" content="Brewing coffee at home"></head>
<body><h1>Brewing coffee</h1><h2>What is a pour over?</h2>
<p>Brewing coffee at home is simple when you measure coffee and water carefully.</p>
<a href="/guides">Guides</a><a href="/old">Old</a></body></html>"""


@pytest.fixture
def client(site, fetcher, session_factory):
    site.add("https://example.com/", PAGE)
    site.add("https://example.com/guides", "<p>guides</p>")

    def override_session():
        with session_factory() as session:
            try:
                yield session
                session.commit()
            except Exception:
                session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_session
    app.dependency_overrides[get_fetcher] = lambda: fetcher
    app.dependency_overrides[get_page_speed_client] = lambda: PageSpeedClient()
    app.dependency_overrides[get_completion_client] = lambda: CompletionClient()
    yield TestClient(app)
    app.dependency_overrides.clear()


def signup(client, email="jane@example.com"):
    response = client.post(
        "/api/v1/ghl-webhook",
        json={"contact": {"email": email, "firstName": "Jane"}, "payment": {"amount": 97}},
    )
    assert response.status_code == 200
    return response.json()["data"]["accessCode"]


def test_health(client):
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["pageSpeedEnabled"] is False


def test_root_reports_spots_left(client):
    signup(client)

    data = client.get("/").json()

    assert data["customers"] == 1
    assert data["spotsLeft"] == settings.max_customers - 1


def test_analyze_seo(client):
    response = client.post("/api/v1/analyze-seo", json={"url": "https://example.com/", "topic": "pour over"})

    body = response.json()
    assert response.status_code == 200
    assert body["success"] is True
    data = body["data"]
    assert data["technical"]["hasTitle"] is True
    assert data["technical"]["hasSSL"] is True
    assert [b["url"] for b in data["brokenLinks"]] == ["https://example.com/old"]
    assert {"keyword": "coffee", "frequency": 5} in data["extractedKeywords"]
    assert 'Optimize content specifically for "pour over" queries that AI users commonly ask' in (
        data["geo"]["recommendations"]
    )


@pytest.mark.parametrize(
    "payload, message",
    [({}, "URL is required"), ({"url": "example.com"}, "URL must be an absolute http(s) URL")],
)
def test_analyze_seo_rejects_bad_urls(client, payload, message):
    response = client.post("/api/v1/analyze-seo", json=payload)

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert response.json()["message"].startswith(message)


def test_analyze_seo_checks_entitlement(client):
    response = client.post(
        "/api/v1/analyze-seo",
        json={"url": "https://example.com/", "customerId": "nobody@example.com"},
    )
    assert response.status_code == 403

    signup(client)
    response = client.post(
        "/api/v1/analyze-seo",
        json={"url": "https://example.com/", "customerId": "jane@example.com"},
    )
    assert response.status_code == 200


def test_analyze_seo_blank_customer_id_is_anonymous(client):
    response = client.post(
        "/api/v1/analyze-seo",
        json={"url": "https://example.com/", "customerId": ""},
    )

    assert response.status_code == 200


def test_unreachable_page_is_not_a_request_failure(client, site):
    response = client.post("/api/v1/analyze-technical-seo", json={"url": "https://gone.example/"})

    data = response.json()["data"]
    assert response.status_code == 200
    assert data["overallScore"] == 0
    assert data["issues"] == ["Unable to analyze website technical aspects"]
    assert "error" in data


def test_single_analyzer_endpoints(client):
    links = client.post("/api/v1/analyze-broken-links", json={"url": "https://example.com/"})
    keywords = client.post("/api/v1/extract-keywords", json={"url": "https://example.com/"})
    geo = client.post(
        "/api/v1/analyze-geo", json={"url": "https://example.com/", "topic": "pour over"}
    )

    assert links.json()["data"]["totalLinks"] == 2
    assert links.json()["data"]["brokenLinks"][0]["status"] == 404
    assert keywords.json()["data"]["title"] == "Home brewing"
    assert geo.json()["data"]["factors"]["questionFormat"] == 5
    assert geo.json()["data"]["geoScore"] == sum(geo.json()["data"]["factors"].values())


def test_serp_competition(client):
    assert client.post("/api/v1/analyze-serp-competition", json={}).status_code == 400

    response = client.post(
        "/api/v1/analyze-serp-competition", json={"keyword": "pour over", "location": "Canada"}
    )

    data = response.json()["data"]
    assert data["simulated"] is True
    assert data["location"] == "Canada"
    assert 0 <= data["competitionScore"] <= 100


def test_access_flow(client):
    code = signup(client)

    verify = client.post(
        "/api/v1/verify-access", json={"email": "Jane@Example.com", "accessCode": code}
    )
    assert verify.status_code == 200
    token = verify.json()["data"]["token"]

    account = client.get("/api/v1/account", headers={"Authorization": f"Bearer {token}"})
    assert account.status_code == 200
    assert account.json()["data"]["email"] == "jane@example.com"
    assert account.json()["data"]["lastLogin"] is not None


def test_access_failures(client):
    signup(client)

    missing = client.post("/api/v1/verify-access", json={"email": "jane@example.com"})
    wrong = client.post(
        "/api/v1/verify-access", json={"email": "jane@example.com", "accessCode": "NOPE"}
    )
    no_token = client.get("/api/v1/account")
    bad_token = client.get("/api/v1/account", headers={"Authorization": "Bearer nope"})

    assert missing.status_code == 400
    assert wrong.status_code == 401
    assert wrong.json()["success"] is False
    assert no_token.status_code == 401
    assert bad_token.status_code == 401


def test_webhook_validation_and_cap(client, monkeypatch):
    invalid = client.post("/api/v1/ghl-webhook", json={"contact": {"firstName": "Jane"}})
    assert invalid.status_code == 400

    monkeypatch.setattr(settings, "max_customers", 1)
    signup(client)
    full = client.post("/api/v1/ghl-webhook", json={"contact": {"email": "late@example.com"}})
    assert full.status_code == 409
