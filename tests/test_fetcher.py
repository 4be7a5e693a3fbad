import httpx
import pytest

from analyzers.fetcher import Fetcher, classify_error, is_absolute_http_url
from config import settings
from errors import AuxiliaryFetchError, FetchError, FetchErrorKind


def test_fetch_returns_body_and_final_url_after_redirect(site, fetcher):
    site.redirect("http://example.com/", "https://example.com/")
    site.add("https://example.com/", "<html>ok</html>", headers={"X-Frame-Options": "DENY"})

    result = fetcher.fetch("http://example.com/")

    assert result.status == 200
    assert result.body == "<html>ok</html>"
    assert result.final_url == "https://example.com/"
    assert result.headers["x-frame-options"] == "DENY"


def test_fetch_identifies_itself(site, fetcher):
    site.add("https://example.com/", "ok")

    fetcher.fetch("https://example.com/")

    assert site.requests[0].headers["User-Agent"] == settings.user_agent


def test_http_error_status_raises_with_status(site, fetcher):
    site.add("https://example.com/gone", status=410)

    with pytest.raises(FetchError) as exc_info:
        fetcher.fetch("https://example.com/gone")

    assert exc_info.value.kind == FetchErrorKind.HTTP_ERROR
    assert exc_info.value.status == 410


def test_error_status_can_be_returned(site, fetcher):
    site.add("https://example.com/gone", status=410)

    result = fetcher.fetch("https://example.com/gone", raise_for_status=False)

    assert result.status == 410


@pytest.mark.parametrize(
    "exc, kind",
    [
        (httpx.ReadTimeout("timed out"), FetchErrorKind.TIMEOUT),
        (httpx.ConnectError("[Errno 111] Connection refused"), FetchErrorKind.CONNECTION_REFUSED),
        (
            httpx.ConnectError("[Errno -2] Name or service not known"),
            FetchErrorKind.DNS_FAILURE,
        ),
    ],
)
def test_transport_failures_are_classified(site, fetcher, exc, kind):
    site.fail("https://example.com/", exc)

    with pytest.raises(FetchError) as exc_info:
        fetcher.fetch("https://example.com/")

    assert exc_info.value.kind == kind


def test_redirect_loop_is_bounded(site, fetcher):
    site.redirect("https://example.com/a", "https://example.com/b")
    site.redirect("https://example.com/b", "https://example.com/a")

    with pytest.raises(FetchError) as exc_info:
        fetcher.fetch("https://example.com/a", max_redirects=3)

    assert exc_info.value.kind == FetchErrorKind.HTTP_ERROR
    assert len(site.requests) <= 4


@pytest.mark.parametrize("url", ["", "example.com", "ftp://example.com/file", "/relative"])
def test_invalid_url_is_rejected_without_a_request(site, fetcher, url):
    with pytest.raises(FetchError) as exc_info:
        fetcher.fetch(url)

    assert exc_info.value.kind == FetchErrorKind.INVALID_URL
    assert site.requests == []


def test_auxiliary_fetch_wraps_failures(site, fetcher):
    site.add("https://example.com/robots.txt", status=500)

    with pytest.raises(AuxiliaryFetchError) as exc_info:
        fetcher.fetch_auxiliary("https://example.com/robots.txt")

    assert exc_info.value.kind == FetchErrorKind.HTTP_ERROR
    assert exc_info.value.status == 500


def test_probe_uses_head_and_returns_status(site, fetcher):
    site.add("https://example.com/missing", status=404)

    with fetcher.client() as client:
        status = fetcher.probe(client, "https://example.com/missing")

    assert status == 404
    assert site.requests[0].method == "HEAD"


def test_probe_raises_auxiliary_error_on_transport_failure(site, fetcher):
    site.fail("https://down.example/", httpx.ConnectError)

    with fetcher.client() as client, pytest.raises(AuxiliaryFetchError):
        fetcher.probe(client, "https://down.example/")


def test_is_absolute_http_url():
    assert is_absolute_http_url("https://example.com")
    assert is_absolute_http_url("http://example.com/path?q=1")
    assert not is_absolute_http_url("mailto:a@example.com")
    assert not is_absolute_http_url(None)


def test_unknown_errors_default_to_connection_refused():
    assert classify_error(httpx.RemoteProtocolError("bad")) == FetchErrorKind.CONNECTION_REFUSED


def test_custom_user_agent():
    fetcher = Fetcher(user_agent="TestBot/2.0")
    with fetcher.client() as client:
        assert client.headers["User-Agent"] == "TestBot/2.0"
