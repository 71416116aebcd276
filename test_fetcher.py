"""
Tests for the HTTP fetcher.
"""

import pytest
import requests

from page_loader.core.errors import ResourceDownloadError
from page_loader.core.fetcher import ResourceFetcher


def test_binary_resource_returned_as_bytes(session):
    png = b"\x89PNG\r\n\x1a\n\x00\xff"
    session.add("https://example.com/a.png", png, headers={"Content-Type": "image/png"})

    payload = ResourceFetcher(session=session).fetch("https://example.com/a.png", "image")

    assert isinstance(payload, bytes)
    assert payload == png


def test_stylesheet_and_script_returned_as_bytes(session):
    session.add("https://example.com/s.css", "body { color: red; }", headers={"Content-Type": "text/css"})
    session.add("https://example.com/a.js", "var x = 1;", headers={"Content-Type": "application/javascript"})
    fetcher = ResourceFetcher(session=session)

    assert fetcher.fetch("https://example.com/s.css", "stylesheet") == b"body { color: red; }"
    assert fetcher.fetch("https://example.com/a.js", "script") == b"var x = 1;"


def test_html_resource_returned_as_text(session):
    body = "<html><body>Привет</body></html>"
    session.add("https://site.com/about.html", body.encode("utf-8"),
                headers={"Content-Type": "text/html; charset=utf-8"})

    payload = ResourceFetcher(session=session).fetch("https://site.com/about.html", "html-link")

    assert isinstance(payload, str)
    assert payload == body


def test_http_error_becomes_resource_download_error(session):
    session.add("https://example.com/missing.png", "Not Found", status=404)

    with pytest.raises(ResourceDownloadError) as exc_info:
        ResourceFetcher(session=session).fetch("https://example.com/missing.png", "image")

    assert exc_info.value.status == 404
    assert exc_info.value.url == "https://example.com/missing.png"
    assert "https://example.com/missing.png" in str(exc_info.value)
    assert "HTTP 404" in str(exc_info.value)


def test_connection_error_has_no_status(session):
    session.fail("https://example.com/a.png", requests.exceptions.ConnectionError("refused"))

    with pytest.raises(ResourceDownloadError) as exc_info:
        ResourceFetcher(session=session).fetch("https://example.com/a.png", "image")

    assert exc_info.value.status is None
    assert "refused" in exc_info.value.cause


def test_fetch_page_returns_raw_bytes(session):
    body = "<html><body>Курсы</body></html>".encode("utf-8")
    session.add("https://ru.hexlet.io/courses", body, headers={"Content-Type": "text/html"})

    page = ResourceFetcher(session=session).fetch_page("https://ru.hexlet.io/courses")

    assert page.content == body
    assert page.status_code == 200
    assert page.url == "https://ru.hexlet.io/courses"


def test_fetch_page_raises_transport_errors(session):
    session.add("https://example.com/boom", "Internal Server Error", status=500)

    with pytest.raises(requests.exceptions.HTTPError):
        ResourceFetcher(session=session).fetch_page("https://example.com/boom")


def test_timeout_is_passed_to_session(session, monkeypatch):
    seen = {}
    original_get = session.get

    def get(url, **kwargs):
        seen.update(kwargs)
        return original_get(url, **kwargs)

    monkeypatch.setattr(session, "get", get)
    session.add("https://example.com/a.png", b"X")

    ResourceFetcher(session=session, timeout=2.5).fetch("https://example.com/a.png", "image")

    assert seen["timeout"] == 2.5


def test_close_leaves_injected_session_open(session):
    ResourceFetcher(session=session).close()
    assert session.closed is False


def test_owned_session_gets_user_agent():
    fetcher = ResourceFetcher(user_agent="test-agent/1.0")
    try:
        assert fetcher.session.headers["User-Agent"] == "test-agent/1.0"
    finally:
        fetcher.close()


def test_unfollowed_redirect_status_is_a_resource_failure(session):
    session.add("https://example.com/a.png", b"", status=304)

    with pytest.raises(ResourceDownloadError) as exc_info:
        ResourceFetcher(session=session).fetch("https://example.com/a.png", "image")

    assert exc_info.value.status == 304
    assert "HTTP 304" in str(exc_info.value)


def test_fetch_page_rejects_non_2xx_success_codes(session):
    session.add("https://example.com/choices", "pick one", status=300)

    with pytest.raises(requests.exceptions.HTTPError) as exc_info:
        ResourceFetcher(session=session).fetch_page("https://example.com/choices")

    assert exc_info.value.response.status_code == 300
