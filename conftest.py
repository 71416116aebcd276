"""
Shared fixtures.

HTTP is faked with a stand-in for requests.Session that serves canned
requests.Response objects, so raise_for_status(), .text and .content behave
exactly as they do against a real server.
"""

import logging
import threading
from http import HTTPStatus

import pytest
import requests


def build_response(url, status=200, body=b"", headers=None):
    response = requests.Response()
    response.status_code = status
    response.url = url
    response.reason = HTTPStatus(status).phrase
    response._content = body.encode("utf-8") if isinstance(body, str) else body
    response.headers.update(headers or {})
    response.encoding = requests.utils.get_encoding_from_headers(response.headers)
    return response


class FakeSession:
    """Serves registered URLs; anything else fails like an unreachable host."""

    def __init__(self):
        self.routes = {}
        self.headers = {}
        self.calls = []
        self.closed = False
        self._lock = threading.Lock()

    def add(self, url, body=b"", status=200, headers=None):
        self.routes[url] = (status, body, headers)
        return self

    def fail(self, url, exc):
        self.routes[url] = exc
        return self

    def get(self, url, **kwargs):
        with self._lock:
            self.calls.append(url)
        route = self.routes.get(url)
        if route is None:
            raise requests.exceptions.ConnectionError(f"Failed to resolve {url}")
        if isinstance(route, BaseException):
            raise route
        status, body, headers = route
        return build_response(url, status, body, headers)

    def close(self):
        self.closed = True


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def make_response():
    return build_response


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by initialize_logging between tests."""
    yield
    logger = logging.getLogger("page_loader")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
