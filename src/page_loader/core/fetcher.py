"""
HTTP Retrieval Module

This module issues the GET requests for a page and for each of its
resources. HTML documents are decoded to text, everything else is kept as
raw bytes so binary assets are stored untouched.
"""

from __future__ import annotations

import requests
from dataclasses import dataclass
from typing import Optional, Union
import logging

from .assets import HTML_LINK
from .errors import ResourceDownloadError


DEFAULT_USER_AGENT = 'page-loader/1.0 (+https://pypi.org/project/page-loader/)'


@dataclass
class PageResponse:
    url: str
    content: bytes
    status_code: int
    encoding: Optional[str] = None


def _check_status(response: requests.Response):
    """Raise HTTPError for anything outside 2xx, including unfollowed 3xx."""
    response.raise_for_status()
    if not 200 <= response.status_code < 300:
        raise requests.exceptions.HTTPError(
            f"{response.status_code} {response.reason} for url: {response.url}",
            response=response,
        )


class ResourceFetcher:
    """
    Fetches a page and its resources over one shared requests session.

    No retries and no rate limiting: one GET per URL.
    """

    def __init__(self,
                 session: Optional[requests.Session] = None,
                 timeout: Optional[float] = None,
                 user_agent: str = DEFAULT_USER_AGENT):
        """
        Initialize the fetcher.

        Args:
            session: Session to use; a new one is created (and owned) if omitted
            timeout: Per-request timeout in seconds, None for no timeout
            user_agent: User-Agent header for a session created here
        """
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)
        self._owns_session = session is None

        if session is None:
            session = requests.Session()
            session.headers.update({
                'User-Agent': user_agent,
                'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
            })
        self.session = session

    def fetch_page(self, url: str) -> PageResponse:
        """
        Download the page itself.

        Transport errors and HTTP errors are left to propagate; the caller
        maps them onto the page-level error taxonomy.
        """
        self.logger.info(f"Retrieving page: {url}")
        response = self.session.get(url, timeout=self.timeout)
        _check_status(response)

        result = PageResponse(
            url=url,
            content=response.content,
            status_code=response.status_code,
            encoding=response.encoding,
        )
        self.logger.info(f"Successfully retrieved {len(result.content)} bytes for {url}")
        return result

    def fetch(self, url: str, resource_type: str) -> Union[bytes, str]:
        """
        Download one resource.

        Args:
            url: Absolute resource URL
            resource_type: 'image' | 'stylesheet' | 'script' | 'html-link'

        Returns:
            Decoded text for html-link resources, raw bytes otherwise

        Raises:
            ResourceDownloadError: on any transport failure or non-2xx status
        """
        self.logger.debug(f"Downloading {resource_type}: {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
            _check_status(response)
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise ResourceDownloadError(url, f"HTTP {status}", status=status) from e
        except requests.exceptions.RequestException as e:
            raise ResourceDownloadError(url, str(e) or type(e).__name__) from e

        if resource_type == HTML_LINK:
            # requests falls back to ISO-8859-1 for text/* without a charset
            if 'charset' not in response.headers.get('content-type', '').lower():
                response.encoding = response.apparent_encoding
            payload: Union[bytes, str] = response.text
        else:
            payload = response.content

        self.logger.debug(f"Resource downloaded, size: {len(payload)}: {url}")
        return payload

    def close(self):
        """Close the HTTP session if this fetcher created it."""
        if self._owns_session:
            self.session.close()
