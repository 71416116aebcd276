"""
URL Validation Utilities

This module provides URL validation, locality classification and the
"looks like an HTML page" heuristic used during resource discovery.
"""

import posixpath
from urllib.parse import urljoin, urlparse
from typing import Tuple, Optional
import logging


HTML_EXTENSIONS = ('.html', '.htm')
SUPPORTED_SCHEMES = ('http', 'https')


class URLValidator:
    """
    Validates page URLs and classifies references found inside a page.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def validate(self, url: str) -> Tuple[bool, str, str]:
        """
        Validate an absolute page URL.

        Args:
            url: The URL to validate

        Returns:
            Tuple of (is_valid, normalized_url, error_message)
        """
        if not url or not isinstance(url, str):
            return False, "", "URL cannot be empty"

        try:
            parsed = urlparse(url.strip())
            # Accessing .port validates it
            parsed.port
        except ValueError as e:
            return False, "", f"URL validation error: {e}"

        if not parsed.scheme:
            return False, "", "URL must be absolute"
        if parsed.scheme.lower() not in SUPPORTED_SCHEMES:
            return False, "", "URL must use HTTP or HTTPS protocol"
        if not parsed.hostname:
            return False, "", "URL must have a valid host"

        return True, parsed.geturl(), ""

    def extract_host(self, url: str) -> Optional[str]:
        """
        Extract the hostname from a URL.

        Returns:
            Lower-cased hostname, or None if the URL has none or cannot be parsed
        """
        try:
            return urlparse(url).hostname
        except ValueError:
            return None

    def resolve(self, ref: str, base_url: str) -> Optional[str]:
        """Resolve ref against base_url, or None if it cannot be resolved."""
        try:
            return urljoin(base_url, ref.strip())
        except ValueError as e:
            self.logger.debug(f"Cannot resolve reference {ref!r}: {e}")
            return None

    def is_local(self, ref: str, base_url: str) -> bool:
        """
        Check whether a reference points at the same host as the page.

        Relative, protocol-relative and absolute references are resolved
        against base_url first. Unresolvable references are not local.
        """
        if not ref or not ref.strip():
            return False

        resolved = self.resolve(ref, base_url)
        if resolved is None:
            return False

        ref_host = self.extract_host(resolved)
        base_host = self.extract_host(base_url)
        return ref_host is not None and ref_host == base_host

    def looks_like_html_page(self, url: str) -> bool:
        """
        Guess whether a URL serves an HTML document.

        True for .html/.htm paths, directory-style paths ending in '/'
        and paths whose last segment has no extension.
        """
        try:
            path = urlparse(url).path
        except ValueError:
            return False

        if not path or path.endswith('/'):
            return True
        if path.lower().endswith(HTML_EXTENSIONS):
            return True
        _, ext = posixpath.splitext(posixpath.basename(path))
        return not ext


# Global validator instance
_validator_instance: Optional[URLValidator] = None


def get_validator() -> URLValidator:
    """
    Get the global URL validator instance.

    Returns:
        URLValidator instance
    """
    global _validator_instance
    if _validator_instance is None:
        _validator_instance = URLValidator()
    return _validator_instance


def validate_url(url: str) -> Tuple[bool, str, str]:
    """
    Validate an absolute page URL.

    Returns:
        Tuple of (is_valid, normalized_url, error_message)
    """
    return get_validator().validate(url)


def is_local(ref: str, base_url: str) -> bool:
    return get_validator().is_local(ref, base_url)


def looks_like_html_page(url: str) -> bool:
    return get_validator().looks_like_html_page(url)


def resolve_url(ref: str, base_url: str) -> Optional[str]:
    return get_validator().resolve(ref, base_url)
