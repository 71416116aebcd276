"""
Error taxonomy for page loading.

Page-level failures (validation, page fetch, page write) are raised to the
caller. Resource-level failures are raised as ResourceDownloadError inside
the download workers and never leave the orchestrator.
"""

from __future__ import annotations

import errno
from typing import Optional

import requests


class PageLoaderError(Exception):
    """Base class for every error raised by page_loader."""


class InvalidURLError(PageLoaderError):
    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Invalid URL: {url}")


class DirectoryNotFoundError(PageLoaderError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Directory not found: {path}")


class NotADirectoryPathError(PageLoaderError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Not a directory: {path}")


class NetworkError(PageLoaderError):
    def __init__(self, url: str, cause: Optional[BaseException] = None):
        self.url = url
        self.cause = cause
        super().__init__(f"Network error: Unable to connect to {url}")


class HttpError(PageLoaderError):
    def __init__(self, url: str, status: int, reason: Optional[str] = None):
        self.url = url
        self.status = status
        self.reason = reason or "Unknown error"
        super().__init__(f"HTTP {status}: {self.reason} - {url}")


class PermissionDeniedError(PageLoaderError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Permission denied: Cannot write to {path}")


class WriteTargetMissingError(PageLoaderError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Write target missing: {path}")


class ResourceDownloadError(PageLoaderError):
    """A single resource could not be fetched or stored."""

    def __init__(self, url: str, cause: str, status: Optional[int] = None):
        self.url = url
        self.cause = cause
        self.status = status
        super().__init__(f"Failed to download resource {url}: {cause}")


def classify_error(exc: BaseException, url: str, target: str) -> PageLoaderError:
    """
    Map a low-level failure to the page-level taxonomy.

    Args:
        exc: Exception raised by the transport or the filesystem
        url: Page URL being processed
        target: Filesystem path being written (directory or file)

    Returns:
        The PageLoaderError to raise in place of exc
    """
    if isinstance(exc, PageLoaderError):
        return exc

    if isinstance(exc, requests.exceptions.HTTPError) and exc.response is not None:
        return HttpError(url, exc.response.status_code, exc.response.reason)

    # Anything else from the transport carries no status code
    if isinstance(exc, requests.exceptions.RequestException):
        return NetworkError(url, exc)

    if isinstance(exc, OSError):
        if exc.errno in (errno.EACCES, errno.EPERM):
            return PermissionDeniedError(target)
        if exc.errno == errno.ENOENT:
            return WriteTargetMissingError(target)
        if exc.errno == errno.ENOTDIR:
            return NotADirectoryPathError(target)

    return PageLoaderError(f"Failed to download {url}: {exc}")
