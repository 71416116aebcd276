"""
Filesystem names for saved pages and their resources.

Names are derived from the URL alone (hostname + path) so the same URL
always maps to the same file. Query strings and fragments are ignored.
URLs are normalised the way requests sends them first: punycode host,
percent-encoded path.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from urllib.parse import urlparse

from requests.exceptions import RequestException
from requests.models import PreparedRequest


PAGE_EXTENSION = ".html"
RESOURCE_DIR_SUFFIX = "_files"
MAX_RESOURCE_FILENAME_LENGTH = 200

_PAGE_UNSAFE = re.compile(r'[^A-Za-z0-9]+')
_RESOURCE_UNSAFE = re.compile(r'[^A-Za-z0-9.]+')


@dataclass(frozen=True)
class DerivedNames:
    page_filename: str
    resource_dir_name: str
    resource_dir_path: str

    def page_path(self, output_dir: str) -> str:
        return os.path.join(output_dir, self.page_filename)


def _wire_url(url: str) -> str:
    """URL as it goes over the wire: IDNA host, requoted path."""
    prepared = PreparedRequest()
    try:
        prepared.prepare_url(url, None)
    except RequestException:
        return url
    return prepared.url


def page_filename(url: str) -> str:
    """
    Build the filename for the saved page.

    https://ru.hexlet.io/courses -> ru-hexlet-io-courses.html
    """
    parsed = urlparse(_wire_url(url))
    raw = f"{parsed.hostname or ''}{parsed.path}"
    name = _PAGE_UNSAFE.sub('-', raw).strip('-')
    return f"{name}{PAGE_EXTENSION}"


def resource_filename(url: str, max_length: int = MAX_RESOURCE_FILENAME_LENGTH) -> str:
    """
    Build the filename for a downloaded resource.

    Dots in the hostname become dashes, dots in the path are kept so the
    extension survives: https://example.com/img/a.png -> example-com-img-a.png.
    Names longer than max_length are cut down, keeping the extension.
    """
    parsed = urlparse(_wire_url(url))
    raw = (parsed.hostname or '').replace('.', '-') + parsed.path
    name = _RESOURCE_UNSAFE.sub('-', raw).strip('-')

    if len(name) > max_length:
        stem, ext = os.path.splitext(name)
        if len(ext) >= max_length:
            return name[:max_length]
        name = stem[:max_length - len(ext)] + ext

    return name


def resource_dir_name(page_name: str) -> str:
    """example-com.html -> example-com_files"""
    if page_name.endswith(PAGE_EXTENSION):
        page_name = page_name[:-len(PAGE_EXTENSION)]
    return page_name + RESOURCE_DIR_SUFFIX


def derive_names(url: str, output_dir: str) -> DerivedNames:
    page_name = page_filename(url)
    dir_name = resource_dir_name(page_name)
    return DerivedNames(
        page_filename=page_name,
        resource_dir_name=dir_name,
        resource_dir_path=os.path.join(output_dir, dir_name),
    )
