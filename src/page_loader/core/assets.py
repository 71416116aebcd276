"""
Resource discovery and rewrite utilities.

This module finds the local resources a parsed page references (images,
stylesheets, scripts, same-site HTML pages and the canonical link) and,
once they are downloaded, points the page's attributes at the local copies.
Discovery never touches the document; rewriting happens in one pass after
every download has settled.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Union

from bs4 import BeautifulSoup

from page_loader.utils.validators import is_local, looks_like_html_page, resolve_url


IMAGE = 'image'
STYLESHEET = 'stylesheet'
SCRIPT = 'script'
HTML_LINK = 'html-link'


@dataclass
class Candidate:
    index: int            # Position in discovery order, used as the rewrite key
    url: str              # Absolute resolved URL
    type: str             # 'image' | 'stylesheet' | 'script' | 'html-link'
    attr: str             # Attribute holding the reference ('src' or 'href')
    rewritable: bool = True
    # Tag in the parsed document; only used by AssetRewriter
    element: Any = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class DownloadSuccess:
    index: int
    url: str
    filename: str
    ok: bool = True


@dataclass(frozen=True)
class DownloadFailure:
    index: int
    url: str
    reason: str
    ok: bool = False


DownloadOutcome = Union[DownloadSuccess, DownloadFailure]


def parse_html(markup: Union[bytes, str]) -> BeautifulSoup:
    return BeautifulSoup(markup, 'lxml')


def _rel_values(tag) -> List[str]:
    rel = tag.get('rel') or []
    if isinstance(rel, str):
        rel = rel.split()
    return [v.lower() for v in rel]


class AssetCollector:
    def __init__(self, include_html_links: bool = True):
        self.include_html_links = include_html_links
        self.logger = logging.getLogger(__name__)

    def collect(self, soup: BeautifulSoup, page_url: str) -> List[Candidate]:
        """
        Walk the document once and return local resources in document order.
        """
        candidates: List[Candidate] = []

        for tag in soup.find_all(['img', 'link', 'script', 'a']):
            found = self._classify(tag, page_url)
            if found is None:
                continue
            resource_type, attr, rewritable = found
            abs_url = resolve_url(tag[attr], page_url)
            if abs_url is None:
                continue
            candidates.append(Candidate(
                index=len(candidates),
                url=abs_url,
                type=resource_type,
                attr=attr,
                rewritable=rewritable,
                element=tag,
            ))
            self.logger.debug(f"Found local {resource_type}: {abs_url}")

        self.logger.debug(f"Total resources to download: {len(candidates)}")
        return candidates

    def has_local_resources(self, soup: BeautifulSoup, page_url: str) -> bool:
        return bool(self.collect(soup, page_url))

    def _classify(self, tag, page_url: str) -> Optional[tuple]:
        """Return (type, attr, rewritable) for a qualifying tag, else None."""
        name = tag.name

        if name == 'img':
            src = tag.get('src')
            if src and is_local(src, page_url):
                return IMAGE, 'src', True

        elif name == 'link':
            href = tag.get('href')
            if not href or not is_local(href, page_url):
                return None
            rel = _rel_values(tag)
            if 'stylesheet' in rel:
                return STYLESHEET, 'href', True
            if 'canonical' in rel:
                # Saved alongside the page, the original link is kept
                return HTML_LINK, 'href', False

        elif name == 'script':
            src = tag.get('src')
            if src and is_local(src, page_url):
                return SCRIPT, 'src', True

        elif name == 'a' and self.include_html_links:
            href = tag.get('href')
            # In-page anchors point back at the page itself
            if href and not href.strip().startswith('#') and is_local(href, page_url):
                abs_url = resolve_url(href, page_url)
                if abs_url and looks_like_html_page(abs_url):
                    return HTML_LINK, 'href', True

        return None


class AssetRewriter:
    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def apply(self,
              candidates: Sequence[Candidate],
              outcomes: Sequence[DownloadOutcome],
              resource_dir_name: str) -> int:
        """
        Point the attributes of successfully downloaded resources at their
        local copies. Failed resources keep their original value.

        Args:
            candidates: Discovered candidates, indexed by Candidate.index
            outcomes: One outcome per candidate, in any order
            resource_dir_name: Name of the resource directory, used literally

        Returns:
            Number of attributes rewritten
        """
        by_index = {c.index: c for c in candidates}
        rewritten = 0

        for outcome in outcomes:
            if not outcome.ok:
                continue
            candidate = by_index.get(outcome.index)
            if candidate is None or not candidate.rewritable or candidate.element is None:
                continue
            local_ref = f"{resource_dir_name}/{outcome.filename}"
            candidate.element[candidate.attr] = local_ref
            rewritten += 1
            self.logger.debug(f"Updated {candidate.type} {candidate.attr} to: {local_ref}")

        return rewritten

    def serialize(self, soup: BeautifulSoup) -> str:
        return str(soup)
