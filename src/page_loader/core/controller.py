"""
page_loader orchestrator: saves one page and its local resources.

validate URL -> check output dir -> fetch page -> discover resources ->
download them concurrently -> rewrite references -> write the page.
"""

from __future__ import annotations

import os
import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Optional, Sequence

import requests

from .assets import AssetCollector, AssetRewriter, Candidate, DownloadOutcome, parse_html
from .downloader import ResourceDownloader
from .errors import InvalidURLError, classify_error
from .fetcher import DEFAULT_USER_AGENT, ResourceFetcher
from .logger import ErrorTracker
from .naming import MAX_RESOURCE_FILENAME_LENGTH, derive_names
from page_loader.utils.file_manager import FileManager
from page_loader.utils.validators import validate_url


ProgressCallback = Callable[[Dict[str, object]], None]


@dataclass
class RunConfig:
    output_dir: str = field(default_factory=os.getcwd)
    include_html_links: bool = True  # Download same-site <a href> targets that look like pages
    max_filename_length: int = MAX_RESOURCE_FILENAME_LENGTH
    request_timeout: Optional[float] = None  # None = wait forever
    user_agent: str = DEFAULT_USER_AGENT


@dataclass(frozen=True)
class PageRequest:
    url: str
    output_dir: str

    def __post_init__(self):
        object.__setattr__(self, 'output_dir', os.path.abspath(self.output_dir))


class PageLoaderController:
    def __init__(self,
                 config: Optional[RunConfig] = None,
                 session: Optional[requests.Session] = None,
                 logger: Optional[logging.Logger] = None):
        self.config = config or RunConfig()
        self.session = session
        self.logger = logger or logging.getLogger(__name__)
        self.collector = AssetCollector(include_html_links=self.config.include_html_links)
        self.rewriter = AssetRewriter()
        self.errors = ErrorTracker(self.logger)

    def run(self, url: str, progress: Optional[ProgressCallback] = None) -> str:
        """
        Save the page at url into the configured output directory.

        Returns:
            Absolute path of the saved page file

        Raises:
            PageLoaderError: for page-level failures. Resource failures are
                logged and leave the original reference in place.
        """
        self.logger.info(f"Starting page download: {url} to {self.config.output_dir}")
        self.errors = ErrorTracker(self.logger)

        # Validated, named and fetched in the same stripped form
        target = url.strip() if isinstance(url, str) else url
        is_valid, _, error = validate_url(target)
        if not is_valid:
            self.logger.debug(f"Rejected {url!r}: {error}")
            raise InvalidURLError(url)

        request = PageRequest(url=target, output_dir=self.config.output_dir)
        files = FileManager(request.output_dir)
        files.check_output_dir()

        names = derive_names(request.url, request.output_dir)
        self.logger.debug(f"Page file: {names.page_filename}, resource dir: {names.resource_dir_path}")

        fetcher = ResourceFetcher(session=self.session,
                                  timeout=self.config.request_timeout,
                                  user_agent=self.config.user_agent)
        try:
            try:
                page = fetcher.fetch_page(request.url)
            except requests.exceptions.RequestException as e:
                self.logger.debug(f"Page download failed: {e}")
                raise classify_error(e, request.url, request.output_dir) from e

            soup = parse_html(page.content)
            candidates = self.collector.collect(soup, request.url)
            self.logger.info(f"Found {len(candidates)} local resources")

            if not candidates:
                # Saved byte for byte, no re-serialization
                content = page.content
            else:
                try:
                    files.ensure_directory(names.resource_dir_path)
                except OSError as e:
                    raise classify_error(e, request.url, names.resource_dir_path) from e

                downloader = ResourceDownloader(fetcher, files,
                                                max_filename_length=self.config.max_filename_length,
                                                logger=self.logger)
                outcomes = downloader.download(candidates, names.resource_dir_path, progress)
                self._record_failures(candidates, outcomes)

                rewritten = self.rewriter.apply(candidates, outcomes, names.resource_dir_name)
                self.logger.debug(f"Rewrote {rewritten} references")
                content = self.rewriter.serialize(soup)

            try:
                page_path = files.save_page(names.page_filename, content)
            except OSError as e:
                raise classify_error(e, request.url, request.output_dir) from e
        finally:
            fetcher.close()

        self.logger.info(f"Page saved successfully: {page_path}")
        return os.path.abspath(page_path)

    def _record_failures(self, candidates: Sequence[Candidate], outcomes: Sequence[DownloadOutcome]):
        by_index = {c.index: c for c in candidates}
        for outcome in outcomes:
            if outcome.ok:
                continue
            candidate = by_index[outcome.index]
            self.errors.log_error(outcome.reason, context=candidate.type, url=outcome.url)

        summary = self.errors.get_error_summary()
        if summary['total_errors']:
            self.logger.info(f"{summary['total_errors']} resources could not be saved: {summary['error_contexts']}")


def load_page(url: str,
              output_dir: Optional[str] = None,
              *,
              session: Optional[requests.Session] = None,
              progress: Optional[ProgressCallback] = None,
              config: Optional[RunConfig] = None) -> str:
    """
    Save a page and its local resources.

    Args:
        url: Absolute http(s) URL of the page
        output_dir: Existing directory to write into (default: cwd)
        session: requests session to use instead of a fresh one
        progress: Called once per settled resource download
        config: Extra run settings; output_dir overrides config.output_dir

    Returns:
        Absolute path of the saved page file
    """
    config = config or RunConfig()
    if output_dir is not None:
        config = replace(config, output_dir=output_dir)
    controller = PageLoaderController(config, session=session)
    return controller.run(url, progress=progress)
