"""
Concurrent resource download.

Every candidate gets its own worker thread; the call returns once all of
them have settled. Workers only fetch and write files. They report a
DownloadOutcome and never touch the parsed document.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Dict, List, Optional, Sequence

from .assets import Candidate, DownloadFailure, DownloadOutcome, DownloadSuccess
from .errors import ResourceDownloadError
from .fetcher import ResourceFetcher
from .naming import MAX_RESOURCE_FILENAME_LENGTH, resource_filename
from page_loader.utils.file_manager import FileManager


class ResourceDownloader:
    def __init__(self,
                 fetcher: ResourceFetcher,
                 files: FileManager,
                 max_filename_length: int = MAX_RESOURCE_FILENAME_LENGTH,
                 logger: Optional[logging.Logger] = None):
        self.fetcher = fetcher
        self.files = files
        self.max_filename_length = max_filename_length
        self.logger = logger or logging.getLogger(__name__)

    def download(self,
                 candidates: Sequence[Candidate],
                 resource_dir: str,
                 progress: Optional[Callable[[Dict[str, object]], None]] = None) -> List[DownloadOutcome]:
        """
        Download all candidates concurrently into resource_dir.

        Returns:
            One outcome per candidate, ordered by candidate index.
            Individual failures are returned, not raised.
        """
        if not candidates:
            return []

        # An unusable resource directory is not a per-resource failure
        self.files.ensure_directory(resource_dir)

        outcomes: Dict[int, DownloadOutcome] = {}
        with ThreadPoolExecutor(max_workers=len(candidates),
                                thread_name_prefix="resource") as ex:
            futures = {ex.submit(self._download_one, c, resource_dir): c for c in candidates}
            for fut in as_completed(futures):
                candidate = futures[fut]
                outcome = fut.result()
                outcomes[candidate.index] = outcome
                if progress:
                    progress(self._progress_event(candidate, outcome))

        ordered = [outcomes[c.index] for c in candidates]
        failed = sum(1 for o in ordered if not o.ok)
        self.logger.info(f"Resources downloaded: {len(ordered) - failed} succeeded, {failed} failed")
        return ordered

    def _download_one(self, candidate: Candidate, resource_dir: str) -> DownloadOutcome:
        filename = resource_filename(candidate.url, self.max_filename_length)
        try:
            payload = self.fetcher.fetch(candidate.url, candidate.type)
            try:
                saved = self.files.save_resource(resource_dir, filename, payload)
            except OSError as e:
                raise ResourceDownloadError(candidate.url, f"cannot write {filename}: {e}") from e
            if not self.files.file_exists(saved):
                raise ResourceDownloadError(candidate.url, f"{filename} was not written")
        except ResourceDownloadError as e:
            self.logger.debug(f"Failed to download {candidate.type}: {candidate.url} ({e.cause})")
            return DownloadFailure(index=candidate.index, url=candidate.url, reason=e.cause)

        self.logger.debug(f"Resource saved: {os.path.join(resource_dir, filename)}")
        return DownloadSuccess(index=candidate.index, url=candidate.url, filename=filename)

    def _progress_event(self, candidate: Candidate, outcome: DownloadOutcome) -> Dict[str, object]:
        event: Dict[str, object] = {
            "type": "resource",
            "index": candidate.index,
            "url": candidate.url,
            "resource_type": candidate.type,
        }
        if outcome.ok:
            event.update(stage="completed", filename=outcome.filename)
        else:
            event.update(stage="failed", reason=outcome.reason)
        return event
