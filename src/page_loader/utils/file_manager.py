"""
File Management Utilities

This module owns every filesystem touch of a page run: checking the output
directory, creating the resource directory and writing page and resource
files.
"""

import os
import tempfile
from typing import Union
import logging

from page_loader.core.errors import DirectoryNotFoundError, NotADirectoryPathError


class FileManager:
    """
    Writes a saved page and its resources under one output directory.
    """

    def __init__(self, output_dir: str):
        """
        Initialize the file manager.

        Args:
            output_dir: Directory the page file is written to. It is never
                created here; it must already exist.
        """
        self.output_dir = os.path.abspath(output_dir)
        self.logger = logging.getLogger(__name__)

    def check_output_dir(self) -> str:
        """
        Make sure the output directory exists and is a directory.

        Returns:
            Absolute path of the output directory
        """
        if not os.path.exists(self.output_dir):
            raise DirectoryNotFoundError(self.output_dir)
        if not os.path.isdir(self.output_dir):
            raise NotADirectoryPathError(self.output_dir)
        return self.output_dir

    def ensure_directory(self, path: str) -> str:
        """Create path (and parents) if absent. Safe to call concurrently."""
        os.makedirs(path, exist_ok=True)
        return path

    def save_page(self, filename: str, content: Union[bytes, str]) -> str:
        """
        Save the page file.

        Bytes are written verbatim, text is written as UTF-8.

        Returns:
            Absolute path to the saved file
        """
        page_path = os.path.join(self.output_dir, filename)

        if isinstance(content, bytes):
            with open(page_path, 'wb') as f:
                f.write(content)
        else:
            with open(page_path, 'w', encoding='utf-8') as f:
                f.write(content)

        file_size = os.path.getsize(page_path)
        self.logger.info(f"Saved page ({file_size} bytes): {os.path.basename(page_path)}")
        return page_path

    def save_resource(self, resource_dir: str, filename: str, payload: Union[bytes, str]) -> str:
        """
        Save one resource atomically.

        The payload goes to a unique temp file next to the target and is
        moved into place, so two writers racing on the same name leave one
        complete file behind.

        Returns:
            Path to the saved file
        """
        self.ensure_directory(resource_dir)
        target = os.path.join(resource_dir, filename)

        data = payload.encode('utf-8') if isinstance(payload, str) else payload
        fd, tmp_path = tempfile.mkstemp(dir=resource_dir, prefix='.', suffix='.part')
        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(data)
            os.replace(tmp_path, target)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

        self.logger.debug(f"Saved resource ({len(data)} bytes): {target}")
        return target

    def file_exists(self, path: str) -> bool:
        """Check that path is a readable regular file."""
        return os.path.isfile(path) and os.access(path, os.R_OK)
