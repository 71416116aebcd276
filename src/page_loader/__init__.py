"""
page_loader: Single Page Downloader

Saves a web page as a local HTML file together with the images,
stylesheets, scripts and same-site pages it references, rewriting the
page so it points at the local copies.
"""

__version__ = "1.0.0"
__author__ = "page-loader contributors"
__description__ = "Single page downloader with local resources"

from page_loader.core.controller import RunConfig, load_page  # noqa: E402
from page_loader.core.errors import PageLoaderError  # noqa: E402

__all__ = ["load_page", "RunConfig", "PageLoaderError", "__version__"]
