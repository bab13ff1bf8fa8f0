"""Page sources producing raw tables for the extraction engine."""

from goldrates.core.sources.base import PageSource
from goldrates.core.sources.browser import BrowserPageSource
from goldrates.core.sources.http import HttpPageSource, HttpSourceConfig
from goldrates.core.sources.markup import FilePageSource, parse_tables

__all__ = [
    "BrowserPageSource",
    "FilePageSource",
    "HttpPageSource",
    "HttpSourceConfig",
    "PageSource",
    "parse_tables",
]
