"""Data models."""

from epub_reader.models.book import (
    Chapter,
    PackageDocument,
    ParsedBook,
    TOCNode,
)
from epub_reader.models.position import Bookmark, Position
from epub_reader.models.settings import ParserSettings

__all__ = [
    # Book models
    "TOCNode",
    "Chapter",
    "PackageDocument",
    "ParsedBook",
    # Position models
    "Position",
    "Bookmark",
    # Configuration
    "ParserSettings",
]
