"""Compact reading-position and bookmark tokens."""

import logging
import re

from epub_reader.models.position import Bookmark

log = logging.getLogger(__name__)


class PositionCodec:
    """Encode a chapter index as ``pos(/6/N)`` and back.

    Only chapter granularity is addressed. ``N`` is ``(index + 1) * 2``,
    so it is always a positive even number.
    """

    PATTERN = re.compile(r"/6/(\d+)", re.ASCII)

    @classmethod
    def encode(cls, chapter_index: int) -> str:
        if chapter_index < 0:
            raise ValueError(f"Chapter index must be non-negative, got {chapter_index}")
        return f"pos(/6/{(chapter_index + 1) * 2})"

    @classmethod
    def decode(cls, token: str | None) -> int:
        """Chapter index of ``token``; malformed or foreign tokens give 0."""
        match = cls.PATTERN.search(token or "")
        if match is None:
            if token:
                log.debug(f"Unrecognized position token {token!r}")
            return 0
        try:
            number = int(match.group(1))
        except ValueError:
            # Digit strings past the interpreter's int conversion limit
            log.debug(f"Unparseable position token {token!r}")
            return 0
        return max(number // 2 - 1, 0)


class BookmarkCodec:
    """Serialize bookmarks as ``bookmark_v1:<chapter>:<offset>``."""

    PREFIX = "bookmark_v1"

    @classmethod
    def encode(cls, bookmark: Bookmark) -> str:
        return f"{cls.PREFIX}:{bookmark.chapter_index}:{bookmark.offset}"

    @classmethod
    def decode(cls, token: str, label: str = "") -> Bookmark | None:
        if not token.isascii():
            return None
        parts = token.split(":")
        if len(parts) != 3 or parts[0] != cls.PREFIX:
            return None
        try:
            chapter_index = int(parts[1])
            offset = float(parts[2])
        except ValueError:
            log.warning(f"Failed to parse bookmark token {token!r}")
            return None
        if chapter_index < 0:
            return None
        return Bookmark(chapter_index=chapter_index, offset=offset, label=label)


def progress(chapter_index: int, total_chapters: int) -> float:
    """Fraction of the book read once ``chapter_index`` is reached."""
    if total_chapters <= 0:
        return 0.0
    return min((chapter_index + 1) / total_chapters, 1.0)
