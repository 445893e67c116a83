"""Assemble chapters from the spine."""

import logging

from epub_reader.core.archive import ArchiveIndex
from epub_reader.models.book import Chapter, PackageDocument, TOCNode
from epub_reader.models.settings import ParserSettings

log = logging.getLogger(__name__)


class ChapterAssembler:
    """Walk the spine and turn each resolvable entry into a Chapter."""

    def __init__(self, settings: ParserSettings | None = None):
        self.settings = settings or ParserSettings()
        self.warnings: list[str] = []

    def assemble(
        self,
        archive: ArchiveIndex,
        package: PackageDocument,
        toc: list[TOCNode],
    ) -> list[Chapter]:
        flat_toc = [node for root in toc for node in root.flatten()]
        chapters: list[Chapter] = []

        for spine_index, item_id in enumerate(package.spine):
            href = package.href_for(item_id)
            if href is None:
                self._warn(f"Spine entry {item_id!r} is not in the manifest; skipped")
                continue

            path = package.resolve(href)
            data = archive.find(path)
            if data is None:
                self._warn(f"Spine entry {item_id!r} points at missing or unreadable member {path}; skipped")
                continue

            chapters.append(
                Chapter(
                    index=len(chapters),
                    id=item_id,
                    href=href,
                    title=self._resolve_title(href, spine_index, flat_toc),
                    content=self.decode(data, path),
                    spine_index=spine_index,
                )
            )

        log.debug(f"Assembled {len(chapters)} of {len(package.spine)} spine entries")
        return chapters

    def decode(self, data: bytes, path: str = "") -> str:
        """Decode as UTF-8, falling back to the single-byte fallback encoding."""
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            log.debug(f"{path} is not UTF-8, decoding as {self.settings.fallback_encoding}")
            return data.decode(self.settings.fallback_encoding, errors="replace")

    def _resolve_title(
        self, href: str, spine_index: int, flat_toc: list[TOCNode]
    ) -> str:
        """TOC title of the first entry pointing at ``href``, else a numbered title."""
        fallback = self.settings.chapter_title_template.format(number=spine_index + 1)
        for node in flat_toc:
            if toc_href_matches(node.href, href):
                return node.title or fallback
        return fallback

    def _warn(self, message: str) -> None:
        log.warning(message)
        self.warnings.append(message)


def toc_href_matches(toc_href: str, chapter_href: str) -> bool:
    """True when a TOC or link href and a chapter href name the same file.

    The fragment is ignored and either side may carry extra leading
    directories, so a substring match in either direction counts.
    """
    target = toc_href.split("#", 1)[0]
    if not target or not chapter_href:
        return False
    return target in chapter_href or chapter_href in target
