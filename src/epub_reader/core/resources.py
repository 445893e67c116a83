"""Resolve asset references found in chapter markup to archive members."""

import base64
import logging

from epub_reader.core.archive import ArchiveIndex
from epub_reader.models.book import PackageDocument
from epub_reader.models.settings import ParserSettings

log = logging.getLogger(__name__)


class ResourceResolver:
    """Find the archive member an image or stylesheet href refers to.

    Stateless apart from its settings; safe to share between renderers.
    """

    def __init__(self, settings: ParserSettings | None = None):
        self.settings = settings or ParserSettings()

    @staticmethod
    def normalize(href: str) -> str:
        """Drop query/fragment and every leading '../' or './' segment."""
        href = href.split("#", 1)[0].split("?", 1)[0]
        while True:
            if href.startswith("../"):
                href = href[3:]
            elif href.startswith("./"):
                href = href[2:]
            else:
                return href

    def candidates(self, href: str, base_dir: str) -> list[str]:
        """Archive paths to try for ``href``, most specific first."""
        normalized = self.normalize(href)
        paths = [base_dir + normalized, normalized]
        paths.extend(prefix + normalized for prefix in self.settings.content_dir_prefixes)
        return paths

    def resolve(self, archive: ArchiveIndex, href: str, base_dir: str) -> bytes | None:
        for path in self.candidates(href, base_dir):
            data = archive.find(path)
            if data is not None:
                return data
        log.debug(f"Resource {href!r} not found relative to {base_dir!r}")
        return None

    def cover(self, archive: ArchiveIndex, package: PackageDocument) -> bytes | None:
        """Bytes of the cover image declared by the package, if any."""
        if package.cover_id is None:
            return None
        href = package.href_for(package.cover_id)
        if href is None:
            return None
        return archive.find(package.resolve(href))


def chapter_base_dir(opf_dir: str, chapter_href: str) -> str:
    """Directory relative assets of a chapter are resolved against."""
    cut = chapter_href.rfind("/")
    if cut < 0:
        return opf_dir
    return opf_dir + chapter_href[: cut + 1]


def cover_data_uri(href: str, data: bytes) -> str:
    """Inline ``data:`` URI for cover bytes, typed from the file extension."""
    mime_type = "image/png" if href.lower().endswith(".png") else "image/jpeg"
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"
