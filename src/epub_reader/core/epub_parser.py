"""EPUB parsing pipeline and the session handle it returns."""

import logging
from pathlib import Path

from epub_reader.core.archive import ArchiveIndex
from epub_reader.core.chapters import ChapterAssembler, toc_href_matches
from epub_reader.core.container import ContainerResolver
from epub_reader.core.package import PackageDocumentParser
from epub_reader.core.position import PositionCodec, progress as reading_progress
from epub_reader.core.resources import ResourceResolver, chapter_base_dir, cover_data_uri
from epub_reader.core.toc import TocResolver
from epub_reader.models.book import Chapter, PackageDocument, ParsedBook
from epub_reader.models.settings import ParserSettings

log = logging.getLogger(__name__)


class EpubParser:
    """Parse an EPUB container and return a BookSession.

    The pipeline runs once: archive index, container descriptor, package
    document, table of contents, chapters. Each stage needs the previous
    one complete. A fatal error (MalformedArchive or MalformedPackage)
    propagates and no partial book is returned.
    """

    def __init__(self, data: bytes, settings: ParserSettings | None = None):
        self.data = data
        self.settings = settings or ParserSettings()

    @classmethod
    def from_path(
        cls, epub_path: Path, settings: ParserSettings | None = None
    ) -> "EpubParser":
        return cls(epub_path.read_bytes(), settings)

    def parse(self) -> "BookSession":
        """Parse the EPUB and return a handle on the complete structure."""
        archive = ArchiveIndex(self.data)
        package_path = ContainerResolver().resolve(archive)
        package = PackageDocumentParser().parse(archive, package_path)

        toc_resolver = TocResolver()
        toc = toc_resolver.resolve(archive, package)

        assembler = ChapterAssembler(self.settings)
        chapters = assembler.assemble(archive, package, toc)

        book = ParsedBook(
            title=package.title,
            author=package.author,
            description=package.description,
            language=package.language,
            chapters=chapters,
            toc=toc,
            spine_order=package.spine,
            warnings=toc_resolver.warnings + assembler.warnings,
        )
        log.info(f'Parsed "{book.title}" with {len(chapters)} chapters')
        return BookSession(archive, package, book, self.settings)


class BookSession:
    """Handle on one opened book, passed to every downstream consumer.

    Everything it holds is read-only after parsing, so renderers may
    query resources and chapters from several threads.
    """

    def __init__(
        self,
        archive: ArchiveIndex,
        package: PackageDocument,
        book: ParsedBook,
        settings: ParserSettings | None = None,
    ):
        self.archive = archive
        self.package = package
        self.book = book
        self.resources = ResourceResolver(settings)

    @property
    def chapters(self) -> list[Chapter]:
        return self.book.chapters

    def chapter(self, index: int) -> Chapter | None:
        if index < 0 or index >= len(self.chapters):
            return None
        return self.chapters[index]

    def chapter_dir(self, index: int) -> str:
        """Base directory for relative asset paths in a chapter."""
        chapter = self.chapter(index)
        if chapter is None:
            return self.package.opf_dir
        return chapter_base_dir(self.package.opf_dir, chapter.href)

    def find_chapter(self, href: str) -> int | None:
        """Index of the chapter a TOC entry or internal link points at."""
        for chapter in self.chapters:
            if toc_href_matches(href, chapter.href):
                return chapter.index
        return None

    def resource(self, href: str, chapter_index: int = 0) -> bytes | None:
        return self.resources.resolve(self.archive, href, self.chapter_dir(chapter_index))

    def cover(self) -> bytes | None:
        return self.resources.cover(self.archive, self.package)

    def cover_data_uri(self) -> str | None:
        data = self.cover()
        if data is None:
            return None
        return cover_data_uri(self.package.href_for(self.package.cover_id) or "", data)

    def position(self, chapter_index: int) -> str:
        return PositionCodec.encode(chapter_index)

    def restore(self, token: str | None) -> int:
        """Chapter index for a stored position token, kept inside the book."""
        index = PositionCodec.decode(token)
        if not self.chapters:
            return 0
        return min(index, len(self.chapters) - 1)

    def progress(self, chapter_index: int) -> float:
        return reading_progress(chapter_index, len(self.chapters))
