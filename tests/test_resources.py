"""Tests for asset resolution."""

import pytest

from epub_reader.core.archive import ArchiveIndex
from epub_reader.core.package import PackageDocumentParser
from epub_reader.core.resources import ResourceResolver, chapter_base_dir, cover_data_uri
from epub_reader.models.settings import ParserSettings
from tests.epub_builders import build_opf, make_epub


@pytest.fixture
def resolver() -> ResourceResolver:
    return ResourceResolver()


class TestNormalize:
    @pytest.mark.parametrize(
        "href,expected",
        [
            ("../images/a.png", "images/a.png"),
            ("../../images/a.png", "images/a.png"),
            ("./images/a.png", "images/a.png"),
            ("./../images/a.png", "images/a.png"),
            ("images/a.png", "images/a.png"),
            ("images/a.svg#layer", "images/a.svg"),
            ("styles/main.css?v=2", "styles/main.css"),
        ],
    )
    def test_normalize(self, href: str, expected: str):
        assert ResourceResolver.normalize(href) == expected


class TestCandidates:
    def test_candidate_order(self, resolver: ResourceResolver):
        assert resolver.candidates("../images/a.png", "OEBPS/text/") == [
            "OEBPS/text/images/a.png",
            "images/a.png",
            "OEBPS/images/a.png",
            "OPS/images/a.png",
        ]

    def test_custom_prefixes(self):
        resolver = ResourceResolver(ParserSettings(content_dir_prefixes=["EPUB/"]))
        assert resolver.candidates("a.png", "") == ["a.png", "a.png", "EPUB/a.png"]


class TestResolve:
    def test_relative_to_chapter_directory(self, resolver: ResourceResolver):
        archive = ArchiveIndex(make_epub({"OEBPS/Text/img/a.png": b"in-text"}))
        assert resolver.resolve(archive, "img/a.png", "OEBPS/Text/") == b"in-text"

    def test_parent_reference_falls_back_to_content_directory(
        self, resolver: ResourceResolver, basic_archive: ArchiveIndex
    ):
        data = resolver.resolve(basic_archive, "../Images/fig1.png", "OEBPS/Text/")
        assert data == b"\x89PNG\r\n\x1a\nfigure"

    def test_archive_root(self, resolver: ResourceResolver):
        archive = ArchiveIndex(make_epub({"images/a.png": b"root"}))
        assert resolver.resolve(archive, "../images/a.png", "OEBPS/text/") == b"root"

    def test_ops_directory(self, resolver: ResourceResolver):
        archive = ArchiveIndex(make_epub({"OPS/images/a.png": b"ops"}))
        assert resolver.resolve(archive, "images/a.png", "") == b"ops"

    def test_first_candidate_wins(self, resolver: ResourceResolver):
        archive = ArchiveIndex(
            make_epub({"OEBPS/text/images/a.png": b"near", "OEBPS/images/a.png": b"far"})
        )
        assert resolver.resolve(archive, "images/a.png", "OEBPS/text/") == b"near"

    def test_missing_resource_is_none(self, resolver: ResourceResolver, basic_archive: ArchiveIndex):
        assert resolver.resolve(basic_archive, "../Images/nope.png", "OEBPS/Text/") is None


@pytest.mark.parametrize(
    "opf_dir,href,expected",
    [
        ("OEBPS/", "Text/ch1.xhtml", "OEBPS/Text/"),
        ("OEBPS/", "ch1.xhtml", "OEBPS/"),
        ("", "a/b/c.xhtml", "a/b/"),
        ("", "c.xhtml", ""),
    ],
)
def test_chapter_base_dir(opf_dir: str, href: str, expected: str):
    assert chapter_base_dir(opf_dir, href) == expected


class TestCover:
    def test_cover_bytes(self, resolver: ResourceResolver, basic_archive: ArchiveIndex):
        package = PackageDocumentParser().parse(basic_archive, "OEBPS/content.opf")
        assert resolver.cover(basic_archive, package) == b"\xff\xd8\xffcover"

    def test_no_cover(self, resolver: ResourceResolver):
        archive = ArchiveIndex(make_epub({"OEBPS/content.opf": build_opf()}))
        package = PackageDocumentParser().parse(archive, "OEBPS/content.opf")
        assert resolver.cover(archive, package) is None

    def test_data_uri(self):
        assert cover_data_uri("cover.PNG", b"abc") == "data:image/png;base64,YWJj"
        assert cover_data_uri("cover.jpg", b"abc") == "data:image/jpeg;base64,YWJj"
