"""Tests for chapter assembly from the spine."""

import pytest

from epub_reader.core.archive import ArchiveIndex
from epub_reader.core.chapters import ChapterAssembler, toc_href_matches
from epub_reader.core.package import PackageDocumentParser
from epub_reader.models.book import TOCNode
from epub_reader.models.settings import ParserSettings
from tests.epub_builders import build_chapter_xhtml, build_opf, make_epub

XHTML = "application/xhtml+xml"


def _assemble(files: dict[str, str | bytes], toc: list[TOCNode] | None = None, settings=None):
    archive = ArchiveIndex(make_epub(files))
    package = PackageDocumentParser().parse(archive, "OEBPS/content.opf")
    assembler = ChapterAssembler(settings)
    return assembler.assemble(archive, package, toc or []), assembler


def _chapters(count: int) -> tuple[list[tuple[str, str, str]], dict[str, str]]:
    items = [(f"c{i}", f"c{i}.xhtml", XHTML) for i in range(1, count + 1)]
    files = {f"OEBPS/c{i}.xhtml": build_chapter_xhtml(f"<p>Body {i}</p>") for i in range(1, count + 1)}
    return items, files


class TestSpineWalk:
    def test_chapters_follow_spine_order(self):
        items, files = _chapters(3)
        files["OEBPS/content.opf"] = build_opf(items=items, spine=["c3", "c1", "c2"])
        chapters, _ = _assemble(files)

        assert [c.id for c in chapters] == ["c3", "c1", "c2"]
        assert [c.index for c in chapters] == [0, 1, 2]
        assert "Body 3" in chapters[0].content

    @pytest.mark.parametrize("missing", [0, 1, 2])
    def test_spine_entry_missing_from_manifest_is_skipped(self, missing: int):
        items, files = _chapters(3)
        spine = [mid for mid, _, _ in items]
        del items[missing]
        files["OEBPS/content.opf"] = build_opf(items=items, spine=spine)

        chapters, assembler = _assemble(files)

        assert len(chapters) == 2
        assert [c.index for c in chapters] == [0, 1]
        assert f"c{missing + 1}" not in [c.id for c in chapters]
        assert len(assembler.warnings) == 1

    def test_missing_archive_member_is_skipped(self):
        items, files = _chapters(3)
        files["OEBPS/content.opf"] = build_opf(items=items)
        del files["OEBPS/c2.xhtml"]

        chapters, assembler = _assemble(files)

        assert [c.id for c in chapters] == ["c1", "c3"]
        assert [c.spine_index for c in chapters] == [0, 2]
        assert "OEBPS/c2.xhtml" in assembler.warnings[0]

    def test_duplicate_spine_entries_yield_separate_chapters(self):
        items, files = _chapters(1)
        files["OEBPS/content.opf"] = build_opf(items=items, spine=["c1", "c1"])
        chapters, _ = _assemble(files)

        assert [(c.index, c.id) for c in chapters] == [(0, "c1"), (1, "c1")]

    def test_hrefs_stay_relative_to_package_directory(self):
        files = {
            "OEBPS/content.opf": build_opf(items=[("c1", "Text/one.xhtml", XHTML)]),
            "OEBPS/Text/one.xhtml": build_chapter_xhtml("<p>One</p>"),
        }
        chapters, _ = _assemble(files)
        assert chapters[0].href == "Text/one.xhtml"


class TestDecoding:
    def test_utf8(self):
        files = {
            "OEBPS/content.opf": build_opf(items=[("c1", "c1.xhtml", XHTML)]),
            "OEBPS/c1.xhtml": "<p>naïve café</p>".encode("utf-8"),
        }
        chapters, _ = _assemble(files)
        assert chapters[0].content == "<p>naïve café</p>"

    def test_latin1_fallback(self):
        files = {
            "OEBPS/content.opf": build_opf(items=[("c1", "c1.xhtml", XHTML)]),
            "OEBPS/c1.xhtml": "<p>café</p>".encode("latin-1"),
        }
        chapters, assembler = _assemble(files)
        assert chapters[0].content == "<p>café</p>"
        assert assembler.warnings == []

    def test_decode_never_fails(self):
        assembler = ChapterAssembler()
        assert assembler.decode(bytes(range(256)))


class TestTitles:
    def test_toc_href_with_fragment_matches_chapter(self):
        files = {
            "OEBPS/content.opf": build_opf(items=[("c1", "ch1.xhtml", XHTML)]),
            "OEBPS/ch1.xhtml": build_chapter_xhtml("<p>One</p>"),
        }
        toc = [TOCNode(title="Section Two", href="ch1.xhtml#sec2")]
        chapters, _ = _assemble(files, toc)
        assert chapters[0].title == "Section Two"

    def test_unmatched_chapter_gets_numbered_title_from_spine_position(self):
        items, files = _chapters(5)
        files["OEBPS/content.opf"] = build_opf(items=items)
        toc = [TOCNode(title=f"Named {i}", href=f"c{i}.xhtml") for i in range(1, 5)]

        chapters, _ = _assemble(files, toc)

        assert chapters[3].title == "Named 4"
        assert chapters[4].title == "Chapter 5"

    def test_numbered_title_counts_skipped_spine_entries(self):
        items, files = _chapters(3)
        spine = ["ghost", "c1", "c2"]
        files["OEBPS/content.opf"] = build_opf(items=items, spine=spine)
        chapters, _ = _assemble(files)

        assert chapters[0].index == 0
        assert chapters[0].title == "Chapter 2"

    def test_nested_toc_entries_are_searched(self):
        items, files = _chapters(2)
        files["OEBPS/content.opf"] = build_opf(items=items)
        toc = [
            TOCNode(
                title="Part I",
                href="",
                children=(TOCNode(title="Second", href="c2.xhtml"),),
            )
        ]
        chapters, _ = _assemble(files, toc)
        assert chapters[1].title == "Second"

    def test_first_match_wins(self):
        items, files = _chapters(1)
        files["OEBPS/content.opf"] = build_opf(items=items)
        toc = [
            TOCNode(title="Outer", href="c1.xhtml", children=(TOCNode(title="Inner", href="c1.xhtml#x"),))
        ]
        chapters, _ = _assemble(files, toc)
        assert chapters[0].title == "Outer"

    def test_blank_first_match_falls_back_to_numbered_title(self):
        items, files = _chapters(1)
        files["OEBPS/content.opf"] = build_opf(items=items)
        toc = [
            TOCNode(title="", href="c1.xhtml"),
            TOCNode(title="Named Later", href="c1.xhtml#later"),
        ]
        chapters, _ = _assemble(files, toc)
        assert chapters[0].title == "Chapter 1"

    def test_title_template_setting(self):
        items, files = _chapters(1)
        files["OEBPS/content.opf"] = build_opf(items=items)
        settings = ParserSettings(chapter_title_template="Part {number}")
        chapters, _ = _assemble(files, settings=settings)
        assert chapters[0].title == "Part 1"


@pytest.mark.parametrize(
    "toc_href,chapter_href,expected",
    [
        ("ch1.xhtml#sec2", "ch1.xhtml", True),
        ("Text/ch1.xhtml", "ch1.xhtml", True),
        ("ch1.xhtml", "Text/ch1.xhtml", True),
        ("ch2.xhtml", "ch1.xhtml", False),
        ("#only-fragment", "ch1.xhtml", False),
        ("", "ch1.xhtml", False),
    ],
)
def test_toc_href_matches(toc_href: str, chapter_href: str, expected: bool):
    assert toc_href_matches(toc_href, chapter_href) is expected
