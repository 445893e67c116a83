"""Pytest fixtures shared by the epub_reader tests."""

from pathlib import Path

import pytest

from epub_reader.core.archive import ArchiveIndex
from epub_reader.core.epub_parser import BookSession, EpubParser
from tests.epub_builders import make_basic_epub


@pytest.fixture
def basic_epub() -> bytes:
    return make_basic_epub()


@pytest.fixture
def basic_archive(basic_epub: bytes) -> ArchiveIndex:
    return ArchiveIndex(basic_epub)


@pytest.fixture
def basic_session(basic_epub: bytes) -> BookSession:
    return EpubParser(basic_epub).parse()


@pytest.fixture
def basic_epub_path(tmp_path: Path, basic_epub: bytes) -> Path:
    path = tmp_path / "basic.epub"
    path.write_bytes(basic_epub)
    return path
