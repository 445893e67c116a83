"""Locate the package document through META-INF/container.xml."""

import logging

from epub_reader.core.archive import ArchiveIndex
from epub_reader.core.xml import first, parse_xml
from epub_reader.errors import MalformedArchive

log = logging.getLogger(__name__)

CONTAINER_PATH = "META-INF/container.xml"


class ContainerResolver:
    """Read the container descriptor and report the package document path."""

    def resolve(self, archive: ArchiveIndex) -> str:
        data = archive.find(CONTAINER_PATH)
        if data is None:
            raise MalformedArchive(f"Invalid EPUB: missing {CONTAINER_PATH}")

        root = parse_xml(data)
        if root is None:
            raise MalformedArchive(f"Invalid EPUB: {CONTAINER_PATH} is not parseable")

        rootfile = first(root, "rootfile")
        if rootfile is None:
            raise MalformedArchive("Invalid EPUB: no rootfile in container descriptor")

        package_path = (rootfile.get("full-path") or "").strip()
        if not package_path:
            raise MalformedArchive("Invalid EPUB: rootfile has no full-path")

        log.debug(f"Package document at {package_path}")
        return package_path


def opf_dir_of(package_path: str) -> str:
    """Directory prefix of the package document, '' or ending in '/'."""
    cut = package_path.rfind("/")
    return package_path[: cut + 1] if cut >= 0 else ""
