"""Read-only index over the members of a zip container."""

import io
import logging
import zipfile
import zlib
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

from epub_reader.errors import MalformedArchive

log = logging.getLogger(__name__)

# Raised by zipfile when a single member cannot be extracted
MEMBER_READ_ERRORS = (
    zipfile.BadZipFile,
    zlib.error,
    RuntimeError,
    NotImplementedError,
    OSError,
    EOFError,
)


class ArchiveIndex:
    """Random-access view of every file member in an EPUB container.

    Only the central directory is read at construction; a container whose
    directory cannot be read raises MalformedArchive. Member bytes are
    extracted on lookup, so a damaged asset the book never touches does
    not stop it from opening. A member that fails to extract is reported
    as absent.
    """

    def __init__(self, data: bytes):
        try:
            self._zip = zipfile.ZipFile(io.BytesIO(data))
        except (zipfile.BadZipFile, zipfile.LargeZipFile) as e:
            raise MalformedArchive(f"Not a readable zip container: {e}") from e
        except (OSError, EOFError) as e:
            raise MalformedArchive(f"Container directory could not be read: {e}") from e

        self._members: Mapping[str, zipfile.ZipInfo] = MappingProxyType(
            {info.filename: info for info in self._zip.infolist() if not info.is_dir()}
        )
        log.debug(f"Indexed {len(self._members)} container members")

    @classmethod
    def from_path(cls, path: Path) -> "ArchiveIndex":
        return cls(path.read_bytes())

    def find(self, path: str) -> bytes | None:
        """Return the bytes stored at ``path``, or None if there is no readable member."""
        info = self._members.get(path.lstrip("/"))
        if info is None:
            return None
        try:
            return self._zip.read(info)
        except MEMBER_READ_ERRORS as e:
            log.warning(f"Container member {info.filename} could not be read: {e}")
            return None

    def names(self) -> list[str]:
        return list(self._members)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and path.lstrip("/") in self._members

    def __len__(self) -> int:
        return len(self._members)
