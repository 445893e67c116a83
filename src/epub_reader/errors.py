"""Fatal parse errors."""


class EpubError(Exception):
    """Base class for errors that abort opening a book."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class MalformedArchive(EpubError):
    """Container bytes are unreadable or the container descriptor is unusable."""


class MalformedPackage(EpubError):
    """Package document is missing or cannot be parsed."""
