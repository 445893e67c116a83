"""Parse EPUB containers into a randomly addressable book model."""

__version__ = "0.1.0"
