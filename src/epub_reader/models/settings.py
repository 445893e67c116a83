"""Parser configuration."""

from pathlib import Path

from pydantic import BaseModel, Field


class ParserSettings(BaseModel):
    """Tunables for the parse pipeline and the content processor.

    The defaults open typical EPUB 2 and EPUB 3 packages; override them
    from a JSON file with ``ParserSettings.from_file``.
    """

    # Used when a chapter is not valid UTF-8. Single-byte, so it never fails.
    fallback_encoding: str = "latin-1"
    # Conventional content directories tried when a relative asset path misses
    content_dir_prefixes: list[str] = Field(
        default_factory=lambda: ["OEBPS/", "OPS/"]
    )
    chapter_title_template: str = "Chapter {number}"
    # Elements unwrapped (children kept) when normalizing chapter markup
    wrapper_tags: list[str] = Field(
        default_factory=lambda: ["html", "body", "section", "article", "div"]
    )

    @classmethod
    def from_file(cls, path: Path) -> "ParserSettings":
        return cls.model_validate_json(path.read_text())
