"""Data models for the parsed book structure."""

from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict, Field


class TOCNode(BaseModel):
    """Single entry in the table of contents.

    Each node owns its children outright; trees are built top-down
    from the navigation markup.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    href: str = ""
    children: tuple["TOCNode", ...] = ()

    def flatten(self) -> Iterator["TOCNode"]:
        """Yield this node, then every descendant depth-first."""
        yield self
        for child in self.children:
            yield from child.flatten()


class Chapter(BaseModel):
    """One readable spine entry and its decoded markup."""

    model_config = ConfigDict(frozen=True)

    index: int
    id: str
    href: str  # relative to the package document directory
    title: str
    content: str = Field(default="", repr=False)
    spine_index: int = 0


class PackageDocument(BaseModel):
    """Metadata, manifest and spine read from the package document."""

    model_config = ConfigDict(frozen=True)

    opf_path: str
    opf_dir: str = ""
    title: str = "Unknown"
    author: str = "Unknown"
    description: str = ""
    language: str | None = None
    manifest: dict[str, str] = Field(default_factory=dict)  # id -> href
    media_types: dict[str, str] = Field(default_factory=dict)  # id -> media type
    properties: dict[str, list[str]] = Field(default_factory=dict)
    spine: list[str] = Field(default_factory=list)
    toc_id: str | None = None
    cover_id: str | None = None

    def href_for(self, item_id: str) -> str | None:
        return self.manifest.get(item_id)

    def resolve(self, href: str) -> str:
        """Archive path of an href taken from the package document."""
        if href.startswith("/"):
            return href.lstrip("/")
        return self.opf_dir + href


class ParsedBook(BaseModel):
    """Complete parsed book, as handed to rendering collaborators."""

    title: str
    author: str = "Unknown"
    description: str = ""
    language: str | None = None
    chapters: list[Chapter] = Field(default_factory=list)
    toc: list[TOCNode] = Field(default_factory=list)
    spine_order: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    def flat_toc(self) -> list[TOCNode]:
        return [node for root in self.toc for node in root.flatten()]
