"""Reading position models."""

from pydantic import BaseModel, ConfigDict, Field


class Position(BaseModel):
    """Where the reader is: a chapter plus an optional scroll offset.

    The compact position token only carries ``chapter_index``; the offset
    survives only in bookmark tokens.
    """

    model_config = ConfigDict(frozen=True)

    chapter_index: int = Field(default=0, ge=0)
    offset: float = 0.0


class Bookmark(BaseModel):
    """A labelled position inside a chapter."""

    chapter_index: int = Field(ge=0)
    offset: float = 0.0
    label: str = ""

    @property
    def position(self) -> Position:
        return Position(chapter_index=self.chapter_index, offset=self.offset)
