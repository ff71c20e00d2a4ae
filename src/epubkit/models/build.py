"""Options for generating an EPUB from HTML fragments."""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field, field_validator


def _as_author_list(value: str | list[str] | None) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


class EpubContentOptions(BaseModel):
    """One chapter of the generated book."""

    title: str
    data: str
    url: str | None = None
    author: list[str] = Field(default_factory=list)
    filename: str | None = None
    exclude_from_toc: bool = False
    before_toc: bool = False

    @field_validator("author", mode="before")
    @classmethod
    def _author(cls, value):
        return _as_author_list(value)


class EpubOptions(BaseModel):
    """Book-level options."""

    title: str
    description: str
    cover: str | None = None  # path to the cover image
    publisher: str = "anonymous"
    author: list[str] = Field(default_factory=lambda: ["anonymous"])
    toc_title: str = "Table Of Contents"
    append_chapter_titles: bool = True
    date: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    lang: str = "en"
    css: str | None = None
    fonts: list[str] = Field(default_factory=list)
    content: list[EpubContentOptions] = Field(default_factory=list)
    version: Literal[2, 3] = 3

    @field_validator("author", mode="before")
    @classmethod
    def _author(cls, value):
        authors = _as_author_list(value)
        return authors or ["anonymous"]
