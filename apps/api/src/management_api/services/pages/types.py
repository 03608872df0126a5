from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

FOLDER_SEPARATOR = "/"


class PageType(str, Enum):
    FOLDER = "FOLDER"
    MARKDOWN = "MARKDOWN"
    SWAGGER = "SWAGGER"


class DocumentKind(str, Enum):
    MARKDOWN = "MARKDOWN"
    SWAGGER = "SWAGGER"
    UNSUPPORTED = "UNSUPPORTED"
    # directory marker: the entry names no file at all
    NONE = "NONE"

    @property
    def page_type(self) -> PageType | None:
        if self is DocumentKind.MARKDOWN:
            return PageType.MARKDOWN
        if self is DocumentKind.SWAGGER:
            return PageType.SWAGGER
        return None


def folder_key(path: tuple[str, ...]) -> str:
    return FOLDER_SEPARATOR.join(path)


@dataclass(frozen=True)
class ClassifiedPath:
    raw_path: str
    folder_path: tuple[str, ...]
    leaf_name: str | None
    kind: DocumentKind
    degenerate: bool = False

    @property
    def segments(self) -> tuple[str, ...]:
        return self.folder_path

    @property
    def is_supported(self) -> bool:
        return self.kind.page_type is not None


@dataclass(frozen=True)
class FolderNode:
    path: tuple[str, ...]
    name: str
    parent_path: tuple[str, ...] | None

    @property
    def key(self) -> str:
        return folder_key(self.path)


@dataclass(frozen=True)
class PageDraft:
    api_id: str
    name: str
    type: PageType
    parent_id: str | None
    content: str | None
    contributor: str | None
    order: int
    source_path: str | None


@dataclass(frozen=True)
class Page:
    id: str
    api_id: str
    name: str
    type: PageType
    parent_id: str | None
    content: str | None
    order: int
    last_contributor: str | None
    source_path: str | None
    created_at: datetime | None = None


@dataclass(frozen=True)
class PageSource:
    type: str
    configuration: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SkippedPath:
    raw_path: str
    reason: str


@dataclass(frozen=True)
class ImportResult:
    pages: list[Page]
    skipped: list[SkippedPath]
    index_failures: list[str]

    @property
    def folders(self) -> list[Page]:
        return [page for page in self.pages if page.type is PageType.FOLDER]

    @property
    def leaves(self) -> list[Page]:
        return [page for page in self.pages if page.type is not PageType.FOLDER]
