from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import sqlite3
from typing import Protocol

from management_api.services.pages.types import Page


class SearchIndexError(RuntimeError):
    pass


class SearchIndex(Protocol):
    """Adapters report failures as ``SearchIndexError``; those are retried."""

    def index(self, page: Page) -> None: ...


@dataclass(frozen=True)
class SearchHit:
    page_id: str
    api_id: str
    name: str
    type: str
    parent_id: str | None


def _ensure_schema(connection: sqlite3.Connection) -> None:
    connection.executescript(
        """
        CREATE TABLE IF NOT EXISTS page_index (
            page_id TEXT PRIMARY KEY,
            api_id TEXT NOT NULL,
            name TEXT NOT NULL,
            type TEXT NOT NULL,
            parent_id TEXT,
            content TEXT,
            indexed_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
        );

        CREATE INDEX IF NOT EXISTS idx_page_index_api_id ON page_index(api_id);
        """
    )


class SqliteSearchIndex:
    """Keeps one row per page id; re-indexing a page replaces its row."""

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        connection = sqlite3.connect(self._db_path)
        _ensure_schema(connection)
        return connection

    def index(self, page: Page) -> None:
        try:
            with self._connect() as connection:
                connection.execute(
                    """
                    INSERT OR REPLACE INTO page_index (page_id, api_id, name, type, parent_id, content)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        page.id,
                        page.api_id,
                        page.name,
                        page.type.value,
                        page.parent_id,
                        page.content,
                    ),
                )
        except (OSError, sqlite3.Error) as exc:
            raise SearchIndexError(f"Failed to index page {page.id}: {exc}") from exc

    def search(
        self,
        query_text: str,
        *,
        api_id: str | None = None,
        limit: int = 20,
    ) -> list[SearchHit]:
        if not self._db_path.exists():
            return []

        pattern = f"%{query_text.strip().lower()}%"
        sql = """
            SELECT page_id, api_id, name, type, parent_id
            FROM page_index
            WHERE (lower(name) LIKE ? OR lower(COALESCE(content, '')) LIKE ?)
        """
        params: list[object] = [pattern, pattern]
        if api_id is not None:
            sql += " AND api_id = ?"
            params.append(api_id)
        sql += " ORDER BY name, page_id LIMIT ?"
        params.append(limit)

        try:
            with self._connect() as connection:
                rows = connection.execute(sql, params).fetchall()
        except (OSError, sqlite3.Error) as exc:
            raise SearchIndexError(f"Search failed: {exc}") from exc

        return [
            SearchHit(
                page_id=page_id,
                api_id=row_api_id,
                name=name,
                type=page_type,
                parent_id=parent_id,
            )
            for page_id, row_api_id, name, page_type, parent_id in rows
        ]

