from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Protocol
import uuid

from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from management_api.models import PageRecord
from management_api.services.pages.types import Page, PageDraft, PageType


class PageRepositoryError(RuntimeError):
    pass


class PageRepository(Protocol):
    def create(self, draft: PageDraft) -> Page: ...

    def get(self, page_id: str) -> Page | None: ...

    def list_pages(
        self,
        api_id: str,
        *,
        parent_id: str | None = None,
        page_type: PageType | None = None,
        name: str | None = None,
        root: bool | None = None,
    ) -> Sequence[Page]: ...

    def max_order(self, api_id: str) -> int | None: ...


def _to_page(record: PageRecord) -> Page:
    return Page(
        id=record.id,
        api_id=record.api_id,
        name=record.name,
        type=PageType(record.type),
        parent_id=record.parent_id,
        content=record.content,
        order=record.order,
        last_contributor=record.last_contributor,
        source_path=record.source_path,
        created_at=record.created_at,
    )


class SqlAlchemyPageRepository:
    """Stores pages in the ``pages`` table, one committed session per create."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def create(self, draft: PageDraft) -> Page:
        now = datetime.now(timezone.utc)
        record = PageRecord(
            id=uuid.uuid4().hex,
            api_id=draft.api_id,
            name=draft.name,
            type=draft.type.value,
            parent_id=draft.parent_id,
            content=draft.content,
            order=draft.order,
            last_contributor=draft.contributor,
            source_path=draft.source_path,
            created_at=now,
            updated_at=now,
        )

        try:
            with Session(self._engine) as session:
                session.add(record)
                session.commit()
                page = _to_page(record)
        except SQLAlchemyError as exc:
            raise PageRepositoryError(
                f"Failed to create page '{draft.name}' for api '{draft.api_id}': {exc}"
            ) from exc

        return page

    def get(self, page_id: str) -> Page | None:
        with Session(self._engine) as session:
            record = session.get(PageRecord, page_id)
            if record is None:
                return None
            return _to_page(record)

    def list_pages(
        self,
        api_id: str,
        *,
        parent_id: str | None = None,
        page_type: PageType | None = None,
        name: str | None = None,
        root: bool | None = None,
    ) -> list[Page]:
        stmt = select(PageRecord).where(PageRecord.api_id == api_id)
        if parent_id is not None:
            stmt = stmt.where(PageRecord.parent_id == parent_id)
        if page_type is not None:
            stmt = stmt.where(PageRecord.type == page_type.value)
        if name is not None:
            stmt = stmt.where(PageRecord.name == name)
        if root is True:
            stmt = stmt.where(PageRecord.parent_id.is_(None))
        elif root is False:
            stmt = stmt.where(PageRecord.parent_id.is_not(None))

        with Session(self._engine) as session:
            records = session.scalars(
                stmt.order_by(PageRecord.order.asc(), PageRecord.created_at.asc())
            ).all()
            return [_to_page(record) for record in records]

    def max_order(self, api_id: str) -> int | None:
        with Session(self._engine) as session:
            return session.scalar(
                select(func.max(PageRecord.order)).where(PageRecord.api_id == api_id)
            )
