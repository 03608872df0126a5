import logging
from pathlib import Path

import pytest
from sqlalchemy.engine import Engine

from management_api.services.pages.repository import SqlAlchemyPageRepository
from management_api.services.pages.search_index import SearchIndexError, SqliteSearchIndex
from management_api.services.pages.service import InvalidPageError, create_page, index_page
from management_api.services.pages.types import Page, PageDraft, PageType


class BrokenIndex:
    def __init__(self, error: Exception) -> None:
        self._error = error
        self.calls = 0

    def index(self, page: Page) -> None:
        self.calls += 1
        raise self._error


def _page() -> Page:
    return Page(
        id="p1",
        api_id="api-1",
        name="m1",
        type=PageType.MARKDOWN,
        parent_id=None,
        content="# m1",
        order=0,
        last_contributor=None,
        source_path=None,
    )


def test_create_page_appends_after_existing_pages(sqlite_engine: Engine, tmp_path: Path) -> None:
    repository = SqlAlchemyPageRepository(sqlite_engine)
    search_index = SqliteSearchIndex(tmp_path / "pages.db")
    repository.create(
        PageDraft(
            api_id="api-1",
            name="existing",
            type=PageType.MARKDOWN,
            parent_id=None,
            content="",
            contributor=None,
            order=6,
            source_path=None,
        )
    )

    page = create_page(
        api_id="api-1",
        name=" Overview ",
        page_type=PageType.MARKDOWN,
        content="# Overview",
        parent_id=None,
        contributor="jane",
        repository=repository,
        search_index=search_index,
        index_attempts=1,
    )
    first_of_other_api = create_page(
        api_id="api-2",
        name="Intro",
        page_type=PageType.MARKDOWN,
        content=None,
        parent_id=None,
        contributor=None,
        repository=repository,
        search_index=search_index,
        index_attempts=1,
    )

    assert page.order == 7
    assert page.name == "Overview"
    assert page.last_contributor == "jane"
    assert first_of_other_api.order == 0
    assert [hit.page_id for hit in search_index.search("overview")] == [page.id]


def test_create_page_validates_parent(sqlite_engine: Engine, tmp_path: Path) -> None:
    repository = SqlAlchemyPageRepository(sqlite_engine)
    search_index = SqliteSearchIndex(tmp_path / "pages.db")

    def create(name: str, page_type: PageType, parent_id: str | None, api_id: str = "api-1") -> Page:
        return create_page(
            api_id=api_id,
            name=name,
            page_type=page_type,
            content="body",
            parent_id=parent_id,
            contributor=None,
            repository=repository,
            search_index=search_index,
            index_attempts=1,
        )

    folder = create("docs", PageType.FOLDER, None)
    leaf = create("m1", PageType.MARKDOWN, folder.id)

    assert folder.content is None
    assert leaf.parent_id == folder.id
    with pytest.raises(InvalidPageError, match="not a folder"):
        create("m2", PageType.MARKDOWN, leaf.id)
    with pytest.raises(InvalidPageError, match="not found"):
        create("m2", PageType.MARKDOWN, "missing")
    with pytest.raises(InvalidPageError, match="not found"):
        create("m2", PageType.MARKDOWN, folder.id, api_id="api-2")
    with pytest.raises(InvalidPageError, match="empty"):
        create("  ", PageType.MARKDOWN, None)


def test_create_page_survives_index_failure(sqlite_engine: Engine) -> None:
    repository = SqlAlchemyPageRepository(sqlite_engine)

    page = create_page(
        api_id="api-1",
        name="m1",
        page_type=PageType.MARKDOWN,
        content="# m1",
        parent_id=None,
        contributor=None,
        repository=repository,
        search_index=BrokenIndex(SearchIndexError("offline")),
        index_attempts=2,
    )

    assert repository.get(page.id) is not None


def test_index_page_retries_search_index_errors() -> None:
    search_index = BrokenIndex(SearchIndexError("offline"))

    assert index_page(search_index, _page(), attempts=3) is False
    assert search_index.calls == 3


def test_index_page_logs_unexpected_errors_without_raising(caplog: pytest.LogCaptureFixture) -> None:
    search_index = BrokenIndex(KeyError("mapping"))

    with caplog.at_level(logging.ERROR):
        assert index_page(search_index, _page(), attempts=3) is False

    assert search_index.calls == 1
    assert "Unexpected error indexing page p1" in caplog.text
