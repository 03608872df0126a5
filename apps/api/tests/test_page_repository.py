import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from management_api.models import PageRecord
from management_api.services.pages.repository import PageRepositoryError, SqlAlchemyPageRepository
from management_api.services.pages.types import PageDraft, PageType


def _draft(name: str, page_type: PageType, *, parent_id: str | None = None, order: int = 0) -> PageDraft:
    return PageDraft(
        api_id="api-1",
        name=name,
        type=page_type,
        parent_id=parent_id,
        content=None if page_type is PageType.FOLDER else f"# {name}",
        contributor="jane",
        order=order,
        source_path=f"/{name}",
    )


def test_create_assigns_id_and_persists_row(sqlite_engine: Engine) -> None:
    repository = SqlAlchemyPageRepository(sqlite_engine)

    folder = repository.create(_draft("src", PageType.FOLDER))
    leaf = repository.create(_draft("m1", PageType.MARKDOWN, parent_id=folder.id, order=1))

    assert folder.id and leaf.id and folder.id != leaf.id
    assert leaf.parent_id == folder.id
    assert leaf.type is PageType.MARKDOWN
    assert leaf.last_contributor == "jane"
    assert leaf.created_at is not None

    with Session(sqlite_engine) as session:
        record = session.get(PageRecord, leaf.id)
        assert record is not None
        assert record.content == "# m1"
        assert record.type == "MARKDOWN"


def test_get_returns_none_for_missing_page(sqlite_engine: Engine) -> None:
    repository = SqlAlchemyPageRepository(sqlite_engine)

    assert repository.get("missing") is None


def test_list_pages_filters_and_orders(sqlite_engine: Engine) -> None:
    repository = SqlAlchemyPageRepository(sqlite_engine)
    folder = repository.create(_draft("src", PageType.FOLDER, order=0))
    repository.create(_draft("b", PageType.SWAGGER, parent_id=folder.id, order=2))
    repository.create(_draft("a", PageType.MARKDOWN, parent_id=folder.id, order=1))
    repository.create(_draft("root", PageType.MARKDOWN, order=3))

    assert [page.name for page in repository.list_pages("api-1")] == ["src", "a", "b", "root"]
    assert [page.name for page in repository.list_pages("api-1", parent_id=folder.id)] == ["a", "b"]
    assert [
        page.name for page in repository.list_pages("api-1", page_type=PageType.MARKDOWN)
    ] == ["a", "root"]
    assert repository.list_pages("api-2") == []


def test_create_wraps_storage_errors(sqlite_engine: Engine) -> None:
    repository = SqlAlchemyPageRepository(sqlite_engine)
    PageRecord.__table__.drop(bind=sqlite_engine)

    with pytest.raises(PageRepositoryError, match="src"):
        repository.create(_draft("src", PageType.FOLDER))


def test_list_pages_filters_by_name_and_root(sqlite_engine: Engine) -> None:
    repository = SqlAlchemyPageRepository(sqlite_engine)
    folder = repository.create(_draft("src", PageType.FOLDER, order=0))
    repository.create(_draft("m2", PageType.MARKDOWN, parent_id=folder.id, order=1))
    repository.create(_draft("m2", PageType.SWAGGER, order=2))
    repository.create(_draft("swagger", PageType.SWAGGER, order=3))

    assert [page.name for page in repository.list_pages("api-1", root=True)] == ["src", "m2", "swagger"]
    assert [page.parent_id for page in repository.list_pages("api-1", root=False)] == [folder.id]
    assert [page.type for page in repository.list_pages("api-1", name="m2")] == [
        PageType.MARKDOWN,
        PageType.SWAGGER,
    ]
    assert [page.type for page in repository.list_pages("api-1", name="m2", root=True)] == [
        PageType.SWAGGER
    ]


def test_max_order_is_scoped_to_api(sqlite_engine: Engine) -> None:
    repository = SqlAlchemyPageRepository(sqlite_engine)

    assert repository.max_order("api-1") is None

    repository.create(_draft("a", PageType.MARKDOWN, order=4))
    repository.create(_draft("b", PageType.MARKDOWN, order=2))

    assert repository.max_order("api-1") == 4
    assert repository.max_order("api-2") is None
