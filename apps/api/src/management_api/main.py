from pathlib import Path
from typing import Annotated, Any

from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field

from management_api.config import get_settings
from management_api.db import get_engine
from management_api.logging import configure_logging
from management_api.services.fetchers import (
    FetcherConfigurationError,
    FetcherError,
    FetcherRegistry,
    UnknownFetcherError,
    build_default_registry,
)
from management_api.services.pages import (
    InvalidPageError,
    Page,
    PageImportError,
    PageSource,
    PageType,
    create_page,
    import_directory,
)
from management_api.services.pages.repository import (
    PageRepository,
    PageRepositoryError,
    SqlAlchemyPageRepository,
)
from management_api.services.pages.search_index import SearchIndexError, SqliteSearchIndex

app = FastAPI(title="Gateway Management API", version="0.1.0")


class PageSourceRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: str = Field(min_length=1)
    configuration: dict[str, Any] = Field(default_factory=dict)


class ImportPagesRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    source: PageSourceRequest
    contributor: str | None = None


class NewPageRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    type: PageType
    content: str | None = None
    parent_id: str | None = None
    contributor: str | None = None


@app.on_event("startup")
def startup() -> None:
    configure_logging(get_settings().log_level)
    get_engine()


def get_page_repository() -> PageRepository:
    return SqlAlchemyPageRepository(get_engine())


def get_search_index() -> SqliteSearchIndex:
    return SqliteSearchIndex(Path(get_settings().search_db_path))


def get_fetcher_registry() -> FetcherRegistry:
    return build_default_registry(get_settings())


def _page_payload(page: Page) -> dict[str, Any]:
    return {
        "id": page.id,
        "api_id": page.api_id,
        "name": page.name,
        "type": page.type.value,
        "parent_id": page.parent_id,
        "order": page.order,
        "content": page.content,
        "last_contributor": page.last_contributor,
        "source_path": page.source_path,
        "created_at": page.created_at.isoformat() if page.created_at is not None else None,
    }


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/apis/{api_id}/pages/_import", status_code=201)
def import_pages(
    api_id: str,
    request: ImportPagesRequest,
    repository: Annotated[PageRepository, Depends(get_page_repository)],
    search_index: Annotated[SqliteSearchIndex, Depends(get_search_index)],
    fetcher_registry: Annotated[FetcherRegistry, Depends(get_fetcher_registry)],
) -> list[dict[str, Any]]:
    try:
        result = import_directory(
            api_id=api_id,
            source=PageSource(
                type=request.source.type,
                configuration=request.source.configuration,
            ),
            contributor=request.contributor,
            repository=repository,
            search_index=search_index,
            fetcher_registry=fetcher_registry,
        )
    except (UnknownFetcherError, FetcherConfigurationError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except FetcherError as exc:
        raise HTTPException(status_code=502, detail=f"Fetch failed: {exc}") from exc
    except PageImportError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return [_page_payload(page) for page in result.pages]


@app.post("/apis/{api_id}/pages", status_code=201)
def create_api_page(
    api_id: str,
    request: NewPageRequest,
    repository: Annotated[PageRepository, Depends(get_page_repository)],
    search_index: Annotated[SqliteSearchIndex, Depends(get_search_index)],
) -> dict[str, Any]:
    try:
        page = create_page(
            api_id=api_id,
            name=request.name,
            page_type=request.type,
            content=request.content,
            parent_id=request.parent_id,
            contributor=request.contributor,
            repository=repository,
            search_index=search_index,
        )
    except InvalidPageError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except PageRepositoryError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return _page_payload(page)


@app.get("/apis/{api_id}/pages")
def list_pages(
    api_id: str,
    repository: Annotated[PageRepository, Depends(get_page_repository)],
    parent: str | None = Query(default=None),
    type: PageType | None = Query(default=None),
    name: str | None = Query(default=None),
    root: bool | None = Query(default=None),
) -> list[dict[str, Any]]:
    pages = repository.list_pages(
        api_id,
        parent_id=parent,
        page_type=type,
        name=name,
        root=root,
    )
    return [_page_payload(page) for page in pages]


@app.get("/apis/{api_id}/pages/{page_id}")
def get_page(
    api_id: str,
    page_id: str,
    repository: Annotated[PageRepository, Depends(get_page_repository)],
) -> dict[str, Any]:
    page = repository.get(page_id)
    if page is None or page.api_id != api_id:
        raise HTTPException(status_code=404, detail="page not found")
    return _page_payload(page)


@app.get("/pages/_search")
def search_pages(
    q: str,
    search_index: Annotated[SqliteSearchIndex, Depends(get_search_index)],
    api_id: str | None = None,
    k: int = 20,
) -> list[dict[str, Any]]:
    if not q.strip():
        raise HTTPException(status_code=400, detail="q must not be empty")

    try:
        hits = search_index.search(q, api_id=api_id, limit=max(1, min(k, 100)))
    except SearchIndexError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc

    return [
        {
            "page_id": hit.page_id,
            "api_id": hit.api_id,
            "name": hit.name,
            "type": hit.type,
            "parent_id": hit.parent_id,
        }
        for hit in hits
    ]


def run() -> None:
    import uvicorn

    uvicorn.run("management_api.main:app", host="0.0.0.0", port=8000, reload=False)


if __name__ == "__main__":
    run()
