from __future__ import annotations

from management_api.config import get_settings
from management_api.logging import INDEX, get_logger
from management_api.services.pages.repository import PageRepository
from management_api.services.pages.search_index import SearchIndex, SearchIndexError
from management_api.services.pages.types import Page, PageDraft, PageType

logger = get_logger(__name__)


class InvalidPageError(ValueError):
    pass


def index_page(search_index: SearchIndex, page: Page, *, attempts: int) -> bool:
    """Index ``page``, retrying ``SearchIndexError`` up to ``attempts`` times.

    Never raises: a page that could not be indexed is still persisted, so the
    failure is logged and reported through the return value.
    """
    for attempt in range(1, attempts + 1):
        try:
            search_index.index(page)
        except SearchIndexError as exc:
            if attempt < attempts:
                logger.debug(
                    "%s Retrying index of page %s (attempt %d/%d): %s",
                    INDEX,
                    page.id,
                    attempt,
                    attempts,
                    exc,
                )
                continue
            logger.warning("%s Failed to index page %s (%s): %s", INDEX, page.id, page.name, exc)
            return False
        except Exception:
            logger.exception("%s Unexpected error indexing page %s (%s)", INDEX, page.id, page.name)
            return False
        return True
    return False


def create_page(
    *,
    api_id: str,
    name: str,
    page_type: PageType,
    content: str | None,
    parent_id: str | None,
    contributor: str | None,
    repository: PageRepository,
    search_index: SearchIndex,
    index_attempts: int | None = None,
) -> Page:
    """Create one page placed after every existing page of the api."""
    if not name.strip():
        raise InvalidPageError("name must not be empty")

    if parent_id is not None:
        parent = repository.get(parent_id)
        if parent is None or parent.api_id != api_id:
            raise InvalidPageError(f"parent page not found: {parent_id}")
        if parent.type is not PageType.FOLDER:
            raise InvalidPageError(f"parent page is not a folder: {parent_id}")

    if index_attempts is None:
        index_attempts = get_settings().index_attempts

    max_order = repository.max_order(api_id)
    page = repository.create(
        PageDraft(
            api_id=api_id,
            name=name.strip(),
            type=page_type,
            parent_id=parent_id,
            content=None if page_type is PageType.FOLDER else content,
            contributor=contributor,
            order=0 if max_order is None else max_order + 1,
            source_path=None,
        )
    )
    index_page(search_index, page, attempts=max(1, index_attempts))
    return page
