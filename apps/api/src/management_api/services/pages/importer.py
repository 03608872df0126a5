from __future__ import annotations

from itertools import count

from management_api.config import get_settings
from management_api.logging import CLASSIFY, IMPORT, get_logger
from management_api.services.fetchers.registry import FetcherRegistry
from management_api.services.pages.builder import build_folder_page, build_leaf_page
from management_api.services.pages.classifier import classify_path
from management_api.services.pages.folders import FolderMaterializer
from management_api.services.pages.repository import PageRepository, PageRepositoryError
from management_api.services.pages.search_index import SearchIndex
from management_api.services.pages.service import index_page
from management_api.services.pages.types import (
    ClassifiedPath,
    DocumentKind,
    ImportResult,
    Page,
    PageDraft,
    PageSource,
    SkippedPath,
)

logger = get_logger(__name__)


class PageImportError(RuntimeError):
    def __init__(self, message: str, *, source_path: str) -> None:
        super().__init__(message)
        self.source_path = source_path


def _skip_reason(classified: ClassifiedPath) -> str:
    if classified.degenerate:
        return "malformed path"
    if classified.kind is DocumentKind.NONE:
        return "directory entry"
    return "unsupported extension"


def _persist(repository: PageRepository, draft: PageDraft, *, source_path: str) -> Page:
    try:
        return repository.create(draft)
    except PageRepositoryError as exc:
        raise PageImportError(
            f"Failed to persist '{source_path}': {exc}",
            source_path=source_path,
        ) from exc


def import_directory(
    *,
    api_id: str,
    source: PageSource,
    contributor: str | None,
    repository: PageRepository,
    search_index: SearchIndex,
    fetcher_registry: FetcherRegistry,
    index_attempts: int | None = None,
) -> ImportResult:
    """Import every supported file of a source as a tree of pages under ``api_id``.

    Folders are created top-down before any leaf, each one once. Fetch and
    persistence failures abort the run (pages already created are kept); index
    failures are logged and reported in the result.
    """
    if index_attempts is None:
        index_attempts = get_settings().index_attempts
    attempts = max(1, index_attempts)

    fetcher = fetcher_registry.create(source.type, source.configuration)
    listing = fetcher.files()
    logger.info(
        "%s Importing %d entries from '%s' source into api %s",
        IMPORT,
        len(listing),
        source.type,
        api_id,
    )

    classified_paths = [classify_path(path) for path in listing]
    skipped: list[SkippedPath] = []
    for classified in classified_paths:
        if classified.is_supported:
            continue
        reason = _skip_reason(classified)
        if classified.degenerate:
            logger.warning("%s Malformed path treated as unsupported: %r", CLASSIFY, classified.raw_path)
        else:
            logger.debug("%s Skipping %s (%s)", CLASSIFY, classified.raw_path, reason)
        skipped.append(SkippedPath(raw_path=classified.raw_path, reason=reason))

    materializer = FolderMaterializer()
    folder_plan = materializer.plan(classified_paths)
    order = count()
    pages: list[Page] = []
    index_failures: list[str] = []

    for node in folder_plan:
        draft = build_folder_page(
            node,
            api_id=api_id,
            parent_id=materializer.resolve(node.parent_path),
            contributor=contributor,
            order=next(order),
        )
        page = _persist(repository, draft, source_path=node.key)
        materializer.mark_created(node, page.id)
        pages.append(page)
        logger.debug("%s Created folder %s (%s)", IMPORT, node.key, page.id)
        if not index_page(search_index, page, attempts=attempts):
            index_failures.append(page.id)

    for classified in classified_paths:
        if not classified.is_supported:
            continue

        parent_id = materializer.resolve(classified.folder_path)
        content = fetcher.fetch(classified.raw_path)
        draft = build_leaf_page(
            classified,
            api_id=api_id,
            parent_id=parent_id,
            content=content,
            contributor=contributor,
            order=next(order),
        )
        page = _persist(repository, draft, source_path=classified.raw_path)
        pages.append(page)
        logger.debug("%s Created %s page %s (%s)", IMPORT, page.type.value, classified.raw_path, page.id)
        if not index_page(search_index, page, attempts=attempts):
            index_failures.append(page.id)

    result = ImportResult(pages=pages, skipped=skipped, index_failures=index_failures)
    logger.info(
        "%s Imported %d folders and %d pages into api %s (%d skipped, %d not indexed)",
        IMPORT,
        len(result.folders),
        len(result.leaves),
        api_id,
        len(skipped),
        len(index_failures),
    )
    return result
