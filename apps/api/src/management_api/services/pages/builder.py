from __future__ import annotations

from management_api.services.pages.types import ClassifiedPath, FolderNode, PageDraft, PageType


def decode_content(content: bytes) -> str:
    return content.decode("utf-8", errors="replace")


def build_leaf_page(
    classified: ClassifiedPath,
    *,
    api_id: str,
    parent_id: str | None,
    content: bytes,
    contributor: str | None,
    order: int,
) -> PageDraft:
    page_type = classified.kind.page_type
    if page_type is None or classified.leaf_name is None:
        raise ValueError(f"Cannot build a page for unsupported entry: {classified.raw_path}")

    return PageDraft(
        api_id=api_id,
        name=classified.leaf_name,
        type=page_type,
        parent_id=parent_id,
        content=decode_content(content),
        contributor=contributor,
        order=order,
        source_path=classified.raw_path,
    )


def build_folder_page(
    node: FolderNode,
    *,
    api_id: str,
    parent_id: str | None,
    contributor: str | None,
    order: int,
) -> PageDraft:
    return PageDraft(
        api_id=api_id,
        name=node.name,
        type=PageType.FOLDER,
        parent_id=parent_id,
        content=None,
        contributor=contributor,
        order=order,
        source_path=node.key,
    )
