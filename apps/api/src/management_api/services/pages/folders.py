from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from management_api.services.pages.types import ClassifiedPath, FolderNode, folder_key


class FolderResolutionError(LookupError):
    pass


@dataclass
class _FolderState:
    node: FolderNode
    page_id: str | None = None


class FolderMaterializer:
    """Plans and tracks the folders of a single import run.

    Folders are keyed by their joined path. A key is recorded the first time it
    is seen, so each distinct folder is planned exactly once however many
    entries share it, and always after its parent.
    """

    def __init__(self) -> None:
        self._states: dict[str, _FolderState] = {}

    def plan(self, classified_paths: Iterable[ClassifiedPath]) -> list[FolderNode]:
        planned: list[FolderNode] = []
        for classified in classified_paths:
            segments = classified.folder_path
            for depth in range(1, len(segments) + 1):
                prefix = segments[:depth]
                key = folder_key(prefix)
                if key in self._states:
                    continue

                node = FolderNode(
                    path=prefix,
                    name=prefix[-1],
                    parent_path=prefix[:-1] or None,
                )
                self._states[key] = _FolderState(node=node)
                planned.append(node)
        return planned

    def mark_created(self, node: FolderNode, page_id: str) -> None:
        state = self._states.get(node.key)
        if state is None:
            raise FolderResolutionError(f"Folder was never planned: {node.key}")
        if state.page_id is not None:
            raise FolderResolutionError(f"Folder already created: {node.key}")
        state.page_id = page_id

    def resolve(self, folder_path: tuple[str, ...] | None) -> str | None:
        """Return the persisted id of a folder, or ``None`` for the root."""
        if not folder_path:
            return None

        state = self._states.get(folder_key(folder_path))
        if state is None or state.page_id is None:
            raise FolderResolutionError(
                f"Folder has not been created yet: {folder_key(folder_path)}"
            )
        return state.page_id
