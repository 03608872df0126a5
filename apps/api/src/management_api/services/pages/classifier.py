"""Maps a raw listing entry to its folder chain, leaf name and document kind."""

from __future__ import annotations

from management_api.services.pages.types import ClassifiedPath, DocumentKind

EXTENSION_KINDS: dict[str, DocumentKind] = {
    "md": DocumentKind.MARKDOWN,
    "markdown": DocumentKind.MARKDOWN,
    "json": DocumentKind.SWAGGER,
    "yaml": DocumentKind.SWAGGER,
    "yml": DocumentKind.SWAGGER,
}

_RELATIVE_SEGMENTS = {".", ".."}


def _is_degenerate_segment(segment: str) -> bool:
    if segment in _RELATIVE_SEGMENTS:
        return True
    return any(
        ord(char) < 32 or ord(char) == 127 or "\ud800" <= char <= "\udfff"
        for char in segment
    )


def _split_extension(segment: str) -> tuple[str, DocumentKind]:
    stem, separator, extension = segment.rpartition(".")
    if separator and stem:
        kind = EXTENSION_KINDS.get(extension.lower())
        if kind is not None:
            return stem, kind
    return segment, DocumentKind.UNSUPPORTED


def classify_path(path: str) -> ClassifiedPath:
    """Classify one listing entry.

    Every component but the last is part of the containing folder chain. A
    trailing ``/`` marks a bare directory entry: its last component is dropped
    and no leaf is produced. Paths with ``.``/``..`` segments, control
    characters or surrogate escapes (left by undecodable file names) degrade
    to ``UNSUPPORTED``; the components before the first offending one still
    count as folders.
    """
    parts = [part for part in path.split("/") if part]
    if not parts:
        return ClassifiedPath(
            raw_path=path,
            folder_path=(),
            leaf_name=None,
            kind=DocumentKind.NONE,
        )

    folder_parts = parts[:-1]
    for index, part in enumerate(parts):
        if _is_degenerate_segment(part):
            return ClassifiedPath(
                raw_path=path,
                folder_path=tuple(folder_parts[:index]),
                leaf_name=path,
                kind=DocumentKind.UNSUPPORTED,
                degenerate=True,
            )

    if path.endswith("/"):
        return ClassifiedPath(
            raw_path=path,
            folder_path=tuple(folder_parts),
            leaf_name=None,
            kind=DocumentKind.NONE,
        )

    leaf_name, kind = _split_extension(parts[-1])
    return ClassifiedPath(
        raw_path=path,
        folder_path=tuple(folder_parts),
        leaf_name=leaf_name,
        kind=kind,
    )
