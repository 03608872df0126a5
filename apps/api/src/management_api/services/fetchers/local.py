from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from management_api.services.fetchers.base import FetcherConfigurationError, FetcherError


class LocalDirectoryConfiguration(BaseModel):
    model_config = ConfigDict(extra="forbid")

    root_path: str = Field(min_length=1)


class LocalDirectoryFetcher:
    """Lists a directory tree on the local filesystem.

    Files are reported as ``/relative/path``; directories without any entries
    are reported with a trailing slash so the importer still sees them.
    """

    def __init__(self, root: Path) -> None:
        self._root = root.resolve()

    @classmethod
    def from_configuration(
        cls,
        configuration: Mapping[str, Any],
        *,
        allowed_root: str | None = None,
    ) -> LocalDirectoryFetcher:
        parsed = LocalDirectoryConfiguration.model_validate(dict(configuration))
        root = Path(parsed.root_path).resolve()
        if allowed_root is not None and not root.is_relative_to(Path(allowed_root).resolve()):
            raise FetcherConfigurationError(
                f"Local source {root} is outside the allowed root {allowed_root}"
            )
        return cls(root)

    def files(self) -> list[str]:
        if not self._root.exists():
            raise FetcherError(f"Source directory not found: {self._root}")
        if not self._root.is_dir():
            raise FetcherError(f"Source path is not a directory: {self._root}")

        listing: list[str] = []
        try:
            for path in sorted(self._root.rglob("*")):
                relative_path = path.relative_to(self._root).as_posix()
                if path.is_file():
                    listing.append(f"/{relative_path}")
                elif path.is_dir() and not any(path.iterdir()):
                    listing.append(f"/{relative_path}/")
        except OSError as exc:
            raise FetcherError(f"Failed to list {self._root}: {exc}") from exc
        return listing

    def fetch(self, path: str) -> bytes:
        target = (self._root / path.lstrip("/")).resolve()
        if not target.is_relative_to(self._root):
            raise FetcherError(f"Path escapes the source directory: {path}")

        try:
            return target.read_bytes()
        except OSError as exc:
            raise FetcherError(f"Failed to read {path}: {exc}") from exc
