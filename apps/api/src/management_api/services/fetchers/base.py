from __future__ import annotations

from typing import Protocol


class FetcherError(RuntimeError):
    pass


class UnknownFetcherError(FetcherError):
    pass


class FetcherConfigurationError(FetcherError):
    pass


class Fetcher(Protocol):
    """Source of a flat path listing and the raw content behind each path."""

    def files(self) -> list[str]: ...

    def fetch(self, path: str) -> bytes: ...
