from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ConfigDict, Field

from management_api.services.fetchers.base import FetcherError


class HttpManifestConfiguration(BaseModel):
    model_config = ConfigDict(extra="forbid")

    base_url: str = Field(min_length=1)
    manifest: str = Field(default="manifest.json", min_length=1)
    headers: dict[str, str] = Field(default_factory=dict)


class HttpManifestFetcher:
    """Reads the listing from a JSON manifest and each file from ``base_url + path``.

    The manifest is either a JSON array of paths or an object with a ``files``
    array.
    """

    def __init__(
        self,
        *,
        base_url: str,
        manifest: str = "manifest.json",
        headers: Mapping[str, str] | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._manifest = manifest.lstrip("/")
        self._headers = dict(headers or {})
        self._timeout_seconds = timeout_seconds

    @classmethod
    def from_configuration(
        cls,
        configuration: Mapping[str, Any],
        *,
        timeout_seconds: float = 30.0,
    ) -> HttpManifestFetcher:
        parsed = HttpManifestConfiguration.model_validate(dict(configuration))
        return cls(
            base_url=parsed.base_url,
            manifest=parsed.manifest,
            headers=parsed.headers,
            timeout_seconds=timeout_seconds,
        )

    def _get(self, url: str) -> httpx.Response:
        try:
            response = httpx.get(url, headers=self._headers, timeout=self._timeout_seconds)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise FetcherError(str(exc)) from exc
        return response

    def files(self) -> list[str]:
        response = self._get(f"{self._base_url}/{self._manifest}")
        try:
            payload = response.json()
        except ValueError as exc:
            raise FetcherError(f"Invalid manifest payload: {exc}") from exc

        entries = payload.get("files") if isinstance(payload, dict) else payload
        if not isinstance(entries, list):
            raise FetcherError("Invalid manifest payload: expected a list of paths")

        listing: list[str] = []
        for entry in entries:
            if not isinstance(entry, str):
                raise FetcherError(f"Invalid manifest entry: {entry!r}")
            listing.append(entry)
        return listing

    def fetch(self, path: str) -> bytes:
        response = self._get(f"{self._base_url}/{quote(path.lstrip('/'))}")
        return response.content
