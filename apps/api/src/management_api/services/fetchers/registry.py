from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import ValidationError

from management_api.config import Settings
from management_api.logging import FETCHER, get_logger
from management_api.services.fetchers.base import (
    Fetcher,
    FetcherConfigurationError,
    UnknownFetcherError,
)
from management_api.services.fetchers.local import LocalDirectoryFetcher
from management_api.services.fetchers.remote import HttpManifestFetcher

logger = get_logger(__name__)

FetcherFactory = Callable[[Mapping[str, Any]], Fetcher]


class FetcherRegistry:
    """Maps a page source type to the factory building its fetcher."""

    def __init__(self) -> None:
        self._factories: dict[str, FetcherFactory] = {}

    def register(self, source_type: str, factory: FetcherFactory) -> None:
        key = source_type.strip().lower()
        if key in self._factories:
            logger.info("%s Overwriting fetcher registration for type=%r", FETCHER, key)
        self._factories[key] = factory
        logger.debug("%s Registered fetcher type=%r", FETCHER, key)

    def available(self) -> list[str]:
        return sorted(self._factories)

    def create(self, source_type: str, configuration: Mapping[str, Any] | None = None) -> Fetcher:
        key = source_type.strip().lower()
        factory = self._factories.get(key)
        if factory is None:
            available = ", ".join(self.available()) or "<none>"
            raise UnknownFetcherError(
                f"No fetcher registered for type='{source_type}'. Available: {available}"
            )

        try:
            return factory(configuration or {})
        except ValidationError as exc:
            raise FetcherConfigurationError(
                f"Invalid configuration for fetcher type='{key}': {exc}"
            ) from exc


def build_default_registry(settings: Settings) -> FetcherRegistry:
    registry = FetcherRegistry()
    registry.register(
        "local",
        lambda configuration: LocalDirectoryFetcher.from_configuration(
            configuration,
            allowed_root=settings.local_fetcher_root,
        ),
    )
    registry.register(
        "http",
        lambda configuration: HttpManifestFetcher.from_configuration(
            configuration,
            timeout_seconds=settings.fetcher_timeout_seconds,
        ),
    )
    return registry
