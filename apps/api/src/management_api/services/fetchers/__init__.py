from management_api.services.fetchers.base import (
    Fetcher,
    FetcherConfigurationError,
    FetcherError,
    UnknownFetcherError,
)
from management_api.services.fetchers.registry import FetcherRegistry, build_default_registry

__all__ = [
    "Fetcher",
    "FetcherConfigurationError",
    "FetcherError",
    "FetcherRegistry",
    "UnknownFetcherError",
    "build_default_registry",
]
