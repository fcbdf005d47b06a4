"""Client package - API wrapper, local cache and data sources."""
from __future__ import annotations

from .api_client import ApiClient, ApiError, to_wire
from .data_layer import (
    DataSource,
    LoadResult,
    LocalDataSource,
    RemoteDataSource,
    build_data_source,
)
from .local_cache import LocalCache

__all__ = [
    "ApiClient",
    "ApiError",
    "DataSource",
    "LoadResult",
    "LocalCache",
    "LocalDataSource",
    "RemoteDataSource",
    "build_data_source",
    "to_wire",
]
