"""
Client Package
==============

Everything a consumer of the API needs:
- IoTPlatformClient = async HTTP client for every endpoint
- Data providers = live data with a demo-data fallback
- Export helpers = CSV / JSON dumps
"""

from .api import ApiError, IoTPlatformClient, clean_params
from .providers import (
    DataProvider,
    ApiDataProvider,
    StaticDataProvider,
    FallbackDataProvider,
)
from .export import to_csv, to_json, export_to_csv, export_to_json

__all__ = [
    "ApiError",
    "IoTPlatformClient",
    "clean_params",
    "DataProvider",
    "ApiDataProvider",
    "StaticDataProvider",
    "FallbackDataProvider",
    "to_csv",
    "to_json",
    "export_to_csv",
    "export_to_json",
]
