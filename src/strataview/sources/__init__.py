from __future__ import annotations

from .api_source import ApiSource
from .chain import ENDPOINTS, DataOrigin, DataSourceChain
from .csv_source import CsvFileSource
from .las_source import LasDirectorySource

__all__ = [
    "ENDPOINTS",
    "DataOrigin",
    "DataSourceChain",
    "ApiSource",
    "CsvFileSource",
    "LasDirectorySource",
]
