"""Rate closure building, path search and the published rate store."""

from __future__ import annotations

from fx_crossrate.core.closure import ClosureBuilder, build_rate_table
from fx_crossrate.core.models import ConversionPath, CurrencyPair, DirectRate
from fx_crossrate.core.path_search import find_paths
from fx_crossrate.core.rate_store import RateStore, RateTable

__all__ = [
    "ClosureBuilder",
    "ConversionPath",
    "CurrencyPair",
    "DirectRate",
    "RateStore",
    "RateTable",
    "build_rate_table",
    "find_paths",
]
