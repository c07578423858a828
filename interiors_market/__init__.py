"""Aircraft interiors market research analytics package."""

from .data_loader import (
    DatasetUnavailableError,
    LoadState,
    LoadStatus,
    MarketDataSource,
    decode_dataset,
    expand_nested,
    expand_segment_map,
    expand_series,
    load_dataset,
    load_payload,
)
from .models import MarketDataset, Series, YearPoint
from .settings import DEFAULT_DATA_PATH, DashboardSettings, load_settings

__all__ = [
    "DatasetUnavailableError",
    "LoadState",
    "LoadStatus",
    "MarketDataSource",
    "decode_dataset",
    "expand_nested",
    "expand_segment_map",
    "expand_series",
    "load_dataset",
    "load_payload",
    "MarketDataset",
    "Series",
    "YearPoint",
    "DEFAULT_DATA_PATH",
    "DashboardSettings",
    "load_settings",
]
