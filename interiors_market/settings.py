"""Runtime configuration for the market dashboard."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

DEFAULT_DATA_NAME = "marketData.json"
DEFAULT_DATA_PATH = Path(__file__).resolve().parent.parent / "data" / DEFAULT_DATA_NAME

DEFAULT_BASE_YEAR = 2024
DEFAULT_FORECAST_YEAR = 2034
DEFAULT_SELECTED_YEAR = 2025
DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class DashboardSettings:
    data_url: str | None = None
    data_path: Path = DEFAULT_DATA_PATH
    timeout: float = DEFAULT_TIMEOUT
    base_year: int = DEFAULT_BASE_YEAR
    forecast_year: int = DEFAULT_FORECAST_YEAR
    selected_year: int = DEFAULT_SELECTED_YEAR


def _as_int(value: object, default: int) -> int:
    if value is None or str(value).strip() == "":
        return default
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def _as_positive_float(value: object, default: float) -> float:
    if value is None or str(value).strip() == "":
        return default
    try:
        out = float(str(value).strip())
    except ValueError:
        return default
    return out if out > 0 else default


def load_settings(environ: Mapping[str, str] | None = None) -> DashboardSettings:
    """
    Build settings from environment variables.

    Recognised variables: ``MARKET_DATA_URL``, ``MARKET_DATA_PATH``,
    ``MARKET_DATA_TIMEOUT``, ``MARKET_BASE_YEAR``, ``MARKET_FORECAST_YEAR`` and
    ``MARKET_SELECTED_YEAR``. Unparseable values fall back to the defaults.
    """
    env = os.environ if environ is None else environ

    url = (env.get("MARKET_DATA_URL") or "").strip() or None
    raw_path = (env.get("MARKET_DATA_PATH") or "").strip()
    data_path = Path(raw_path) if raw_path else DEFAULT_DATA_PATH

    base_year = _as_int(env.get("MARKET_BASE_YEAR"), DEFAULT_BASE_YEAR)
    forecast_year = _as_int(env.get("MARKET_FORECAST_YEAR"), DEFAULT_FORECAST_YEAR)
    if forecast_year <= base_year:
        base_year, forecast_year = DEFAULT_BASE_YEAR, DEFAULT_FORECAST_YEAR

    return DashboardSettings(
        data_url=url,
        data_path=data_path,
        timeout=_as_positive_float(env.get("MARKET_DATA_TIMEOUT"), DEFAULT_TIMEOUT),
        base_year=base_year,
        forecast_year=forecast_year,
        selected_year=_as_int(env.get("MARKET_SELECTED_YEAR"), DEFAULT_SELECTED_YEAR),
    )
