"""Year/value series model and helpers shared by every market view."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple, Union

import numpy as np
import pandas as pd
import statsmodels.api as sm

from ..models import Series, YearPoint

SeriesLike = Union[Series, Sequence[YearPoint]]


def _points(series: SeriesLike) -> Sequence[YearPoint]:
    return series.data if isinstance(series, Series) else series


def value_at_year(series: SeriesLike, year: int) -> float:
    """Return the value recorded for ``year`` or ``0.0`` when the series has no such point."""
    for point in _points(series):
        if point.year == year:
            return point.value
    return 0.0


def cagr(start_value: float, end_value: float, years_span: float) -> float:
    """Compound annual growth rate in percent; ``0.0`` for non-positive start or span."""
    if start_value <= 0 or years_span <= 0:
        return 0.0
    return ((end_value / start_value) ** (1.0 / years_span) - 1.0) * 100.0


def format_currency(value: float) -> str:
    if value >= 1000:
        return f"${value / 1000:.1f}B"
    return f"${value:.0f}M"


def format_percentage(value: float) -> str:
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.1f}%"


def yoy_growth(series: SeriesLike) -> List[float | None]:
    """Year-over-year change in percent for each point (``None`` where undefined)."""
    points = _points(series)
    growth: List[float | None] = []
    previous: float | None = None
    for point in points:
        if previous is None or previous == 0:
            growth.append(None)
        else:
            growth.append((point.value - previous) / previous * 100.0)
        previous = point.value
    return growth


def split_history_forecast(series: SeriesLike, base_year: int) -> Tuple[List[YearPoint], List[YearPoint]]:
    """Split points into history (``<= base_year``) and forecast (``>= base_year``)."""
    points = list(_points(series))
    history = [point for point in points if point.year <= base_year]
    forecast = [point for point in points if point.year >= base_year]
    return history, forecast


def series_to_frame(series_list: Iterable[Series]) -> pd.DataFrame:
    """Long-format frame (``segment``, ``year``, ``value``) for tabular and chart consumers."""
    rows = [
        {"segment": series.name, "year": point.year, "value": point.value}
        for series in series_list
        for point in series.data
    ]
    if not rows:
        return pd.DataFrame(columns=["segment", "year", "value"])
    return pd.DataFrame(rows)


@dataclass(slots=True)
class TrendResult:
    frame: pd.DataFrame
    model_summary: str | None
    slope: float | None


def build_series_trend(series: SeriesLike, *, until_year: int | None = None) -> TrendResult:
    """Fit a linear OLS trend over the series, optionally limited to years up to ``until_year``."""
    points = [point for point in _points(series) if until_year is None or point.year <= until_year]
    frame = pd.DataFrame(
        {"year": [point.year for point in points], "value": [point.value for point in points]},
        columns=["year", "value"],
    )
    frame["trend"] = np.nan

    if len(frame) < 3:
        return TrendResult(frame=frame, model_summary=None, slope=None)

    X = sm.add_constant(frame["year"].to_numpy(dtype=float))
    model = sm.OLS(frame["value"].astype(float), X).fit()
    frame["trend"] = np.asarray(model.predict(X), dtype=float)
    params = np.asarray(model.params, dtype=float)
    slope = float(params[1]) if params.size > 1 else None
    return TrendResult(frame=frame, model_summary=model.summary().as_text(), slope=slope)
