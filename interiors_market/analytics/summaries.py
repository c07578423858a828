"""Headline KPIs and summary tables for the market views."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence

import pandas as pd

from ..models import Series
from ..settings import DEFAULT_BASE_YEAR, DEFAULT_FORECAST_YEAR
from .timeseries import cagr, format_currency, format_percentage, value_at_year, yoy_growth


@dataclass(slots=True)
class MarketKpis:
    """Values behind the three KPI cards of the overview and segment tabs."""

    year: int
    market_size: float
    cagr: float
    forecast_value: float
    base_year: int
    forecast_year: int


@dataclass(slots=True)
class DrillDownKpis:
    name: str
    current_value: float
    forecast_value: float
    cagr: float
    yoy_change: float
    base_year: int
    forecast_year: int


def _total_at(series_list: Sequence[Series], year: int) -> float:
    return sum(value_at_year(series, year) for series in series_list)


def build_market_kpis(
    series_list: Iterable[Series],
    year: int,
    *,
    base_year: int = DEFAULT_BASE_YEAR,
    forecast_year: int = DEFAULT_FORECAST_YEAR,
) -> MarketKpis:
    """
    Sum the given series at the selected, base and forecast years.

    Pass ``[dataset.total_market]`` for the overview tab, or a segmentation's series for a
    segment tab. CAGR spans ``forecast_year - base_year`` years.
    """
    items = list(series_list)
    base_total = _total_at(items, base_year)
    forecast_total = _total_at(items, forecast_year)
    return MarketKpis(
        year=year,
        market_size=_total_at(items, year),
        cagr=cagr(base_total, forecast_total, forecast_year - base_year),
        forecast_value=forecast_total,
        base_year=base_year,
        forecast_year=forecast_year,
    )


def build_drilldown_kpis(
    series: Series,
    *,
    base_year: int = DEFAULT_BASE_YEAR,
    forecast_year: int = DEFAULT_FORECAST_YEAR,
) -> DrillDownKpis:
    current = value_at_year(series, base_year)
    previous = value_at_year(series, base_year - 1)
    forecast = value_at_year(series, forecast_year)
    return DrillDownKpis(
        name=series.name,
        current_value=current,
        forecast_value=forecast,
        cagr=cagr(current, forecast, forecast_year - base_year),
        yoy_change=(current - previous) / previous * 100.0 if previous > 0 else 0.0,
        base_year=base_year,
        forecast_year=forecast_year,
    )


def kpis_to_frame(kpis: MarketKpis) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"Metric": f"{kpis.year} Market Size", "Value": format_currency(kpis.market_size)},
            {
                "Metric": f"{kpis.forecast_year - kpis.base_year}-Year CAGR",
                "Value": format_percentage(kpis.cagr),
            },
            {"Metric": f"{kpis.forecast_year} Forecast", "Value": format_currency(kpis.forecast_value)},
        ]
    )


def growth_table(
    series_list: Iterable[Series],
    *,
    start_year: int = DEFAULT_BASE_YEAR,
    end_year: int = DEFAULT_FORECAST_YEAR,
) -> pd.DataFrame:
    """Start/end values and CAGR per segment."""
    columns = ["Segment", f"{start_year}", f"{end_year}", "CAGR %"]
    rows: List[Dict[str, object]] = []
    for series in series_list:
        start = value_at_year(series, start_year)
        end = value_at_year(series, end_year)
        rows.append(
            {
                "Segment": series.name,
                f"{start_year}": start,
                f"{end_year}": end,
                "CAGR %": round(cagr(start, end, end_year - start_year), 2),
            }
        )
    return pd.DataFrame(rows, columns=columns)


def distribution_table(series_list: Iterable[Series], year: int) -> pd.DataFrame:
    """Value and share of each segment in ``year``."""
    frame = pd.DataFrame(
        [{"Segment": series.name, "Value": value_at_year(series, year)} for series in series_list],
        columns=["Segment", "Value"],
    )
    total = frame["Value"].sum()
    frame["Share %"] = frame["Value"] / total * 100.0 if total else 0.0
    return frame


def year_comparison_table(series_list: Iterable[Series], years: Sequence[int]) -> pd.DataFrame:
    """One row per segment and one column per requested year."""
    rows = []
    for series in series_list:
        row: Dict[str, object] = {"Segment": series.name}
        for year in years:
            row[str(year)] = value_at_year(series, year)
        rows.append(row)
    return pd.DataFrame(rows, columns=["Segment", *[str(year) for year in years]])


def overview_table(series: Series) -> pd.DataFrame:
    """Year, value and YoY growth of a single series (YoY is ``NaN`` where undefined)."""
    growth = yoy_growth(series)
    return pd.DataFrame(
        {
            "year": series.years,
            "value": series.values,
            "yoy_growth": pd.Series(growth, dtype="float64"),
        }
    )
