from __future__ import annotations

import math

import pytest

from interiors_market.analytics.timeseries import (
    build_series_trend,
    cagr,
    format_currency,
    format_percentage,
    series_to_frame,
    split_history_forecast,
    value_at_year,
    yoy_growth,
)
from interiors_market.models import Series, YearPoint


def _series(name: str, pairs) -> Series:
    return Series(name=name, data=tuple(YearPoint(year=y, value=v) for y, v in pairs))


def test_value_at_year_returns_zero_for_missing_years():
    series = _series("USA", [(2022, 10.0), (2023, 12.5)])
    assert value_at_year(series, 2023) == 12.5
    assert value_at_year(series, 1999) == 0.0
    assert value_at_year(series.data, 2022) == 10.0
    assert value_at_year(_series("Empty", []), 2024) == 0.0


def test_cagr_degenerate_inputs_return_zero():
    assert cagr(0, 100, 10) == 0
    assert cagr(-5, 100, 10) == 0
    assert cagr(100, 200, 0) == 0
    assert cagr(100, 200, 1) == pytest.approx(100.0)
    assert cagr(100, 121, 2) == pytest.approx(10.0)


def test_currency_and_percentage_formatting():
    assert format_currency(12300) == "$12.3B"
    assert format_currency(1000) == "$1.0B"
    assert format_currency(850) == "$850M"
    assert format_currency(849.6) == "$850M"
    assert format_percentage(12.34) == "+12.3%"
    assert format_percentage(0) == "+0.0%"
    assert format_percentage(-4.1) == "-4.1%"


def test_yoy_growth_skips_first_point_and_zero_bases():
    series = _series("Total", [(2019, 100.0), (2020, 50.0), (2021, 0.0), (2022, 10.0)])
    growth = yoy_growth(series)
    assert growth[0] is None
    assert growth[1] == pytest.approx(-50.0)
    assert growth[2] == pytest.approx(-100.0)
    assert growth[3] is None


def test_split_history_forecast_shares_the_base_year():
    series = _series("Total", [(2023, 1.0), (2024, 2.0), (2025, 3.0)])
    history, forecast = split_history_forecast(series, 2024)
    assert [p.year for p in history] == [2023, 2024]
    assert [p.year for p in forecast] == [2024, 2025]


def test_series_to_frame_is_long_format():
    frame = series_to_frame([_series("A", [(2024, 1.0), (2025, 2.0)]), _series("B", [(2024, 3.0)])])
    assert list(frame.columns) == ["segment", "year", "value"]
    assert len(frame) == 3
    assert series_to_frame([]).empty


def test_build_series_trend_fits_linear_history():
    series = _series("Total", [(2020, 10.0), (2021, 12.0), (2022, 14.0), (2023, 16.0), (2030, 99.0)])
    result = build_series_trend(series, until_year=2023)
    assert result.slope == pytest.approx(2.0)
    assert len(result.frame) == 4
    assert result.frame["trend"].iloc[-1] == pytest.approx(16.0)
    assert result.model_summary


def test_build_series_trend_needs_three_points():
    result = build_series_trend(_series("Short", [(2020, 1.0), (2021, 2.0)]))
    assert result.slope is None
    assert result.model_summary is None
    assert all(math.isnan(value) for value in result.frame["trend"])
