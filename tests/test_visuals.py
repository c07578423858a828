from __future__ import annotations

from interiors_market.analytics.allocation import build_end_user_split
from interiors_market.analytics.visuals import (
    build_allocation_chart,
    build_distribution_chart,
    build_drilldown_chart,
    build_market_overview_chart,
    build_year_comparison_chart,
)
from interiors_market.data_loader import decode_dataset
from interiors_market.models import Series


def _sample_dataset():
    return decode_dataset(
        {
            "years": [2022, 2023, 2024, 2025],
            "totalMarket": [900, 1000, 1100, 1200],
            "endUser": {"OE": [500, 550, 600, 650], "Aftermarket": [400, 450, 500, 550]},
            "region": {"Europe": [450, 500, 550, 600], "Asia-Pacific": [450, 500, 550, 600]},
        }
    )


def test_overview_chart_has_yoy_on_secondary_axis():
    fig = build_market_overview_chart(_sample_dataset().total_market)
    assert [trace.name for trace in fig.data] == ["Market size", "YoY growth %"]
    assert fig.data[1].yaxis == "y2"


def test_drilldown_chart_splits_history_and_forecast():
    dataset = _sample_dataset()
    fig = build_drilldown_chart(dataset.end_user["OE"], base_year=2024)
    names = [trace.name for trace in fig.data]
    assert "Historical" in names
    assert "Forecast" in names
    assert "Historical trend (OLS)" in names


def test_allocation_chart_is_labelled_as_estimate():
    dataset = _sample_dataset()
    bars = build_end_user_split(dataset, dataset.region.values(), 2024)
    fig = build_allocation_chart(bars, title="OE vs Aftermarket by Region", year=2024)
    assert "estimated" in fig.layout.title.text
    assert fig.layout.barmode == "stack"


def test_empty_inputs_render_placeholder_figures():
    assert len(build_distribution_chart([], 2024, title="Region").layout.annotations) == 1
    assert len(build_year_comparison_chart([Series(name="A", data=())], [], title="Compare").layout.annotations) == 1
    assert len(build_allocation_chart([], title="Split", year=2024).layout.annotations) == 1


def test_drilldown_chart_for_estimated_series_keeps_custom_title():
    dataset = _sample_dataset()
    bars = build_end_user_split(dataset, dataset.region.values(), 2024)
    series = bars[0].sub_segments[0].full_series
    fig = build_drilldown_chart(series, base_year=2024, title=f"{series.name} - Market Trend (estimated)")
    assert fig.layout.title.text == "Europe (OE) - Market Trend (estimated)"
