"""Plotly figures for the market views."""

from __future__ import annotations

from typing import Iterable, Sequence

import pandas as pd
import plotly.express as px

from ..models import Series
from ..settings import DEFAULT_BASE_YEAR
from .allocation import AllocatedBar, allocation_to_frame
from .summaries import distribution_table, overview_table, year_comparison_table
from .timeseries import build_series_trend, series_to_frame, split_history_forecast

_HISTORY = "Historical"
_FORECAST = "Forecast"
_VALUE_LABEL = "US$ Million"


def _empty_figure(message: str):
    fig = px.scatter()
    fig.add_annotation(text=message, showarrow=False)
    fig.update_xaxes(visible=False)
    fig.update_yaxes(visible=False)
    fig.update_layout(height=320, margin=dict(l=10, r=10, t=40, b=10))
    return fig


def build_market_overview_chart(total_market: Series, *, title: str = "Market Size & YoY Growth Trend"):
    """Market size per year with YoY growth on a secondary axis."""
    frame = overview_table(total_market)
    if frame.empty:
        return _empty_figure("No market data available.")

    fig = px.line(frame, x="year", y="value", markers=True, title=title, labels={"value": _VALUE_LABEL, "year": "Year"})
    fig.data[0].name = "Market size"
    fig.data[0].showlegend = True

    growth = frame.dropna(subset=["yoy_growth"])
    if not growth.empty:
        fig.add_trace(px.line(growth, x="year", y="yoy_growth").data[0])
        fig.data[-1].name = "YoY growth %"
        fig.data[-1].showlegend = True
        fig.data[-1].yaxis = "y2"
        fig.data[-1].line.dash = "dot"
        fig.update_layout(yaxis2=dict(title="YoY growth %", overlaying="y", side="right"))
    fig.update_layout(height=420, legend_title_text="")
    return fig


def build_segment_trend_chart(total_market: Series, segments: Iterable[Series], *, title: str):
    frame = series_to_frame([total_market, *segments])
    if frame.empty:
        return _empty_figure("No segment data available.")
    fig = px.line(
        frame,
        x="year",
        y="value",
        color="segment",
        title=title,
        labels={"value": _VALUE_LABEL, "year": "Year", "segment": "Segment"},
    )
    fig.update_layout(height=420)
    return fig


def build_distribution_chart(segments: Iterable[Series], year: int, *, title: str):
    table = distribution_table(segments, year)
    if table.empty or table["Value"].sum() == 0:
        return _empty_figure(f"No {title.lower()} data for {year}.")
    fig = px.pie(table, names="Segment", values="Value", hole=0.55, title=f"{title} ({year})")
    fig.update_traces(textposition="inside", textinfo="percent")
    fig.update_layout(height=360)
    return fig


def build_segment_bar_chart(segments: Iterable[Series], year: int, *, title: str):
    table = distribution_table(segments, year)
    if table.empty:
        return _empty_figure(f"No {title.lower()} data for {year}.")
    fig = px.bar(
        table.sort_values("Value", ascending=False),
        x="Value",
        y="Segment",
        orientation="h",
        title=f"{title} Distribution ({year})",
        labels={"Value": _VALUE_LABEL},
    )
    fig.update_layout(height=400, yaxis=dict(autorange="reversed"))
    return fig


def build_allocation_chart(bars: Iterable[AllocatedBar], *, title: str, year: int):
    """Stacked horizontal bars of an estimated cross-tabulation."""
    frame = allocation_to_frame(bars)
    if frame.empty:
        return _empty_figure("No cross-segment data available.")
    fig = px.bar(
        frame,
        x="value",
        y="bar",
        color="segment",
        orientation="h",
        hover_data={"share": ":.1f"},
        title=f"{title} ({year}, estimated)",
        labels={"value": _VALUE_LABEL, "bar": "", "segment": "Segment", "share": "Share %"},
    )
    fig.update_layout(barmode="stack", height=360, legend_title_text="")
    return fig


def build_year_comparison_chart(segments: Iterable[Series], years: Sequence[int], *, title: str):
    table = year_comparison_table(segments, years)
    if table.empty or not years:
        return _empty_figure("Select at least one year to compare.")
    long = table.melt(id_vars="Segment", var_name="Year", value_name="Value")
    fig = px.bar(long, x="Segment", y="Value", color="Year", barmode="group", title=title, labels={"Value": _VALUE_LABEL})
    fig.update_layout(height=400)
    return fig


def build_drilldown_chart(series: Series, *, base_year: int = DEFAULT_BASE_YEAR, title: str | None = None):
    """Historical and forecast lines for one series plus the OLS trend of the history."""
    history, forecast = split_history_forecast(series, base_year)
    frame = pd.concat(
        [
            pd.DataFrame({"year": [p.year for p in history], "value": [p.value for p in history], "phase": _HISTORY}),
            pd.DataFrame({"year": [p.year for p in forecast], "value": [p.value for p in forecast], "phase": _FORECAST}),
        ],
        ignore_index=True,
    )
    if frame.empty:
        return _empty_figure(f"No data for {series.name}.")

    fig = px.line(
        frame,
        x="year",
        y="value",
        color="phase",
        markers=True,
        title=title or f"{series.name} - Market Trend",
        labels={"value": _VALUE_LABEL, "year": "Year", "phase": ""},
    )

    trend = build_series_trend(series, until_year=base_year)
    if trend.frame["trend"].notna().any():
        fig.add_trace(px.line(trend.frame, x="year", y="trend").data[0])
        fig.data[-1].name = "Historical trend (OLS)"
        fig.data[-1].showlegend = True
        fig.data[-1].line.dash = "dash"
    fig.update_layout(height=400)
    return fig
