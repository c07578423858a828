"""Streamlit dashboard for the aircraft interiors market research data."""

from __future__ import annotations

import logging

import pandas as pd
import streamlit as st

from interiors_market import LoadStatus, MarketDataSource, MarketDataset, load_settings
from interiors_market.analytics import (
    SegmentAxis,
    analyze_payload_coverage,
    build_drilldown_kpis,
    build_end_user_split,
    build_market_kpis,
    format_currency,
    format_percentage,
    growth_table,
    overview_table,
    related_segments,
    segment_view,
    sub_segment_series,
)
from interiors_market.analytics.visuals import (
    build_allocation_chart,
    build_distribution_chart,
    build_drilldown_chart,
    build_market_overview_chart,
    build_segment_bar_chart,
    build_segment_trend_chart,
    build_year_comparison_chart,
)
from interiors_market.reporting import build_summary_pdf, export_excel_report
from interiors_market.settings import DashboardSettings

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

st.set_page_config(page_title="Aircraft Interiors Market", layout="wide")
st.title("✈️ Aircraft Interiors Market Research")

_TAB_LABELS = {
    SegmentAxis.END_USER: "End-User",
    SegmentAxis.AIRCRAFT: "Aircraft-Type",
    SegmentAxis.REGION: "Region",
    SegmentAxis.APPLICATION: "Application",
    SegmentAxis.EQUIPMENT: "Equipment",
}


@st.cache_resource(show_spinner=False)
def _data_source(url: str | None, path: str, timeout: float) -> MarketDataSource:
    source = MarketDataSource(url=url, path=path, timeout=timeout)
    source.fetch()
    return source


def _download_bytes(data: bytes, *, file_name: str, mime: str, label: str, key: str) -> None:
    st.download_button(
        label,
        data=data,
        file_name=file_name,
        mime=mime,
        use_container_width=True,
        key=key,
    )


def _render_kpis(kpis) -> None:
    col1, col2, col3 = st.columns(3)
    col1.metric(f"{kpis.year} Market Size", format_currency(kpis.market_size))
    col2.metric(f"{kpis.forecast_year - kpis.base_year}-Year CAGR", format_percentage(kpis.cagr))
    col3.metric(f"{kpis.forecast_year} Forecast", format_currency(kpis.forecast_value))


def _render_overview(dataset: MarketDataset, year: int, settings: DashboardSettings) -> None:
    _render_kpis(
        build_market_kpis(
            [dataset.total_market], year, base_year=settings.base_year, forecast_year=settings.forecast_year
        )
    )
    st.plotly_chart(build_market_overview_chart(dataset.total_market), use_container_width=True)

    st.markdown(f"### {year} Market Distribution")
    columns = st.columns(len(SegmentAxis))
    for column, axis in zip(columns, SegmentAxis):
        view = segment_view(dataset, axis)
        with column:
            st.plotly_chart(build_distribution_chart(view.series, year, title=view.title), use_container_width=True)


def _render_series_kpis(series, settings: DashboardSettings) -> None:
    kpis = build_drilldown_kpis(series, base_year=settings.base_year, forecast_year=settings.forecast_year)
    col1, col2, col3, col4 = st.columns(4)
    col1.metric(f"{kpis.base_year} Value", format_currency(kpis.current_value))
    col2.metric(f"{kpis.forecast_year} Forecast", format_currency(kpis.forecast_value))
    col3.metric("CAGR", format_percentage(kpis.cagr))
    col4.metric("YoY Change", format_percentage(kpis.yoy_change))


def _render_drilldown(dataset: MarketDataset, axis: SegmentAxis, settings: DashboardSettings) -> None:
    view = segment_view(dataset, axis)
    names = [series.name for series in view.series]
    if not names:
        return

    choice = st.selectbox(f"Drill down into a {view.title.lower()}", names, key=f"drill_{axis.value}")
    series = next(series for series in view.series if series.name == choice)

    _render_series_kpis(series, settings)
    st.plotly_chart(build_drilldown_chart(series, base_year=settings.base_year), use_container_width=True)

    related = related_segments(dataset, axis, choice)
    if related is not None and related.series:
        st.plotly_chart(
            build_segment_bar_chart(related.series, settings.base_year, title=related.title),
            use_container_width=True,
        )
        related_names = [item.name for item in related.series]
        picked = st.selectbox(related.title, related_names, key=f"drill_related_{axis.value}")
        sub = next(item for item in related.series if item.name == picked)
        _render_series_kpis(sub, settings)
        st.plotly_chart(build_drilldown_chart(sub, base_year=settings.base_year), use_container_width=True)

    with st.expander("Yearly breakdown"):
        st.dataframe(overview_table(series), use_container_width=True, hide_index=True)


def _render_estimated_drilldown(bars, settings: DashboardSettings, *, key: str) -> None:
    estimated = sub_segment_series(bars)
    if not estimated:
        return
    picked = st.selectbox("Drill into an estimated segment", list(estimated), key=key)
    st.plotly_chart(
        build_drilldown_chart(
            estimated[picked],
            base_year=settings.base_year,
            title=f"{picked} - Market Trend (estimated)",
        ),
        use_container_width=True,
    )


def _render_segment(dataset: MarketDataset, axis: SegmentAxis, year: int, settings: DashboardSettings) -> None:
    view = segment_view(dataset, axis)
    _render_kpis(
        build_market_kpis(view.series, year, base_year=settings.base_year, forecast_year=settings.forecast_year)
    )

    col1, col2 = st.columns([2, 1])
    with col1:
        st.plotly_chart(
            build_segment_trend_chart(dataset.total_market, view.series, title=f"{view.title} - Market Trend"),
            use_container_width=True,
        )
    with col2:
        st.plotly_chart(build_distribution_chart(view.series, year, title=view.title), use_container_width=True)

    if axis is SegmentAxis.END_USER:
        for secondary in (SegmentAxis.AIRCRAFT, SegmentAxis.REGION):
            secondary_view = segment_view(dataset, secondary)
            bars = build_end_user_split(dataset, secondary_view.series, year)
            st.plotly_chart(
                build_allocation_chart(bars, title=f"OE vs Aftermarket by {secondary_view.title}", year=year),
                use_container_width=True,
            )
            _render_estimated_drilldown(bars, settings, key=f"estimated_{secondary.value}")
        st.caption("Split estimated from each end user's share of the total market.")
    else:
        st.plotly_chart(build_segment_bar_chart(view.series, year, title=view.title), use_container_width=True)

    compare = st.multiselect(
        "Compare years",
        list(dataset.years),
        default=[year],
        max_selections=4,
        key=f"compare_{axis.value}",
    )
    if compare:
        st.plotly_chart(
            build_year_comparison_chart(view.series, sorted(compare), title=f"{view.title} - Year Comparison"),
            use_container_width=True,
        )

    st.markdown(f"#### {view.title} - Growth Analysis")
    st.dataframe(
        growth_table(view.series, start_year=settings.base_year, end_year=settings.forecast_year),
        use_container_width=True,
        hide_index=True,
    )
    _render_drilldown(dataset, axis, settings)


def main() -> None:
    settings = load_settings()
    source = _data_source(settings.data_url, str(settings.data_path), settings.timeout)

    with st.sidebar:
        st.header("Data source")
        st.caption(f"Source: `{settings.data_url or settings.data_path.name}`")
        if st.button("Reload data", use_container_width=True):
            source.refetch()

    state = source.state
    if state.status is LoadStatus.FAILURE or state.dataset is None:
        st.error(f"Failed to Load Data: {state.error or 'Unable to load market data'}")
        if st.button("Try Again"):
            source.refetch()
            st.rerun()
        return

    dataset = state.dataset
    years = list(dataset.years)
    with st.sidebar:
        default_index = years.index(settings.selected_year) if settings.selected_year in years else len(years) - 1
        year = st.selectbox("Year", years, index=default_index)

    labels = ["Market Overview", *[_TAB_LABELS[axis] for axis in SegmentAxis]]
    tabs = st.tabs(labels)
    with tabs[0]:
        _render_overview(dataset, year, settings)
    for tab, axis in zip(tabs[1:], SegmentAxis):
        with tab:
            _render_segment(dataset, axis, year, settings)

    if state.payload is not None:
        with st.expander("Data coverage"):
            coverage = analyze_payload_coverage(state.payload)
            flagged = coverage[coverage["Zero-filled"]] if not coverage.empty else pd.DataFrame()
            st.caption(f"{len(flagged)} of {len(coverage)} arrays are partially zero-filled.")
            st.dataframe(coverage, use_container_width=True, hide_index=True)

    st.subheader("Downloads")
    excel_bytes = export_excel_report(
        dataset, year, base_year=settings.base_year, forecast_year=settings.forecast_year
    )
    _download_bytes(
        excel_bytes,
        file_name=f"interiors_market_{year}.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        label="📊 Download Excel workbook",
        key="download_excel",
    )

    try:
        pdf_bytes = build_summary_pdf(
            dataset, year, base_year=settings.base_year, forecast_year=settings.forecast_year
        )
    except ImportError as exc:
        st.warning(str(exc))
    else:
        _download_bytes(
            pdf_bytes,
            file_name=f"interiors_market_{year}.pdf",
            mime="application/pdf",
            label="📄 Download PDF summary",
            key="download_pdf",
        )

    st.caption("All values in US$ Million unless otherwise specified.")


if __name__ == "__main__":
    main()
