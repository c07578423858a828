"""Analytics helpers for the market dataset."""

from .timeseries import (
    TrendResult,
    build_series_trend,
    cagr,
    format_currency,
    format_percentage,
    series_to_frame,
    split_history_forecast,
    value_at_year,
    yoy_growth,
)
from .allocation import (
    AllocatedBar,
    SubSegment,
    allocate_bar,
    allocate_segmentation,
    allocation_to_frame,
    build_end_user_split,
    share_ratio,
    sub_segment_series,
)
from .segments import (
    RELATED_AXIS,
    RelatedSegments,
    SegmentAxis,
    SegmentView,
    find_series,
    related_segments,
    segment_view,
)
from .summaries import (
    DrillDownKpis,
    MarketKpis,
    build_drilldown_kpis,
    build_market_kpis,
    distribution_table,
    growth_table,
    kpis_to_frame,
    overview_table,
    year_comparison_table,
)
from .profiling import analyze_payload_coverage

__all__ = [
    "TrendResult",
    "build_series_trend",
    "cagr",
    "format_currency",
    "format_percentage",
    "series_to_frame",
    "split_history_forecast",
    "value_at_year",
    "yoy_growth",
    "AllocatedBar",
    "SubSegment",
    "allocate_bar",
    "allocate_segmentation",
    "allocation_to_frame",
    "build_end_user_split",
    "share_ratio",
    "sub_segment_series",
    "RELATED_AXIS",
    "RelatedSegments",
    "SegmentAxis",
    "SegmentView",
    "find_series",
    "related_segments",
    "segment_view",
    "DrillDownKpis",
    "MarketKpis",
    "build_drilldown_kpis",
    "build_market_kpis",
    "distribution_table",
    "growth_table",
    "kpis_to_frame",
    "overview_table",
    "year_comparison_table",
    "analyze_payload_coverage",
]
