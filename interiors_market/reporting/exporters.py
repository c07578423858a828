"""Export helpers for the market analytics."""

from __future__ import annotations

import io
from pathlib import Path

import pandas as pd

from ..analytics.allocation import allocation_to_frame, build_end_user_split
from ..analytics.segments import SegmentAxis, segment_view
from ..analytics.summaries import build_market_kpis, growth_table, kpis_to_frame, overview_table
from ..analytics.timeseries import series_to_frame
from ..models import MarketDataset
from ..settings import DEFAULT_BASE_YEAR, DEFAULT_FORECAST_YEAR

try:  # Optional dependency for PDF output
    from reportlab.lib import colors
    from reportlab.lib.pagesizes import A4
    from reportlab.lib.styles import getSampleStyleSheet
    from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

    _REPORTLAB_AVAILABLE = True
except ImportError:  # pragma: no cover - optional dependency
    _REPORTLAB_AVAILABLE = False

ESTIMATE_NOTE = "Cross-segment splits are estimates based on each segment's share of the total market."


def _wide_frame(series_list) -> pd.DataFrame:
    long = series_to_frame(series_list)
    if long.empty:
        return pd.DataFrame(columns=["Segment"])
    wide = long.pivot(index="segment", columns="year", values="value")
    wide.columns = [str(column) for column in wide.columns]
    return wide.reset_index().rename(columns={"segment": "Segment"})


def export_excel_report(
    dataset: MarketDataset,
    year: int,
    *,
    base_year: int = DEFAULT_BASE_YEAR,
    forecast_year: int = DEFAULT_FORECAST_YEAR,
    path: str | Path | None = None,
) -> bytes | Path:
    """
    Build an Excel workbook with the market series, KPIs and estimated end-user splits.

    If ``path`` is provided, the workbook is written to disk and the path is returned.
    Otherwise the bytes object is returned for download workflows.
    """
    kpis = build_market_kpis([dataset.total_market], year, base_year=base_year, forecast_year=forecast_year)

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="xlsxwriter") as writer:  # type: ignore[arg-type]
        kpis_to_frame(kpis).to_excel(writer, sheet_name="Summary", index=False)
        overview_table(dataset.total_market).to_excel(writer, sheet_name="Total Market", index=False)

        for axis in SegmentAxis:
            view = segment_view(dataset, axis)
            if not view.series:
                continue
            _wide_frame(view.series).to_excel(writer, sheet_name=view.title[:31], index=False)
            growth_table(view.series, start_year=base_year, end_year=forecast_year).to_excel(
                writer, sheet_name=f"{view.title} Growth"[:31], index=False
            )

        for axis in (SegmentAxis.AIRCRAFT, SegmentAxis.REGION):
            view = segment_view(dataset, axis)
            split = allocation_to_frame(build_end_user_split(dataset, view.series, year))
            if split.empty:
                continue
            sheet = f"End User by {view.title}"[:31]
            split.to_excel(writer, sheet_name=sheet, index=False, startrow=2)
            writer.sheets[sheet].write(0, 0, ESTIMATE_NOTE)

    buffer.seek(0)
    if path is None:
        return buffer.getvalue()

    target = Path(path)
    target.write_bytes(buffer.read())
    return target


def build_summary_pdf(
    dataset: MarketDataset,
    year: int,
    *,
    base_year: int = DEFAULT_BASE_YEAR,
    forecast_year: int = DEFAULT_FORECAST_YEAR,
) -> bytes:
    """Create a lightweight PDF with the headline KPIs and per-segment growth."""
    if not _REPORTLAB_AVAILABLE:  # pragma: no cover - optional dependency
        raise ImportError("ReportLab is required for PDF export. Install it via `pip install reportlab`.")

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=36,
        rightMargin=36,
        topMargin=42,
        bottomMargin=36,
    )
    styles = getSampleStyleSheet()
    story = [Paragraph("Aircraft Interiors Market Summary", styles["Title"]), Spacer(1, 12)]

    kpis = build_market_kpis([dataset.total_market], year, base_year=base_year, forecast_year=forecast_year)
    story.extend([Paragraph("Headline Metrics", styles["Heading2"]), _table(kpis_to_frame(kpis)), Spacer(1, 12)])

    for axis in SegmentAxis:
        view = segment_view(dataset, axis)
        if not view.series:
            continue
        growth = growth_table(view.series, start_year=base_year, end_year=forecast_year)
        story.extend([Paragraph(f"{view.title} - Growth Analysis", styles["Heading2"]), _table(growth), Spacer(1, 12)])

    story.append(Paragraph("All values in US$ Million. " + ESTIMATE_NOTE, styles["Italic"]))
    doc.build(story)
    buffer.seek(0)
    return buffer.getvalue()


def _table(df: pd.DataFrame) -> Table:
    values = [df.columns.tolist()] + df.astype(str).values.tolist()
    tbl = Table(values, hAlign="LEFT")
    tbl.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#002b55")),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("ALIGN", (0, 0), (-1, -1), "LEFT"),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
                ("BOTTOMPADDING", (0, 0), (-1, 0), 6),
            ]
        )
    )
    return tbl
