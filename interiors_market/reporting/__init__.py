"""Reporting utilities for exporting the market analysis."""

from .exporters import build_summary_pdf, export_excel_report

__all__ = ["export_excel_report", "build_summary_pdf"]
