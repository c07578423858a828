"""
Proportional-share cross-tabulations.

The source data only carries independent segmentations (regions, aircraft types, end
users, ...). Two-level views such as "OE vs Aftermarket by Region" are estimated by
splitting a primary category's value across a secondary segmentation according to each
secondary category's share of the total market in the same year. The secondary axis's
global mix is assumed to hold inside every primary category, so results are estimates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

import numpy as np
import pandas as pd

from ..models import MarketDataset, Series, YearPoint
from .timeseries import value_at_year


@dataclass(frozen=True, slots=True)
class SubSegment:
    name: str
    value_at_year: float
    full_series: Series


@dataclass(frozen=True, slots=True)
class AllocatedBar:
    primary_name: str
    sub_segments: Tuple[SubSegment, ...]
    total: float


def share_ratio(stack: Series, total_market: Series, year: int) -> float:
    """Share of the total market held by ``stack`` in ``year``; 0 when the total is 0 or absent."""
    denominator = value_at_year(total_market, year)
    if denominator == 0:
        return 0.0
    return value_at_year(stack, year) / denominator


def _ratio_curve(stack: Series, total_market: Series, years: Sequence[int]) -> np.ndarray:
    numerator = np.array([value_at_year(stack, year) for year in years], dtype=float)
    denominator = np.array([value_at_year(total_market, year) for year in years], dtype=float)
    return np.divide(numerator, denominator, out=np.zeros_like(numerator), where=denominator != 0)


def _allocate(primary: Series, stack: Series, total_market: Series, year: int, *, name: str) -> SubSegment:
    value = value_at_year(primary, year) * share_ratio(stack, total_market, year)

    years = primary.years
    allocated = np.asarray(primary.values, dtype=float) * _ratio_curve(stack, total_market, years)
    full_series = Series(
        name=f"{primary.name} ({stack.name})",
        data=tuple(YearPoint(year=y, value=float(v)) for y, v in zip(years, allocated)),
    )
    return SubSegment(name=name, value_at_year=value, full_series=full_series)


def _bar(name: str, sub_segments: Iterable[SubSegment]) -> AllocatedBar:
    subs = tuple(sub_segments)
    return AllocatedBar(primary_name=name, sub_segments=subs, total=sum(sub.value_at_year for sub in subs))


def allocate_bar(
    primary: Series,
    stack_categories: Iterable[Series],
    total_market: Series,
    year: int,
) -> AllocatedBar:
    """Split ``primary``'s value in ``year`` across ``stack_categories`` by their market share."""
    return _bar(
        primary.name,
        (_allocate(primary, stack, total_market, year, name=stack.name) for stack in stack_categories),
    )


def allocate_segmentation(
    primaries: Iterable[Series],
    stack_categories: Iterable[Series],
    total_market: Series,
    year: int,
) -> List[AllocatedBar]:
    stacks = list(stack_categories)
    return [allocate_bar(primary, stacks, total_market, year) for primary in primaries]


def build_end_user_split(dataset: MarketDataset, secondary: Iterable[Series], year: int) -> List[AllocatedBar]:
    """
    One bar per end-user category (e.g. OE, Aftermarket) stacked by ``secondary`` categories.

    Each stack is the secondary category's value scaled by the end user's share of the
    total market, the same estimate as :func:`allocate_bar` viewed from the end-user side.
    """
    segments = list(secondary)
    return [
        _bar(
            end_user.name,
            (_allocate(segment, end_user, dataset.total_market, year, name=segment.name) for segment in segments),
        )
        for end_user in dataset.end_user.values()
    ]


def sub_segment_series(bars: Iterable[AllocatedBar]) -> Dict[str, Series]:
    """Estimated full series of every stack, keyed by ``"<segment> (<stack>)"`` in bar order."""
    return {sub.full_series.name: sub.full_series for bar in bars for sub in bar.sub_segments}


def allocation_to_frame(bars: Iterable[AllocatedBar]) -> pd.DataFrame:
    """Flatten allocated bars into ``bar``/``segment``/``value``/``share`` rows."""
    rows = []
    for bar in bars:
        for sub in bar.sub_segments:
            share = sub.value_at_year / bar.total * 100.0 if bar.total else 0.0
            rows.append({"bar": bar.primary_name, "segment": sub.name, "value": sub.value_at_year, "share": share})
    if not rows:
        return pd.DataFrame(columns=["bar", "segment", "value", "share"])
    return pd.DataFrame(rows)
