"""Segmentation axes and the lookups that drive segment tabs and drill-downs."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Mapping

from ..models import MarketDataset, SegmentMap, Series


class SegmentAxis(str, Enum):
    END_USER = "endUser"
    AIRCRAFT = "aircraft"
    REGION = "region"
    APPLICATION = "application"
    EQUIPMENT = "equipment"


@dataclass(frozen=True, slots=True)
class AxisSpec:
    title: str
    field: str


@dataclass(frozen=True, slots=True)
class SegmentView:
    title: str
    series: List[Series]


@dataclass(frozen=True, slots=True)
class RelatedSegments:
    title: str
    series: List[Series]


# Countries are a per-category lookup, not another axis.
COUNTRIES = "countries"

AXES: Mapping[SegmentAxis, AxisSpec] = {
    SegmentAxis.END_USER: AxisSpec(title="End User", field="end_user"),
    SegmentAxis.AIRCRAFT: AxisSpec(title="Aircraft Type", field="aircraft_type"),
    SegmentAxis.REGION: AxisSpec(title="Region", field="region"),
    SegmentAxis.APPLICATION: AxisSpec(title="Application", field="application"),
    SegmentAxis.EQUIPMENT: AxisSpec(title="Equipment", field="furnished_equipment"),
}

# selected axis -> axis shown when drilling into one of its categories
RELATED_AXIS: Mapping[SegmentAxis, SegmentAxis | str] = {
    SegmentAxis.REGION: COUNTRIES,
    SegmentAxis.AIRCRAFT: SegmentAxis.APPLICATION,
    SegmentAxis.END_USER: SegmentAxis.REGION,
    SegmentAxis.APPLICATION: SegmentAxis.AIRCRAFT,
    SegmentAxis.EQUIPMENT: SegmentAxis.END_USER,
}

_RELATED_TITLES: Mapping[SegmentAxis, str] = {
    SegmentAxis.AIRCRAFT: "Applications for this Aircraft Type",
    SegmentAxis.END_USER: "Regions for this End User",
    SegmentAxis.APPLICATION: "Aircraft Types by Application",
    SegmentAxis.EQUIPMENT: "End Users by Equipment",
}

for _table in (AXES, RELATED_AXIS):
    _missing = set(SegmentAxis) - set(_table)
    if _missing:
        raise RuntimeError(f"Segment axis table is missing {sorted(axis.value for axis in _missing)}")


def segment_map(dataset: MarketDataset, axis: SegmentAxis) -> SegmentMap:
    return getattr(dataset, AXES[SegmentAxis(axis)].field)


def segment_view(dataset: MarketDataset, axis: SegmentAxis) -> SegmentView:
    """Title and category series for a segmentation axis."""
    spec = AXES[SegmentAxis(axis)]
    return SegmentView(title=spec.title, series=list(getattr(dataset, spec.field).values()))


def find_series(dataset: MarketDataset, axis: SegmentAxis, name: str) -> Series | None:
    return segment_map(dataset, axis).get(name)


def related_segments(dataset: MarketDataset, axis: SegmentAxis, category: str) -> RelatedSegments | None:
    """
    Series to show when drilling into ``category`` of ``axis``.

    Regions expose their countries; a region without country data has no related view and
    yields ``None``. Every other axis maps to a fixed related axis.
    """
    axis = SegmentAxis(axis)
    related = RELATED_AXIS[axis]
    if related == COUNTRIES:
        countries = dataset.nested("country_data_by_region", category)
        if countries is None:
            return None
        return RelatedSegments(title=f"Countries in {category}", series=list(countries.values()))

    return RelatedSegments(title=_RELATED_TITLES[axis], series=segment_view(dataset, related).series)
