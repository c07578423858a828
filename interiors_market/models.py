"""Data model for the expanded market dataset."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, List, Mapping, Tuple


@dataclass(frozen=True, slots=True)
class YearPoint:
    year: int
    value: float


@dataclass(frozen=True, slots=True)
class Series:
    """A named market series; values are US$ millions ordered by year."""

    name: str
    data: Tuple[YearPoint, ...]

    @property
    def years(self) -> List[int]:
        return [point.year for point in self.data]

    @property
    def values(self) -> List[float]:
        return [point.value for point in self.data]


SegmentMap = Mapping[str, Series]
NestedSegmentMap = Mapping[str, SegmentMap]

TOTAL_MARKET_NAME = "Total Market"

# attribute name -> key in the compact JSON payload
PRIMARY_FIELDS = {
    "end_user": "endUser",
    "aircraft_type": "aircraftType",
    "region": "region",
    "application": "application",
    "furnished_equipment": "furnishedEquipment",
}
NESTED_FIELDS = {
    "country_data_by_region": "countryDataByRegion",
    "end_user_by_aircraft_type": "endUserByAircraftType",
    "end_user_by_region": "endUserByRegion",
    "aircraft_type_by_region": "aircraftTypeByRegion",
    "application_by_region": "applicationByRegion",
    "equipment_by_region": "equipmentByRegion",
}


def _empty() -> Mapping[str, Any]:
    return MappingProxyType({})


@dataclass(frozen=True)
class MarketDataset:
    """Expanded market data. Built once per load and never mutated afterwards."""

    years: Tuple[int, ...]
    total_market: Series
    end_user: SegmentMap = field(default_factory=_empty)
    aircraft_type: SegmentMap = field(default_factory=_empty)
    region: SegmentMap = field(default_factory=_empty)
    application: SegmentMap = field(default_factory=_empty)
    furnished_equipment: SegmentMap = field(default_factory=_empty)
    country_data_by_region: NestedSegmentMap = field(default_factory=_empty)
    end_user_by_aircraft_type: NestedSegmentMap = field(default_factory=_empty)
    end_user_by_region: NestedSegmentMap = field(default_factory=_empty)
    aircraft_type_by_region: NestedSegmentMap = field(default_factory=_empty)
    application_by_region: NestedSegmentMap = field(default_factory=_empty)
    equipment_by_region: NestedSegmentMap = field(default_factory=_empty)

    def nested(self, field_name: str, key: str) -> SegmentMap | None:
        """Inner mapping of a two-level field, or ``None`` when ``key`` is absent."""
        if field_name not in NESTED_FIELDS:
            raise AttributeError(f"Unknown nested field: {field_name}")
        return getattr(self, field_name).get(key)
