"""Coverage diagnostics for the raw compact payload."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, List, Mapping, Sequence, Tuple

import pandas as pd

from ..models import NESTED_FIELDS, PRIMARY_FIELDS

_COLUMNS = [
    "Field",
    "Group",
    "Category",
    "Expected length",
    "Actual length",
    "Missing values",
    "Zero-filled",
]


@dataclass(slots=True)
class ArrayCoverage:
    field: str
    group: str
    category: str
    expected: int
    actual: int
    missing: int

    @property
    def zero_filled(self) -> bool:
        return self.missing > 0 or self.actual < self.expected


def _iter_arrays(raw: Mapping[str, Any]) -> Iterator[Tuple[str, str, str, Sequence[object]]]:
    yield "totalMarket", "", "Total Market", raw.get("totalMarket") or []
    for key in PRIMARY_FIELDS.values():
        for name, values in (raw.get(key) or {}).items():
            yield key, "", str(name), values or []
    for key in NESTED_FIELDS.values():
        for group, segment in (raw.get(key) or {}).items():
            for name, values in (segment or {}).items():
                yield key, str(group), str(name), values or []


def analyze_payload_coverage(raw: Mapping[str, Any]) -> pd.DataFrame:
    """
    Describe how every value array lines up with ``years``.

    Metrics included:
    - expected length (``len(years)``) and actual array length
    - missing values: ``None``, boolean or non-numeric entries within the expected span
    - whether the decoder will zero-fill part of the array
    """
    expected = len(raw.get("years") or [])
    profiles: List[ArrayCoverage] = []
    for field, group, category, array in _iter_arrays(raw):
        window = pd.Series(
            [None if isinstance(value, bool) else value for value in list(array)[:expected]], dtype="object"
        )
        missing = int(pd.to_numeric(window, errors="coerce").isna().sum())
        profiles.append(
            ArrayCoverage(
                field=field,
                group=group,
                category=category,
                expected=expected,
                actual=len(array),
                missing=missing,
            )
        )

    if not profiles:
        return pd.DataFrame(columns=_COLUMNS)

    return pd.DataFrame(
        {
            "Field": [profile.field for profile in profiles],
            "Group": [profile.group for profile in profiles],
            "Category": [profile.category for profile in profiles],
            "Expected length": [profile.expected for profile in profiles],
            "Actual length": [profile.actual for profile in profiles],
            "Missing values": [profile.missing for profile in profiles],
            "Zero-filled": [profile.zero_filled for profile in profiles],
        }
    )
