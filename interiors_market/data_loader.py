"""Loading and expansion of the compact market dataset."""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Sequence, Tuple

import pandas as pd
import requests

from .models import (
    NESTED_FIELDS,
    PRIMARY_FIELDS,
    TOTAL_MARKET_NAME,
    MarketDataset,
    NestedSegmentMap,
    SegmentMap,
    Series,
    YearPoint,
)
from .settings import DEFAULT_DATA_PATH, DEFAULT_TIMEOUT, DashboardSettings

logger = logging.getLogger(__name__)

_NO_CACHE_HEADERS = {"Cache-Control": "no-cache", "Pragma": "no-cache"}


class DatasetUnavailableError(RuntimeError):
    """Raised when the compact market payload cannot be fetched or parsed."""


def expand_series(years: Sequence[int], values: Sequence[object] | None) -> Tuple[YearPoint, ...]:
    """
    Zip ``years`` with ``values`` into year points.

    Every year yields exactly one point. Entries that are missing (array shorter than
    ``years``), ``None``, booleans or not numeric become ``0``; values beyond the last
    year are ignored.
    """
    year_list = [int(year) for year in years]
    # pandas would read JSON true/false as 1/0
    raw = [None if isinstance(value, bool) else value for value in list(values or [])[: len(year_list)]]
    numeric = (
        pd.to_numeric(pd.Series(raw, dtype="object"), errors="coerce")
        .reindex(range(len(year_list)))
        .fillna(0.0)
    )
    return tuple(YearPoint(year=year, value=float(value)) for year, value in zip(year_list, numeric))


def expand_segment_map(years: Sequence[int], segment: Mapping[str, Sequence[object]] | None) -> SegmentMap:
    """Expand every category array; names pass through unchanged and in source order."""
    expanded = {
        str(name): Series(name=str(name), data=expand_series(years, values))
        for name, values in (segment or {}).items()
    }
    return MappingProxyType(expanded)


def expand_nested(
    years: Sequence[int], nested: Mapping[str, Mapping[str, Sequence[object]]] | None
) -> NestedSegmentMap:
    expanded = {str(key): expand_segment_map(years, segment) for key, segment in (nested or {}).items()}
    return MappingProxyType(expanded)


def decode_dataset(raw: Mapping[str, Any]) -> MarketDataset:
    """Turn a compact payload into a :class:`MarketDataset`. Input is assumed well-formed."""
    years = tuple(int(year) for year in raw["years"])

    primaries = {attr: expand_segment_map(years, raw.get(key)) for attr, key in PRIMARY_FIELDS.items()}
    nested = {attr: expand_nested(years, raw.get(key)) for attr, key in NESTED_FIELDS.items()}
    logger.debug(
        "Decoded %d years, %d primary categories",
        len(years),
        sum(len(segment) for segment in primaries.values()),
    )

    return MarketDataset(
        years=years,
        total_market=Series(name=TOTAL_MARKET_NAME, data=expand_series(years, raw.get("totalMarket"))),
        **primaries,
        **nested,
    )


def fetch_compact_payload(
    url: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    session: requests.Session | None = None,
) -> dict:
    """
    GET the compact payload from ``url`` bypassing caches.

    Raises
    ------
    DatasetUnavailableError
        On network errors, non-2xx responses or a body that is not a JSON object.
    """
    http = session if session is not None else requests
    try:
        response = http.get(url, headers=_NO_CACHE_HEADERS, timeout=timeout)
        response.raise_for_status()
        payload = response.json()
    except requests.RequestException as exc:
        raise DatasetUnavailableError(f"Failed to fetch market data: {exc}") from exc
    except ValueError as exc:
        raise DatasetUnavailableError(f"Failed to fetch market data: malformed JSON ({exc})") from exc

    if not isinstance(payload, dict):
        raise DatasetUnavailableError("Failed to fetch market data: payload is not a JSON object")
    return payload


def load_compact_file(path: str | Path | None = None) -> dict:
    """Read the compact payload from disk (defaults to the bundled sample)."""
    target = Path(path) if path is not None else DEFAULT_DATA_PATH
    if not target.exists():
        raise FileNotFoundError(f"Market data file not found: {target}")

    try:
        text = target.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DatasetUnavailableError(f"Failed to load market data: cannot read {target} ({exc})") from exc

    try:
        payload = json.loads(text)
    except ValueError as exc:
        raise DatasetUnavailableError(f"Failed to load market data: malformed JSON in {target.name}") from exc

    if not isinstance(payload, dict):
        raise DatasetUnavailableError(f"Failed to load market data: {target.name} is not a JSON object")
    return payload


def load_payload(
    url: str | None = None,
    path: str | Path | None = None,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    session: requests.Session | None = None,
) -> dict:
    """Fetch from ``url`` when given, otherwise read ``path``."""
    if url:
        return fetch_compact_payload(url, timeout=timeout, session=session)
    return load_compact_file(path)


def _decode_checked(payload: Mapping[str, Any]) -> MarketDataset:
    try:
        return decode_dataset(payload)
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise DatasetUnavailableError(f"Malformed market data: {exc!r}") from exc


def load_dataset(
    url: str | None = None,
    path: str | Path | None = None,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    session: requests.Session | None = None,
) -> MarketDataset:
    """Load the compact payload and decode it, raising :class:`DatasetUnavailableError` on failure."""
    return _decode_checked(load_payload(url, path, timeout=timeout, session=session))


class LoadStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class LoadState:
    status: LoadStatus
    dataset: MarketDataset | None = None
    error: str | None = None
    payload: Mapping[str, Any] | None = field(default=None, repr=False, compare=False)

    @property
    def is_loading(self) -> bool:
        return self.status is LoadStatus.PENDING


@dataclass
class MarketDataSource:
    """
    Owns the current dataset load.

    ``fetch`` never raises: failures land in a ``failure`` state with a readable message and
    no dataset. Each call starts a new load; only the most recently started load may
    publish its result, earlier ones are discarded when they finish.
    """

    url: str | None = None
    path: Path | None = None
    timeout: float = DEFAULT_TIMEOUT
    session: requests.Session | None = None
    _state: LoadState = field(default_factory=lambda: LoadState(LoadStatus.PENDING), init=False, repr=False)
    _generation: int = field(default=0, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @classmethod
    def from_settings(cls, settings: DashboardSettings, **kwargs: Any) -> "MarketDataSource":
        return cls(url=settings.data_url, path=settings.data_path, timeout=settings.timeout, **kwargs)

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def dataset(self) -> MarketDataset | None:
        return self._state.dataset

    def fetch(self) -> LoadState:
        with self._lock:
            self._generation += 1
            ticket = self._generation
            self._state = LoadState(LoadStatus.PENDING, dataset=self._state.dataset, payload=self._state.payload)

        try:
            payload = load_payload(self.url, self.path, timeout=self.timeout, session=self.session)
            dataset = _decode_checked(payload)
        except (DatasetUnavailableError, FileNotFoundError) as exc:
            logger.exception("Market data load failed")
            outcome = LoadState(LoadStatus.FAILURE, dataset=None, error=str(exc) or "Failed to load market data")
        else:
            logger.info("Loaded market data: %d years (%s..%s)", len(dataset.years), *_year_bounds(dataset))
            outcome = LoadState(LoadStatus.SUCCESS, dataset=dataset, error=None, payload=payload)

        with self._lock:
            if ticket != self._generation:
                logger.debug("Discarding result of superseded load #%d", ticket)
                return self._state
            self._state = outcome
        return outcome

    def refetch(self) -> LoadState:
        return self.fetch()


def _year_bounds(dataset: MarketDataset) -> Tuple[object, object]:
    if not dataset.years:
        return None, None
    return dataset.years[0], dataset.years[-1]
