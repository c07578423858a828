from __future__ import annotations

import json

import pytest
import requests

from interiors_market.data_loader import (
    DatasetUnavailableError,
    LoadStatus,
    MarketDataSource,
    decode_dataset,
    expand_nested,
    expand_segment_map,
    expand_series,
    fetch_compact_payload,
    load_compact_file,
    load_dataset,
)
from interiors_market.analytics.timeseries import value_at_year


def _compact_payload() -> dict:
    return {
        "years": [2016, 2017, 2018],
        "totalMarket": [1000, 1100, 1200],
        "endUser": {"OE": [600, 650, 700], "Aftermarket": [400, 450, 500]},
        "aircraftType": {"Narrow-Body": [700, 770, 840], "Wide-Body": [300, 330, 360]},
        "region": {"APAC": [100, 150], "Europe": [900, 950, 1000]},
        "application": {"Seating": [1000, 1100, 1200]},
        "furnishedEquipment": {"BFE": [1000, 1100, 1200]},
        "countryDataByRegion": {"APAC": {"China": [60, 90, 100], "Japan": [40, 60]}},
        "endUserByRegion": {"APAC": {"OE": [55, 80, 90]}},
    }


class _FakeResponse:
    def __init__(self, payload=None, status_code: int = 200, body_error: Exception | None = None):
        self._payload = payload
        self.status_code = status_code
        self._body_error = body_error

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error: Service Unavailable")

    def json(self):
        if self._body_error is not None:
            raise self._body_error
        return self._payload


class _FakeSession:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def test_expand_series_covers_every_year():
    years = [2016, 2017, 2018, 2019]
    points = expand_series(years, [1, 2, 3, 4])
    assert len(points) == len(years)
    assert [p.year for p in points] == years
    assert [p.value for p in points] == [1.0, 2.0, 3.0, 4.0]


def test_expand_series_zero_fills_missing_entries():
    points = expand_series([2016, 2017, 2018], [100, 150])
    assert [(p.year, p.value) for p in points] == [(2016, 100.0), (2017, 150.0), (2018, 0.0)]

    points = expand_series([2016, 2017, 2018], [100, None, "?"])
    assert [p.value for p in points] == [100.0, 0.0, 0.0]


def test_expand_series_ignores_values_beyond_years():
    points = expand_series([2016, 2017], [1, 2, 3])
    assert [p.value for p in points] == [1.0, 2.0]
    assert expand_series([2016], None)[0].value == 0.0


def test_expand_segment_map_keeps_names_and_order():
    expanded = expand_segment_map([2016, 2017], {"Zeta": [1, 2], "Alpha": [3]})
    assert list(expanded) == ["Zeta", "Alpha"]
    assert expanded["Alpha"].name == "Alpha"
    assert expanded["Alpha"].values == [3.0, 0.0]


def test_expand_nested_expands_each_outer_key():
    nested = expand_nested([2016, 2017], {"Europe": {"France": [1, 2]}, "APAC": {}})
    assert set(nested) == {"Europe", "APAC"}
    assert nested["Europe"]["France"].values == [1.0, 2.0]
    assert len(nested["APAC"]) == 0


def test_decode_dataset_builds_all_fields():
    dataset = decode_dataset(_compact_payload())
    assert dataset.years == (2016, 2017, 2018)
    assert dataset.total_market.name == "Total Market"
    assert value_at_year(dataset.total_market, 2018) == 1200.0
    assert [(p.year, p.value) for p in dataset.region["APAC"].data] == [(2016, 100.0), (2017, 150.0), (2018, 0.0)]
    assert dataset.country_data_by_region["APAC"]["Japan"].values == [40.0, 60.0, 0.0]
    assert dataset.end_user_by_region["APAC"]["OE"].values == [55.0, 80.0, 90.0]
    assert len(dataset.equipment_by_region) == 0


def test_dataset_nested_lookup_reports_absence():
    dataset = decode_dataset(_compact_payload())
    assert dataset.nested("country_data_by_region", "APAC") is not None
    assert dataset.nested("country_data_by_region", "Mars") is None
    assert dataset.nested("aircraft_type_by_region", "APAC") is None
    with pytest.raises(AttributeError):
        dataset.nested("region", "APAC")


def test_decoded_dataset_is_read_only():
    dataset = decode_dataset(_compact_payload())
    with pytest.raises(TypeError):
        dataset.region["New"] = dataset.total_market  # type: ignore[index]
    with pytest.raises(AttributeError):
        dataset.years = ()  # type: ignore[misc]


def test_fetch_compact_payload_sends_no_cache_headers():
    session = _FakeSession(_FakeResponse(_compact_payload()))
    payload = fetch_compact_payload("https://example.test/marketData.json", timeout=3, session=session)
    assert payload["years"] == [2016, 2017, 2018]
    call = session.calls[0]
    assert call["headers"]["Cache-Control"] == "no-cache"
    assert call["timeout"] == 3


@pytest.mark.parametrize(
    "response",
    [
        _FakeResponse(status_code=503),
        requests.ConnectionError("connection refused"),
        _FakeResponse(body_error=ValueError("Expecting value")),
        _FakeResponse(payload=[1, 2, 3]),
    ],
)
def test_fetch_compact_payload_wraps_failures(response):
    with pytest.raises(DatasetUnavailableError, match="Failed to fetch market data"):
        fetch_compact_payload("https://example.test/data.json", session=_FakeSession(response))


def test_load_compact_file_reads_json(tmp_path):
    target = tmp_path / "marketData.json"
    target.write_text(json.dumps(_compact_payload()), encoding="utf-8")
    assert load_compact_file(target)["totalMarket"] == [1000, 1100, 1200]

    with pytest.raises(FileNotFoundError):
        load_compact_file(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(DatasetUnavailableError):
        load_compact_file(broken)


def test_load_dataset_rejects_payload_without_years(tmp_path):
    target = tmp_path / "marketData.json"
    target.write_text(json.dumps({"totalMarket": [1]}), encoding="utf-8")
    with pytest.raises(DatasetUnavailableError, match="Malformed market data"):
        load_dataset(path=target)


def test_data_source_success_and_failure_states():
    session = _FakeSession(_FakeResponse(_compact_payload()), _FakeResponse(status_code=500))
    source = MarketDataSource(url="https://example.test/data.json", session=session)
    assert source.state.status is LoadStatus.PENDING
    assert source.state.is_loading

    state = source.fetch()
    assert state.status is LoadStatus.SUCCESS
    assert state.dataset is not None
    assert state.error is None
    assert state.payload["years"] == [2016, 2017, 2018]

    state = source.refetch()
    assert state.status is LoadStatus.FAILURE
    assert state.dataset is None
    assert "Failed to fetch market data" in state.error
    assert source.dataset is None


def test_data_source_reports_missing_file(tmp_path):
    source = MarketDataSource(path=tmp_path / "absent.json")
    state = source.fetch()
    assert state.status is LoadStatus.FAILURE
    assert "not found" in state.error


def test_data_source_discards_superseded_results():
    holder = {}

    class _ReentrantSession(_FakeSession):
        def get(self, url, headers=None, timeout=None):
            response = super().get(url, headers=headers, timeout=timeout)
            if not holder.get("nested"):
                holder["nested"] = True
                holder["inner"] = holder["source"].fetch()
            return response

    stale = _compact_payload()
    fresh = dict(_compact_payload(), totalMarket=[5, 5, 5])
    session = _ReentrantSession(_FakeResponse(stale), _FakeResponse(fresh))
    source = MarketDataSource(url="https://example.test/data.json", session=session)
    holder["source"] = source

    outer = source.fetch()
    assert holder["inner"].status is LoadStatus.SUCCESS
    assert outer is source.state
    assert value_at_year(source.dataset.total_market, 2016) == 5.0


def test_expand_series_zero_fills_booleans():
    points = expand_series([2016, 2017, 2018], [True, 5, False])
    assert [p.value for p in points] == [0.0, 5.0, 0.0]


def test_data_source_fails_on_segment_that_is_not_an_object(tmp_path):
    target = tmp_path / "marketData.json"
    target.write_text(json.dumps({"years": [2016], "totalMarket": [1], "endUser": [1, 2]}), encoding="utf-8")

    state = MarketDataSource(path=target).fetch()

    assert state.status is LoadStatus.FAILURE
    assert state.dataset is None
    assert "Malformed market data" in state.error


def test_data_source_fails_when_path_is_a_directory(tmp_path):
    state = MarketDataSource(path=tmp_path).fetch()

    assert state.status is LoadStatus.FAILURE
    assert state.dataset is None
    assert "cannot read" in state.error

    with pytest.raises(DatasetUnavailableError):
        load_compact_file(tmp_path)
