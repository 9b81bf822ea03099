from __future__ import annotations

from datetime import datetime, timezone

import pytest

from conftest import make_store
from toilet_catalog.model.mongo.toilet_store import BatchResult, CatalogEntry, GeoJSONLocation


def test_geojson_point_is_lng_lat():
    point = GeoJSONLocation.from_lat_lng(25.0608, 121.5576)

    assert point.type == "Point"
    assert point.coordinates == [121.5576, 25.0608]


@pytest.mark.parametrize("lat, lng", [(None, 121.5), (25.0, None), (91.0, 121.5), (25.0, 181.0)])
def test_geojson_point_missing_or_out_of_range(lat, lng):
    assert GeoJSONLocation.from_lat_lng(lat, lng) is None


def test_catalog_entry_from_store():
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)

    entry = CatalogEntry.from_store(make_store("123456"), city="台北市", district="松山區", region_id="01", now=now)

    assert entry.poi_id == "123456"
    assert entry.city == "台北市"
    assert entry.district == "松山區"
    assert entry.has_toilet is True
    assert entry.coordinates.lat == 25.0608
    assert entry.location.coordinates == [121.5576, 25.0608]
    assert entry.updated_at == now


def test_batch_result_accepts_field_names_and_serializes_aliases():
    result = BatchResult(batch=2, next_batch=3, total_regions=41)

    assert result.model_dump()["next_batch"] == 3
    assert result.to_response() == {
        "batch": 2,
        "nextBatch": 3,
        "totalRegions": 41,
        "regions": [],
        "message": None,
    }
