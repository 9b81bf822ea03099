from __future__ import annotations

import pytest

from conftest import FakeProvider, FakeSession, make_store, payload, store_block
from toilet_catalog.common.exceptions import MongoDBError, UnknownRegionError, ValidationError
from toilet_catalog.model.mongo.toilet_store import RegionFetchResult
from toilet_catalog.model.region import Region, RegionRegistry
from toilet_catalog.providers.seven_eleven.emap_provider import SevenElevenEmapProvider
from toilet_catalog.service.catalog_sync_service import CatalogSyncService


def _service(repository, provider, sleeps, **kwargs):
    return CatalogSyncService(
        repository=repository,
        provider=provider,
        sleep=sleeps.append,
        **kwargs,
    )


def test_batch_chain_visits_every_region_once(repository, sleeps):
    provider = FakeProvider()
    service = _service(repository, provider, sleeps)

    calls = 0
    visited = []
    result = service.run_batch(0)
    while True:
        calls += 1
        visited.extend(r.region_id for r in result.regions)
        if result.next_batch is None:
            break
        result = service.run_batch(result.next_batch)

    assert calls == 9
    assert visited == [f"{i:02d}" for i in range(1, 42)]
    assert len(provider.calls) == 41
    assert service.total_batches() == 9


def test_batch_windows(repository, sleeps):
    service = _service(repository, FakeProvider(), sleeps)

    first = service.run_batch(0)
    assert first.batch == 0
    assert first.next_batch == 1
    assert first.total_regions == 41
    assert [r.region for r in first.regions] == ["松山區", "信義區", "大安區", "中山區", "中正區"]

    last = service.run_batch(8)
    assert [r.region_id for r in last.regions] == ["41"]
    assert last.next_batch is None


def test_batch_past_the_end_is_terminal(repository, sleeps):
    provider = FakeProvider()
    service = _service(repository, provider, sleeps)

    result = service.run_batch(9)

    assert result.regions == []
    assert result.next_batch is None
    assert result.message == "All regions processed"
    assert provider.calls == []


def test_batch_rejects_negative_index(repository, sleeps):
    service = _service(repository, FakeProvider(), sleeps)

    with pytest.raises(ValidationError):
        service.run_batch(-1)


def test_batch_size_override(repository, sleeps):
    service = _service(repository, FakeProvider(), sleeps)

    result = service.run_batch(1, batch_size=20)

    assert [r.region_id for r in result.regions][0] == "21"
    assert len(result.regions) == 20
    assert result.next_batch == 2


def test_batch_response_uses_camel_case_pointer(repository, sleeps):
    result = _service(repository, FakeProvider(), sleeps).run_batch(8)

    body = result.to_response()
    assert body["nextBatch"] is None
    assert body["totalRegions"] == 41
    assert body["regions"][0]["region"] == "烏來區"


def test_delay_between_regions_only(repository, sleeps):
    service = _service(repository, FakeProvider(), sleeps, region_delay_seconds=0.3)

    service.run_batch(0)

    assert sleeps == [0.3] * 4


def test_zero_delay_never_sleeps(repository, sleeps):
    service = _service(repository, FakeProvider(), sleeps, region_delay_seconds=0)

    service.run_city("taipei")

    assert sleeps == []


def test_invalid_batch_size_rejected(repository, sleeps):
    with pytest.raises(ValueError):
        _service(repository, FakeProvider(), sleeps, batch_size=0)


def test_upstream_failure_isolated_to_its_region(repository, sleeps):
    provider = FakeProvider(results={
        "信義區": RegionFetchResult(error="Timed out after 15s"),
        "大安區": RegionFetchResult(total_found=3, stores=[make_store("300001"), make_store("300002")]),
    })
    service = _service(repository, provider, sleeps)

    result = service.run_batch(0)

    by_name = {r.region: r for r in result.regions}
    assert by_name["信義區"].error == "Timed out after 15s"
    assert by_name["信義區"].added == 0
    assert by_name["大安區"].error is None
    assert by_name["大安區"].total_found == 3
    assert by_name["大安區"].with_toilet == 2
    assert by_name["大安區"].added == 2
    assert len(result.regions) == 5
    assert result.next_batch == 1


def test_catalog_write_failure_propagates(repository, collection, sleeps):
    from pymongo.errors import OperationFailure

    collection.fail_with = OperationFailure("not primary")
    provider = FakeProvider(results={"松山區": RegionFetchResult(total_found=1, stores=[make_store("1")])})

    with pytest.raises(MongoDBError):
        _service(repository, provider, sleeps).run_single_region("01")


def test_single_region(repository, sleeps):
    provider = FakeProvider()
    result = _service(repository, provider, sleeps).run_single_region("13")

    assert result.region_id == "13"
    assert result.region == "板橋區"
    assert result.city == "新北市"
    assert provider.calls == [("新北市", "板橋區")]


def test_single_region_unknown_id(repository, sleeps):
    with pytest.raises(UnknownRegionError) as excinfo:
        _service(repository, FakeProvider(), sleeps).run_single_region("99")

    assert len(excinfo.value.valid_ids) == 41
    assert excinfo.value.valid_ids[0] == {"id": "01", "name": "松山區"}


def test_city_mode_syncs_only_that_city(repository, sleeps):
    provider = FakeProvider()
    results = _service(repository, provider, sleeps).run_city("newtaipei")

    assert len(results) == 29
    assert {city for city, _ in provider.calls} == {"新北市"}
    assert results[0].region == "板橋區"


def test_city_mode_unknown_city(repository, sleeps):
    with pytest.raises(ValidationError):
        _service(repository, FakeProvider(), sleeps).run_city("taichung")


def test_custom_registry(repository, sleeps):
    registry = RegionRegistry(regions=[
        Region(id="01", name="松山區", name_en="Songshan", city="taipei"),
        Region(id="02", name="信義區", name_en="Xinyi", city="taipei"),
        Region(id="03", name="大安區", name_en="Da'an", city="taipei"),
    ])
    service = _service(repository, FakeProvider(), sleeps, registry=registry, batch_size=2)

    assert service.total_batches() == 2
    assert service.run_batch(1).next_batch is None


def test_songshan_end_to_end(repository, sleeps):
    session = FakeSession(pages={"松山區": payload(
        store_block("100001", "02Restroom,03ATM", name="八德門市"),
        store_block("100002", "03ATM", name="民生門市"),
    )})
    provider = SevenElevenEmapProvider(api_url="https://emap.example/EMapSDK.aspx", session=session)
    service = _service(repository, provider, sleeps)

    first = service.run_single_region("01")

    assert first.total_found == 2
    assert first.with_toilet == 1
    assert first.added == 1
    assert first.updated == 0
    assert session.posts[0]["data"]["city"] == "台北市"
    assert session.posts[0]["data"]["town"] == "松山區"
    doc = repository.get_by_poi_id("100001")
    assert doc["name"] == "八德門市"
    assert doc["services"] == ["02Restroom", "03ATM"]
    assert repository.get_by_poi_id("100002") is None

    second = service.run_single_region("01")

    assert second.added == 0
    assert second.updated == 1
    assert repository.count() == 1


def test_catalog_status(repository, clock, sleeps):
    repository.upsert(make_store("1"), RegionRegistry().region_by_id("01"), "台北市")
    repository.upsert(make_store("2"), RegionRegistry().region_by_id("13"), "新北市")

    status = _service(repository, FakeProvider(), sleeps).catalog_status(30)

    assert status["total"] == 2
    assert status["by_city"] == {"台北市": 1, "新北市": 1}
    assert status["stale_after_days"] == 30
