from __future__ import annotations

import pytest

from toilet_catalog.model.region import NEW_TAIPEI, REGIONS, TAIPEI, Region, RegionRegistry


def test_registry_has_41_regions_in_fixed_order():
    registry = RegionRegistry()
    regions = registry.all_regions()

    assert len(registry) == 41
    assert [r.id for r in regions] == [f"{i:02d}" for i in range(1, 42)]
    assert regions[0].name == "松山區"
    assert regions[0].name_en == "Songshan"
    assert regions[11].name == "北投區"
    assert regions[12].name == "板橋區"
    assert regions[-1].name == "烏來區"


def test_regions_by_city_counts():
    registry = RegionRegistry()

    assert len(registry.regions_by_city("taipei")) == 12
    assert len(registry.regions_by_city("newtaipei")) == 29
    assert registry.regions_by_city("kaohsiung") == []


def test_taipei_regions_precede_new_taipei():
    cities = [r.city for r in REGIONS]
    assert cities == ["taipei"] * 12 + ["newtaipei"] * 29


def test_region_by_id():
    registry = RegionRegistry()

    assert registry.region_by_id("13").name == "板橋區"
    assert registry.region_by_id("99") is None
    assert registry.region_by_id("1") is None


def test_city_lookups():
    registry = RegionRegistry()

    assert registry.city("taipei") == TAIPEI
    assert registry.city("newtaipei").name == "新北市"
    assert registry.city("taichung") is None
    assert registry.is_known_city("newtaipei")
    assert not registry.is_known_city("NewTaipei")
    assert registry.city_keys() == [TAIPEI.key, NEW_TAIPEI.key]


def test_valid_ids_lists_every_region():
    valid = RegionRegistry().valid_ids()

    assert len(valid) == 41
    assert valid[0] == {"id": "01", "name": "松山區"}


def test_duplicate_ids_rejected():
    duplicate = [
        Region(id="01", name="A區", name_en="A", city="taipei"),
        Region(id="01", name="B區", name_en="B", city="taipei"),
    ]

    with pytest.raises(ValueError):
        RegionRegistry(regions=duplicate)


def test_regions_are_immutable():
    region = RegionRegistry().region_by_id("01")

    with pytest.raises(Exception):
        region.name = "changed"
