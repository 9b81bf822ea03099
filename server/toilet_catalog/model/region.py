"""
Region Registry
===============

Static, ordered table of administrative districts used as the unit of
upstream querying and batching. 12 Taipei districts followed by 29 New
Taipei districts, 41 in total. Batch windows are slices of this order, so
the order must never change between deployments. Append new regions at
the end.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict


class City(BaseModel):
    """Parent city of a region."""
    model_config = ConfigDict(frozen=True)

    key: str   # value accepted by the ?city= parameter
    name: str  # upstream/display name


class Region(BaseModel):
    """One administrative district."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    name_en: str
    city: str  # City.key


TAIPEI = City(key="taipei", name="台北市")
NEW_TAIPEI = City(key="newtaipei", name="新北市")

CITIES: Tuple[City, ...] = (TAIPEI, NEW_TAIPEI)


def _regions(city: City, first_id: int, names: Iterable[Tuple[str, str]]) -> List[Region]:
    return [
        Region(id=f"{first_id + offset:02d}", name=name, name_en=name_en, city=city.key)
        for offset, (name, name_en) in enumerate(names)
    ]


REGIONS: Tuple[Region, ...] = tuple(
    _regions(TAIPEI, 1, [
        ("松山區", "Songshan"),
        ("信義區", "Xinyi"),
        ("大安區", "Da'an"),
        ("中山區", "Zhongshan"),
        ("中正區", "Zhongzheng"),
        ("大同區", "Datong"),
        ("萬華區", "Wanhua"),
        ("文山區", "Wenshan"),
        ("南港區", "Nangang"),
        ("內湖區", "Neihu"),
        ("士林區", "Shilin"),
        ("北投區", "Beitou"),
    ])
    + _regions(NEW_TAIPEI, 13, [
        ("板橋區", "Banqiao"),
        ("三重區", "Sanchong"),
        ("中和區", "Zhonghe"),
        ("永和區", "Yonghe"),
        ("新莊區", "Xinzhuang"),
        ("新店區", "Xindian"),
        ("樹林區", "Shulin"),
        ("鶯歌區", "Yingge"),
        ("三峽區", "Sanxia"),
        ("淡水區", "Tamsui"),
        ("汐止區", "Xizhi"),
        ("瑞芳區", "Ruifang"),
        ("土城區", "Tucheng"),
        ("蘆洲區", "Luzhou"),
        ("五股區", "Wugu"),
        ("泰山區", "Taishan"),
        ("林口區", "Linkou"),
        ("深坑區", "Shenkeng"),
        ("石碇區", "Shiding"),
        ("坪林區", "Pinglin"),
        ("三芝區", "Sanzhi"),
        ("石門區", "Shimen"),
        ("八里區", "Bali"),
        ("平溪區", "Pingxi"),
        ("雙溪區", "Shuangxi"),
        ("貢寮區", "Gongliao"),
        ("金山區", "Jinshan"),
        ("萬里區", "Wanli"),
        ("烏來區", "Wulai"),
    ])
)


class RegionRegistry:
    """
    Read-only lookups over an ordered region table.

    The table is injected so tests can run the scheduler against a
    smaller fake set.

    Example:
        registry = RegionRegistry()
        registry.region_by_id("01").name_en   # "Songshan"
        len(registry.regions_by_city("newtaipei"))  # 29
    """

    def __init__(self, regions: Iterable[Region] = REGIONS, cities: Iterable[City] = CITIES):
        self._regions: Tuple[Region, ...] = tuple(regions)
        self._cities: Dict[str, City] = {c.key: c for c in cities}
        self._by_id: Dict[str, Region] = {r.id: r for r in self._regions}
        if len(self._by_id) != len(self._regions):
            raise ValueError("Region ids must be unique")

    def all_regions(self) -> List[Region]:
        return list(self._regions)

    def region_by_id(self, region_id: str) -> Optional[Region]:
        return self._by_id.get(region_id)

    def regions_by_city(self, city: str) -> List[Region]:
        return [r for r in self._regions if r.city == city]

    def city(self, key: str) -> Optional[City]:
        return self._cities.get(key)

    def is_known_city(self, key: str) -> bool:
        return key in self._cities

    def city_keys(self) -> List[str]:
        return list(self._cities)

    def valid_ids(self) -> List[Dict[str, str]]:
        """Id/name pairs, as listed in the unknown-district response."""
        return [{"id": r.id, "name": r.name} for r in self._regions]

    def __len__(self) -> int:
        return len(self._regions)
