"""Canonical dataset fixtures used across data, engine and API tests.

Six neighbourhoods:
  DOWNTOWN        own rent row, crime 40, 2 schools, 1 park
  OLIVER          rent inherited from DOWNTOWN, crime 20, 1 school
  ALBERTA AVENUE  rent inherited from HIGHLANDS/ALBERTA AVENUE, crime 30, 3 parks
  GLENORA         rent inherited from WEST JASPER PLACE/RURAL, crime 10, 1 school
  MYSTERY         citywide EDMONTON rent, no crime row, 1 park
  GARNEAU         mapped to UNIVERSITY, which has no rent row
"""

import asyncio
import copy
from collections import Counter

import pytest

from rentmap.data.store import DataStore
from rentmap.models.datasets import DatasetKind


def _point(neighbourhood_name: str | None, name: str) -> dict:
    props = {"name": name}
    if neighbourhood_name is not None:
        props["neighbourhood_name"] = neighbourhood_name
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [-113.49, 53.54]},
        "properties": props,
    }


def _boundary(name: str, district: str | None = None) -> dict:
    props = {"name": name}
    if district is not None:
        props["district"] = district
    return {
        "type": "Feature",
        "geometry": {"type": "Polygon", "coordinates": []},
        "properties": props,
    }


@pytest.fixture
def crime_payload() -> dict:
    return {
        "crime_by_neighbourhood": [
            {"neighbourhood_name": "DOWNTOWN", "violent_weapons_crimes_total_2025": 40,
             "violent_weapons_crimes_monthly_avg": 3.33},
            {"neighbourhood_name": "Oliver", "violent_weapons_crimes_total_2025": 20,
             "violent_weapons_crimes_monthly_avg": 1.67},
            {"neighbourhood_name": "ALBERTA AVENUE", "violent_weapons_crimes_total_2025": 30,
             "violent_weapons_crimes_monthly_avg": 2.5},
            {"neighbourhood_name": "GLENORA ", "violent_weapons_crimes_total_2025": 10,
             "violent_weapons_crimes_monthly_avg": 0.83},
        ]
    }


@pytest.fixture
def rent_payload() -> dict:
    return {
        "rent_by_neighbourhood": [
            {"neighbourhood_name": "DOWNTOWN", "studio": 1100, "1_bedroom": 1300,
             "2_bedroom": 1700, "3_bedroom_plus": None, "total_avg": 1400},
            {"neighbourhood_name": "HIGHLANDS/ALBERTA AVENUE", "studio": 850, "1_bedroom": 1000,
             "2_bedroom": 1250, "3_bedroom_plus": 1500, "total_avg": 1100},
            {"neighbourhood_name": "WEST JASPER PLACE/RURAL", "studio": None, "1_bedroom": 1150,
             "2_bedroom": 1400, "3_bedroom_plus": 1650, "total_avg": 1300},
            {"neighbourhood_name": "EDMONTON", "studio": 1000, "1_bedroom": 1200,
             "2_bedroom": 1450, "3_bedroom_plus": 1600, "total_avg": 1350},
        ]
    }


@pytest.fixture
def neighbourhoods_payload() -> dict:
    return {
        "type": "FeatureCollection",
        "features": [
            _boundary("Downtown", "Central"),
            _boundary("Oliver", "Central"),
            _boundary("Alberta Avenue", "North Central"),
            _boundary("Glenora", "Jasper Place"),
            _boundary("Mystery"),
            _boundary("Garneau", "Scona"),
        ],
    }


@pytest.fixture
def schools_payload() -> dict:
    return {
        "type": "FeatureCollection",
        "features": [
            _point("Downtown", "Centre High"),
            _point("DOWNTOWN", "Grandin School"),
            _point("oliver", "Oliver School"),
            _point("GLENORA ", "Glenora School"),
        ],
    }


@pytest.fixture
def parks_payload() -> dict:
    return {
        "type": "FeatureCollection",
        "features": [
            _point("DOWNTOWN", "Churchill Square"),
            _point("ALBERTA AVENUE", "Eastwood Park"),
            _point("Alberta Avenue", "Norwood Park"),
            _point("alberta avenue", "Parkdale Park"),
            _point("MYSTERY", "Mystery Park"),
            _point(None, "River Valley"),
        ],
    }


@pytest.fixture
def zone_mapping_payload() -> dict:
    return {
        "DOWNTOWN": "DOWNTOWN",
        "OLIVER": "DOWNTOWN",
        "ALBERTA AVENUE": "HIGHLANDS/ALBERTA AVENUE",
        "GLENORA": "WEST JASPER PLACE/RURAL",
        "MYSTERY": "EDMONTON",
        "GARNEAU": "UNIVERSITY",
    }


@pytest.fixture
def payloads(
    crime_payload, rent_payload, schools_payload, parks_payload,
    neighbourhoods_payload, zone_mapping_payload,
) -> dict[DatasetKind, dict]:
    return {
        DatasetKind.CRIME: crime_payload,
        DatasetKind.RENT: rent_payload,
        DatasetKind.SCHOOLS: schools_payload,
        DatasetKind.PARKS: parks_payload,
        DatasetKind.NEIGHBOURHOODS: neighbourhoods_payload,
        DatasetKind.ZONE_MAPPING: zone_mapping_payload,
    }


class FakeSource:
    """In-memory DatasetSource that counts fetches and can be told to fail."""

    def __init__(self, payloads: dict[DatasetKind, dict]):
        self.payloads = payloads
        self.calls: Counter = Counter()
        self.failures: dict[DatasetKind, BaseException] = {}

    async def fetch(self, kind: DatasetKind):
        self.calls[kind] += 1
        await asyncio.sleep(0)
        if kind in self.failures:
            raise self.failures[kind]
        return copy.deepcopy(self.payloads[kind])


@pytest.fixture
def source(payloads) -> FakeSource:
    return FakeSource(payloads)


@pytest.fixture
def store(source) -> DataStore:
    return DataStore(source)


@pytest.fixture
async def loaded_store(store) -> DataStore:
    await store.load_all()
    return store
