from __future__ import annotations

from datetime import datetime, timezone

import pytest
import requests
from pymongo.errors import DuplicateKeyError

from config import Config
from toilet_catalog.model.mongo.toilet_store import RegionFetchResult, StoreRecord
from toilet_catalog.providers.seven_eleven.store_parser import classify_services


class SyncTestConfig(Config):
    TESTING = True
    APP_ENV = "test"
    CRON_SECRET = "cron-test-secret"
    MANUAL_SYNC_KEY = "manual-test-key"
    MONGODB_INIT_ON_STARTUP = False
    SYNC_REGION_DELAY_MS = 0


class FakeUpdateResult:
    def __init__(self, matched_count=0, modified_count=0, upserted_id=None):
        self.matched_count = matched_count
        self.modified_count = modified_count
        self.upserted_id = upserted_id


def _matches(doc, query):
    for key, cond in query.items():
        if isinstance(cond, dict) and "$lt" in cond:
            if key not in doc or not doc[key] < cond["$lt"]:
                return False
        elif doc.get(key) != cond:
            return False
    return True


class FakeCollection:
    """In-memory stand-in for the handful of pymongo calls the repository makes."""

    def __init__(self):
        self.docs = []
        self.update_calls = []
        self.race_on_next_upsert = False
        self.fail_with = None
        self._next_id = 1

    def _find(self, query):
        for doc in self.docs:
            if _matches(doc, query):
                return doc
        return None

    def update_one(self, query, update, upsert=False):
        self.update_calls.append((query, update, upsert))
        if self.fail_with is not None:
            raise self.fail_with

        if upsert and self.race_on_next_upsert:
            # another writer inserts the same key first
            self.race_on_next_upsert = False
            self.docs.append({"_id": self._new_id(), **query, "created_at": "other-run"})
            raise DuplicateKeyError("E11000 duplicate key error")

        doc = self._find(query)
        if doc is None:
            if not upsert:
                return FakeUpdateResult()
            doc = {"_id": self._new_id(), **query}
            doc.update(update.get("$setOnInsert", {}))
            self._apply(doc, update)
            self.docs.append(doc)
            return FakeUpdateResult(upserted_id=doc["_id"])

        before = dict(doc)
        self._apply(doc, update)
        return FakeUpdateResult(matched_count=1, modified_count=int(before != doc))

    @staticmethod
    def _apply(doc, update):
        doc.update(update.get("$set", {}))
        for key in update.get("$unset", {}):
            doc.pop(key, None)

    def _new_id(self):
        value = self._next_id
        self._next_id += 1
        return value

    def find_one(self, query):
        return self._find(query)

    def count_documents(self, query):
        return sum(1 for doc in self.docs if _matches(doc, query))


class FakeProvider:
    """Directory client returning canned per-region results."""

    def __init__(self, results=None, raises=None):
        self.results = results or {}
        self.raises = raises or {}
        self.calls = []

    def fetch_region(self, city_name, region_name):
        self.calls.append((city_name, region_name))
        if region_name in self.raises:
            raise self.raises[region_name]
        return self.results.get(region_name, RegionFetchResult())

    def get_provider_name(self):
        return "fake"


class FixedClock:
    def __init__(self, now=None):
        self.now = now or datetime(2026, 1, 1, 3, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now


def make_store(poi_id, services="02廁所,03ATM", lat=25.0608, lng=121.5576, name=None):
    tokens, has_toilet = classify_services(services)
    return StoreRecord(
        poi_id=poi_id,
        name=name or f"門市{poi_id}",
        address=f"台北市松山區八德路{poi_id}號",
        lat=lat,
        lng=lng,
        phone="02-1234-5678",
        opening_days="1234567",
        opening_hours="24",
        services=tokens,
        has_toilet=has_toilet,
    )


def store_block(poi_id, services, name="松山門市", x="121557600", y="25060800", address="台北市松山區八德路四段1號"):
    return (
        "<GeoPosition>"
        f"<POIID> {poi_id}</POIID>"
        f"<POIName>{name}</POIName>"
        f"<X>{x}</X>"
        f"<Y>{y}</Y>"
        "<Telno>02-1234-5678</Telno>"
        f"<Address>{address}</Address>"
        f"<StoreImageTitle>{services}</StoreImageTitle>"
        "<OP_DAY>1234567</OP_DAY>"
        "<OP_TIME>24</OP_TIME>"
        "</GeoPosition>"
    )


def payload(*blocks):
    return '<?xml version="1.0" encoding="utf-8"?><iMapSDKOutput>' + "".join(blocks) + "</iMapSDKOutput>"


class FakeResponse:
    def __init__(self, text="", status_code=200, content_type="text/xml; charset=utf-8"):
        self.text = text
        self.status_code = status_code
        self.headers = {"Content-Type": content_type}
        self.encoding = None

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")


class FakeSession:
    """requests.Session stand-in keyed by the posted town."""

    def __init__(self, pages=None, errors=None):
        self.pages = pages or {}
        self.errors = errors or {}
        self.posts = []

    def post(self, url, data=None, headers=None, timeout=None):
        self.posts.append({"url": url, "data": data, "headers": headers, "timeout": timeout})
        town = data["town"]
        if town in self.errors:
            raise self.errors[town]
        return FakeResponse(self.pages.get(town, payload()))


@pytest.fixture
def collection():
    return FakeCollection()


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def repository(collection, clock):
    from toilet_catalog.repo.mongo.toilet_store_repository import ToiletStoreRepository
    return ToiletStoreRepository(collection=collection, clock=clock)


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def app(tmp_path):
    from toilet_catalog import create_app
    from toilet_catalog.core.di_container import DIContainer

    class _Config(SyncTestConfig):
        LOG_DIR = str(tmp_path / "logs")

    flask_app = create_app(_Config)
    saved = dict(DIContainer._dependencies)
    yield flask_app
    DIContainer._dependencies.clear()
    DIContainer._dependencies.update(saved)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def install_service():
    """Register a CatalogSyncService instance for the request handlers to resolve."""
    from toilet_catalog.core.di_container import DIContainer
    from toilet_catalog.service.catalog_sync_service import CatalogSyncService

    def _install(service):
        DIContainer.get_instance().register(CatalogSyncService.__name__, service)
        return service

    return _install

