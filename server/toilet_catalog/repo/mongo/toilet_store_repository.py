"""
Toilet Store Repository - MongoDB Data Access Layer
====================================================

Purpose:
- Idempotent upsert of restroom-enabled stores keyed by poi_id
- Catalog counters for the status endpoint

This is the only writer of the catalog. Entries are inserted or
refreshed, never deleted.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional
import logging

from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from config import Config
from ...common.exceptions import MongoDBError, ValidationError
from ...core.clients.mongodb_client import get_mongodb_client
from ...model.mongo.toilet_store import CatalogEntry, StoreRecord, UpsertOutcome
from ...model.region import Region
from .interfaces import ToiletStoreRepositoryInterface

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ToiletStoreRepository(ToiletStoreRepositoryInterface):
    """
    Repository for the toilet catalog collection.

    Overlapping runs are safe without locking: every write is an upsert on
    the unique poi_id, so replaying the same store only refreshes fields
    and updated_at.
    """

    def __init__(self, collection: Optional[Collection] = None,
                 clock: Callable[[], datetime] = _utcnow):
        """
        Args:
            collection: Collection to use (defaults to Config.TOILET_COLLECTION
                        on the shared MongoDB client)
            clock: Source of write timestamps
        """
        self.clock = clock
        self.collection = collection
        if self.collection is None:
            self.collection = get_mongodb_client().get_collection(Config.TOILET_COLLECTION)
            if self.collection is None:
                logger.error("[CATALOG] Failed to get database for toilet repository")
            else:
                logger.info(f"[CATALOG] Toilet collection ready: {Config.TOILET_COLLECTION}")

    def _require_collection(self) -> Collection:
        if self.collection is None:
            raise MongoDBError("Toilet catalog collection not available")
        return self.collection

    @staticmethod
    def _build_update(entry: CatalogEntry) -> Dict[str, Any]:
        fields = entry.model_dump(exclude={"location"})
        update: Dict[str, Any] = {"$set": fields}
        if entry.location is not None:
            fields["location"] = entry.location.model_dump()
        else:
            update["$unset"] = {"location": ""}
        return update

    def upsert(self, store: StoreRecord, region: Region, city_name: str) -> UpsertOutcome:
        """
        Insert or refresh one store.

        Example:
            outcome = repo.upsert(store, region, "台北市")
            outcome == UpsertOutcome.INSERTED   # first run
            outcome == UpsertOutcome.UPDATED    # any later run
        """
        if not store.has_toilet:
            raise ValidationError(f"Store {store.poi_id} has no restroom", field="has_toilet")

        collection = self._require_collection()
        now = self.clock()
        entry = CatalogEntry.from_store(
            store, city=city_name, district=region.name, region_id=region.id, now=now
        )
        update = self._build_update(entry)
        query = {"poi_id": store.poi_id}

        try:
            result = collection.update_one(
                query,
                {**update, "$setOnInsert": {"created_at": now}},
                upsert=True
            )
        except DuplicateKeyError:
            # Another run inserted this poi_id between our match and insert
            logger.info(f"[CATALOG] Concurrent insert of {store.poi_id}, applying as update")
            try:
                result = collection.update_one(query, update)
            except PyMongoError as e:
                raise MongoDBError(f"Failed to update store {store.poi_id}", details={"error": str(e)}) from e
        except PyMongoError as e:
            raise MongoDBError(f"Failed to upsert store {store.poi_id}", details={"error": str(e)}) from e

        if result.upserted_id is not None:
            logger.debug(f"[CATALOG] Inserted {store.poi_id} ({region.name})")
            return UpsertOutcome.INSERTED
        if result.matched_count:
            return UpsertOutcome.UPDATED
        return UpsertOutcome.NOOP

    def get_by_poi_id(self, poi_id: str) -> Optional[Dict[str, Any]]:
        return self._require_collection().find_one({"poi_id": poi_id})

    def count(self) -> int:
        return self._require_collection().count_documents({})

    def count_by_city(self, city_names: List[str]) -> Dict[str, int]:
        collection = self._require_collection()
        return {name: collection.count_documents({"city": name}) for name in city_names}

    def count_stale(self, older_than: datetime) -> int:
        return self._require_collection().count_documents({"updated_at": {"$lt": older_than}})
