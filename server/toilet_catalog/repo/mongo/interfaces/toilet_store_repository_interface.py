"""
Toilet Store Repository Interface - MongoDB Data Access Layer
==============================================================

Purpose:
- Define abstract interface for toilet catalog writes and reads
- Enable dependency injection and unit testing
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from ....model.mongo.toilet_store import StoreRecord, UpsertOutcome
from ....model.region import Region


class ToiletStoreRepositoryInterface(ABC):
    """
    Abstract interface for the toilet catalog.

    Implementations:
    - ToiletStoreRepository (MongoDB) - Production implementation
    - In-memory fakes - For unit testing
    """

    @abstractmethod
    def upsert(self, store: StoreRecord, region: Region, city_name: str) -> UpsertOutcome:
        """
        Insert or refresh one restroom-enabled store, keyed by poi_id.

        Args:
            store: Normalized store with has_toilet == True
            region: Region the store was fetched for
            city_name: Display name of the region's city

        Returns:
            INSERTED on first sight of poi_id, UPDATED afterwards

        Raises:
            ValidationError: store has no restroom
            MongoDBError: write failed
        """
        pass

    @abstractmethod
    def get_by_poi_id(self, poi_id: str) -> Optional[Dict[str, Any]]:
        """Get catalog document by upstream POI id, None if absent."""
        pass

    @abstractmethod
    def count(self) -> int:
        """Total catalog entries."""
        pass

    @abstractmethod
    def count_by_city(self, city_names: List[str]) -> Dict[str, int]:
        """Catalog entries per city display name."""
        pass

    @abstractmethod
    def count_stale(self, older_than: datetime) -> int:
        """Entries whose updated_at is before the cutoff."""
        pass
