"""
Base Provider Interface for upstream store directories
All directory implementations must inherit from this abstract class
"""

from abc import ABC, abstractmethod
from typing import List

from ..model.mongo.toilet_store import RegionFetchResult, StoreRecord


class BaseDirectoryProvider(ABC):
    """
    Abstract base class for per-region store-locator services.
    """

    @abstractmethod
    def search_stores(self, city_name: str, region_name: str) -> List[StoreRecord]:
        """
        Query one region and return every parsed store.

        Args:
            city_name: Upstream city name (e.g., "台北市")
            region_name: Upstream district name (e.g., "松山區")

        Returns:
            Normalized stores, restroom-enabled or not

        Raises:
            DirectoryServiceError: transport, HTTP or parse failure
        """
        pass

    @abstractmethod
    def fetch_region(self, city_name: str, region_name: str) -> RegionFetchResult:
        """
        Query one region and keep only restroom-enabled stores.

        Never raises for upstream problems: a failed region comes back
        with zero results and the error message set.

        Example:
            >>> provider.fetch_region("台北市", "松山區").stores
        """
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """
        Get provider identifier

        Returns:
            Provider name (e.g., "seven_eleven_emap")
        """
        pass
