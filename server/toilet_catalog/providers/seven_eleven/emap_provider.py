"""
7-ELEVEN e-map Provider Implementation
Queries the store locator one district at a time
"""

import logging
from typing import List, Optional

import requests

from config import Config
from ..base_provider import BaseDirectoryProvider
from ...common.exceptions import DirectoryServiceError
from ...model.mongo.toilet_store import RegionFetchResult, StoreRecord
from .store_parser import parse_stores

logger = logging.getLogger(__name__)


class SevenElevenEmapProvider(BaseDirectoryProvider):
    """
    7-ELEVEN e-map store locator.

    Endpoint: POST EMapSDK.aspx, form fields commandid=SearchStore, city, town.
    No authentication and no documented rate limit; throttling is done by
    the caller between regions. No retries here.
    """

    COMMAND_SEARCH_STORE = "SearchStore"

    def __init__(self, api_url: Optional[str] = None, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        """
        Initialize e-map provider

        Args:
            api_url: Store locator URL (defaults to Config.SEVEN_ELEVEN_API_URL)
            timeout: Request timeout in seconds
            session: Shared requests session (one is created if omitted)
        """
        self.api_url = api_url or Config.SEVEN_ELEVEN_API_URL
        self.timeout = timeout if timeout is not None else Config.SEVEN_ELEVEN_API_TIMEOUT
        self.session = session or requests.Session()

    def get_provider_name(self) -> str:
        return "seven_eleven_emap"

    def _post_search(self, city_name: str, region_name: str) -> str:
        try:
            response = self.session.post(
                self.api_url,
                data={
                    "commandid": self.COMMAND_SEARCH_STORE,
                    "city": city_name,
                    "town": region_name,
                },
                headers={"Content-Type": "application/x-www-form-urlencoded; charset=UTF-8"},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.Timeout as e:
            raise DirectoryServiceError(
                f"Timed out after {self.timeout}s",
                details={"city": city_name, "region": region_name}
            ) from e
        except requests.RequestException as e:
            raise DirectoryServiceError(
                f"Request failed: {e}",
                details={"city": city_name, "region": region_name}
            ) from e

        # requests falls back to ISO-8859-1 for text/* without a charset
        if "charset" not in response.headers.get("Content-Type", "").lower():
            response.encoding = "utf-8"
        return response.text

    def search_stores(self, city_name: str, region_name: str) -> List[StoreRecord]:
        payload = self._post_search(city_name, region_name)
        stores = parse_stores(payload)
        logger.debug(f"[EMAP] {city_name}{region_name}: parsed {len(stores)} stores")
        return stores

    def fetch_region(self, city_name: str, region_name: str) -> RegionFetchResult:
        try:
            stores = self.search_stores(city_name, region_name)
        except (DirectoryServiceError, ValueError) as e:
            logger.error(f"[EMAP] Fetch failed for {city_name}{region_name}, continuing with 0 results: {e}")
            return RegionFetchResult(error=str(e))

        toilet_stores = [s for s in stores if s.has_toilet]
        logger.info(f"[EMAP] {city_name}{region_name}: {len(stores)} stores, {len(toilet_stores)} with toilet")
        return RegionFetchResult(total_found=len(stores), stores=toilet_stores)
