"""
Catalog Sync Service - Business Logic Layer
===========================================

Purpose:
- Refresh the toilet catalog from the 7-ELEVEN e-map, one region at a time
- Resumable full refresh split into fixed-size batch windows
- Targeted refresh of one region or one city

Architecture:
    Trigger (HTTP cron / Celery)
        ↓
    Select regions (batch window | city | single id)
        ↓  for each region, sequentially, 300ms apart
    1. Fetch region from provider (failures → 0 results)
    2. Keep restroom-enabled stores
    3. Upsert each into MongoDB (keyed by poi_id)
        ↓
    Per-region counters (+ nextBatch pointer in batch mode)

Calling run_batch(0), run_batch(1), ... until nextBatch is None visits
every region exactly once, so a full refresh fits in many short
invocations. A crash mid-batch is recovered by re-running the batch.
"""

import logging
import math
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from ..common.exceptions import UnknownRegionError, ValidationError
from ..model.mongo.toilet_store import BatchResult, RegionSyncResult, UpsertOutcome
from ..model.region import Region, RegionRegistry
from ..providers.base_provider import BaseDirectoryProvider
from ..repo.mongo.interfaces import ToiletStoreRepositoryInterface

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 5
DEFAULT_REGION_DELAY_SECONDS = 0.3


class CatalogSyncService:
    """Selects regions and runs the per-region sync over them."""

    def __init__(
        self,
        repository: ToiletStoreRepositoryInterface,
        provider: BaseDirectoryProvider,
        registry: Optional[RegionRegistry] = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        region_delay_seconds: float = DEFAULT_REGION_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be positive")
        self.repository = repository
        self.provider = provider
        self.registry = registry or RegionRegistry()
        self.batch_size = batch_size
        self.region_delay_seconds = region_delay_seconds
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Per-region primitive
    # ------------------------------------------------------------------

    def _city_name(self, region: Region) -> str:
        city = self.registry.city(region.city)
        return city.name if city else region.city

    def sync_region(self, region: Region) -> RegionSyncResult:
        """
        Fetch one region and upsert its restroom-enabled stores.

        Upstream failures come back as a zero-result entry with error set;
        catalog write failures propagate.
        """
        city_name = self._city_name(region)
        logger.info(f"[SYNC] Syncing {city_name}{region.name} ({region.id})")

        fetched = self.provider.fetch_region(city_name, region.name)
        result = RegionSyncResult(
            region_id=region.id,
            region=region.name,
            city=city_name,
            total_found=fetched.total_found,
            with_toilet=len(fetched.stores),
            error=fetched.error,
        )

        for store in fetched.stores:
            outcome = self.repository.upsert(store, region, city_name)
            if outcome == UpsertOutcome.INSERTED:
                result.added += 1
            elif outcome == UpsertOutcome.UPDATED:
                result.updated += 1

        logger.info(
            f"[SYNC] {region.name}: found={result.total_found}, with_toilet={result.with_toilet}, "
            f"added={result.added}, updated={result.updated}"
        )
        return result

    def _sync_sequentially(self, regions: List[Region]) -> List[RegionSyncResult]:
        results = []
        for index, region in enumerate(regions):
            if index > 0 and self.region_delay_seconds > 0:
                self._sleep(self.region_delay_seconds)
            results.append(self.sync_region(region))
        return results

    # ------------------------------------------------------------------
    # Selection modes
    # ------------------------------------------------------------------

    def run_single_region(self, region_id: str) -> RegionSyncResult:
        """
        Raises:
            UnknownRegionError: region_id is not in the registry
        """
        region = self.registry.region_by_id(region_id)
        if region is None:
            raise UnknownRegionError(region_id, self.registry.valid_ids())
        return self.sync_region(region)

    def run_city(self, city: str) -> List[RegionSyncResult]:
        """
        Raises:
            ValidationError: city is not one of the registry's city keys
        """
        if not self.registry.is_known_city(city):
            raise ValidationError(
                f"Unknown city '{city}'",
                field="city",
                details={"valid_cities": self.registry.city_keys()}
            )
        regions = self.registry.regions_by_city(city)
        logger.info(f"[SYNC] City refresh {city}: {len(regions)} regions")
        return self._sync_sequentially(regions)

    def run_batch(self, batch_index: int, batch_size: Optional[int] = None) -> BatchResult:
        """
        Sync the batch window [batch_index * size, +size) of the region list.

        Returns:
            BatchResult with next_batch set while regions remain

        Example:
            result = service.run_batch(0)
            while result.next_batch is not None:
                result = service.run_batch(result.next_batch)
        """
        size = batch_size or self.batch_size
        if batch_index < 0:
            raise ValidationError("Batch index must be >= 0", field="batch")
        if size < 1:
            raise ValidationError("Batch size must be >= 1", field="batch_size")

        regions = self.registry.all_regions()
        total = len(regions)
        start = batch_index * size
        end = min(start + size, total)

        if start >= total:
            logger.info(f"[SYNC] Batch {batch_index} past the end ({total} regions), nothing to do")
            return BatchResult(
                batch=batch_index,
                next_batch=None,
                total_regions=total,
                regions=[],
                message="All regions processed",
            )

        logger.info(f"[SYNC] Batch {batch_index}: regions {start}..{end - 1} of {total}")
        results = self._sync_sequentially(regions[start:end])
        return BatchResult(
            batch=batch_index,
            next_batch=batch_index + 1 if end < total else None,
            total_regions=total,
            regions=results,
        )

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def total_batches(self, batch_size: Optional[int] = None) -> int:
        return math.ceil(len(self.registry) / (batch_size or self.batch_size))

    def catalog_status(self, stale_after_days: int) -> Dict[str, Any]:
        """Catalog totals and the entries not refreshed for stale_after_days."""
        city_names = [c.name for c in (self.registry.city(k) for k in self.registry.city_keys()) if c]
        cutoff = datetime.now(timezone.utc) - timedelta(days=stale_after_days)
        return {
            "total": self.repository.count(),
            "by_city": self.repository.count_by_city(city_names),
            "stale": self.repository.count_stale(cutoff),
            "stale_after_days": stale_after_days,
        }
