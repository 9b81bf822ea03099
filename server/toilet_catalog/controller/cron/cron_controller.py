"""
Cron Controller - Toilet Catalog Sync Trigger
=============================================

Purpose:
- HTTP entry point for the external scheduler and manual re-runs
- Dispatch to single-region, city or batch refresh
- Standardized response format

Endpoints:
- GET /api/cron/sync-seven-eleven           - run one sync
- GET /api/cron/sync-seven-eleven/regions   - region table and batch plan
- GET /api/cron/sync-seven-eleven/status    - catalog totals and stale count
"""

from flask import Blueprint, current_app, request
from typing import Optional
import logging
import time

from ...common.exceptions import UnknownRegionError
from ...core.di_container import DIContainer
from ...middleware import cron_authorized
from ...service.catalog_sync_service import CatalogSyncService
from ...utils.response_helpers import build_error_response, build_success_response

logger = logging.getLogger(__name__)


class CronController:
    """
    Cron Controller

    Example Requests:
        # Scheduler, walking the batches
        GET /api/cron/sync-seven-eleven?batch=0
        Headers: Authorization: Bearer {CRON_SECRET}

        # Manual refresh of Songshan
        GET /api/cron/sync-seven-eleven?district=01&key={MANUAL_SYNC_KEY}

        # Manual refresh of every New Taipei district
        GET /api/cron/sync-seven-eleven?city=newtaipei&key={MANUAL_SYNC_KEY}
    """

    def __init__(self, blueprint: Blueprint):
        self._register_routes(blueprint)

    def _register_routes(self, blueprint: Blueprint):
        blueprint.add_url_rule("/sync-seven-eleven", "sync_seven_eleven",
                               cron_authorized(self.sync_seven_eleven), methods=["GET"])
        blueprint.add_url_rule("/sync-seven-eleven/regions", "list_regions",
                               cron_authorized(self.list_regions), methods=["GET"])
        blueprint.add_url_rule("/sync-seven-eleven/status", "catalog_status",
                               cron_authorized(self.catalog_status), methods=["GET"])

    @staticmethod
    def _service() -> CatalogSyncService:
        return DIContainer.get_instance().resolve(CatalogSyncService.__name__)

    @staticmethod
    def _parse_batch(raw: str) -> Optional[int]:
        if not raw:
            return 0
        try:
            value = int(raw)
        except ValueError:
            return None
        return value if value >= 0 else None

    def sync_seven_eleven(self):
        """
        Run one sync invocation.

        Query Parameters:
            district (optional): Region id, syncs only that region
            city (optional): "taipei" | "newtaipei", syncs the whole city
            batch (optional): Batch index for the resumable full refresh (default: 0)
            key (optional): Manual sync key

        Response Success (200):
            {
                "success": true,
                "message": "...",
                "resultCode": "BATCH_SYNC_SUCCESS",
                "timestamp": "2026-01-01T03:00:00.000Z",
                "duration": "4.21s",
                "results": {"batch": 0, "nextBatch": 1, "totalRegions": 41, "regions": [...]}
            }

        Response Error (400):
            {"success": false, "error": "...", "resultCode": "INVALID_DISTRICT", "validIds": [...]}
        """
        started_at = time.monotonic()
        district = request.args.get("district", "").strip()
        city = request.args.get("city", "").strip().lower()
        batch_raw = request.args.get("batch", "").strip()

        try:
            service = self._service()

            if district:
                logger.info(f"[CRON] Single region sync: {district}")
                try:
                    result = service.run_single_region(district)
                except UnknownRegionError as e:
                    return build_error_response(
                        f"Invalid district id '{district}'",
                        "INVALID_DISTRICT",
                        400,
                        data={"validIds": e.valid_ids}
                    )
                return build_success_response(
                    f"{result.city}{result.region} 7-ELEVEN sync completed",
                    "REGION_SYNC_SUCCESS",
                    results=result.model_dump(mode="json"),
                    started_at=started_at
                )

            if city and service.registry.is_known_city(city):
                logger.info(f"[CRON] City sync: {city}")
                results = service.run_city(city)
                return build_success_response(
                    f"{city} 7-ELEVEN sync completed ({len(results)} regions)",
                    "CITY_SYNC_SUCCESS",
                    results=[r.model_dump(mode="json") for r in results],
                    started_at=started_at
                )

            batch_index = self._parse_batch(batch_raw)
            if batch_index is None:
                return build_error_response(
                    f"Batch must be a non-negative integer, got '{batch_raw}'",
                    "INVALID_BATCH",
                    400
                )

            logger.info(f"[CRON] Batch sync: {batch_index}")
            result = service.run_batch(batch_index)
            return build_success_response(
                result.message or f"7-ELEVEN batch {batch_index} sync completed",
                "BATCH_SYNC_SUCCESS",
                results=result.to_response(),
                started_at=started_at
            )

        except Exception as e:
            logger.error(f"[ERROR] Sync failed: {e}", exc_info=True)
            return build_error_response(str(e), "SYNC_ERROR", 500)

    def list_regions(self):
        """Region table grouped by city, with the batch plan."""
        service = self._service()
        registry = service.registry
        cities = []
        for key in registry.city_keys():
            city = registry.city(key)
            cities.append({
                "key": city.key,
                "name": city.name,
                "regions": [r.model_dump() for r in registry.regions_by_city(key)],
            })
        return build_success_response(
            f"{len(registry)} regions",
            "REGIONS_LISTED",
            results={
                "cities": cities,
                "batchSize": service.batch_size,
                "totalBatches": service.total_batches(),
            }
        )

    def catalog_status(self):
        """Catalog totals; stale entries were not refreshed for CATALOG_STALE_DAYS."""
        started_at = time.monotonic()
        try:
            status = self._service().catalog_status(current_app.config.get("CATALOG_STALE_DAYS", 30))
        except Exception as e:
            logger.error(f"[ERROR] Catalog status failed: {e}", exc_info=True)
            return build_error_response(str(e), "STATUS_ERROR", 500)
        return build_success_response(
            f"{status['total']} stores in catalog",
            "CATALOG_STATUS",
            results=status,
            started_at=started_at
        )
