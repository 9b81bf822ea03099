"""
Celery Tasks - Catalog Batch Chain
==================================

Purpose:
- Walk the resumable batch refresh without an external scheduler
- Each task runs one batch window, then enqueues the next one
- A failed batch stops the chain; re-running it from that index resumes

Usage:
    # Start a full refresh now
    sync_catalog_batch.delay(0)

    # Resume at batch 4 after a failure
    sync_catalog_batch.apply_async(args=[4])
"""

import logging

from celery.schedules import crontab

from config import Config

logger = logging.getLogger(__name__)

TASK_NAME = 'toilet_catalog.tasks.catalog_sync_tasks.sync_catalog_batch'

# Daily full refresh, applied by celery_worker.py
BEAT_SCHEDULE = {
    'sync-seven-eleven-toilets': {
        'task': TASK_NAME,
        'schedule': crontab(hour=Config.CELERY_SYNC_HOUR, minute=Config.CELERY_SYNC_MINUTE),
        'args': (0,),
    }
}


def get_celery_app():
    """Lazy import celery to avoid circular imports."""
    from toilet_catalog import celery
    return celery


def get_catalog_sync_service():
    """Resolve CatalogSyncService from the DI container."""
    from toilet_catalog.config.di_setup import init_di
    from toilet_catalog.service.catalog_sync_service import CatalogSyncService

    return init_di().resolve(CatalogSyncService.__name__)


def schedule_next_batch(batch_index: int):
    sync_catalog_batch.apply_async(args=[batch_index], countdown=Config.CELERY_BATCH_COUNTDOWN)


celery = get_celery_app()


@celery.task(name=TASK_NAME, max_retries=0)
def sync_catalog_batch(batch_index: int = 0):
    """
    Run one batch window and chain the next.

    Args:
        batch_index: Batch to run

    Returns:
        Dict with status, the batch result and the enqueued next batch
    """
    logger.info(f"[CELERY] Catalog sync batch {batch_index} starting")

    try:
        result = get_catalog_sync_service().run_batch(batch_index)
    except Exception as e:
        logger.error(f"[CELERY] Catalog sync batch {batch_index} failed: {e}", exc_info=True)
        return {
            "status": "failed",
            "batch": batch_index,
            "message": str(e)
        }

    failed_regions = [r.region_id for r in result.regions if r.error]
    if failed_regions:
        logger.warning(f"[CELERY] Batch {batch_index} regions with upstream errors: {failed_regions}")

    if result.next_batch is not None:
        schedule_next_batch(result.next_batch)
        logger.info(f"[CELERY] Enqueued batch {result.next_batch}")
    else:
        logger.info(f"[CELERY] Catalog sync complete at batch {batch_index}")

    return {
        "status": "success",
        "batch": batch_index,
        "next_batch": result.next_batch,
        "result": result.to_response()
    }
