"""
Tasks Package - Celery Background Tasks
========================================

Tasks:
- catalog_sync_tasks: chained batch refresh of the toilet catalog
"""

from .catalog_sync_tasks import BEAT_SCHEDULE, sync_catalog_batch

__all__ = [
    'BEAT_SCHEDULE',
    'sync_catalog_batch'
]
