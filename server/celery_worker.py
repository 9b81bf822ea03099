from toilet_catalog import celery, create_app
from toilet_catalog.tasks import BEAT_SCHEDULE
from config import Config

app = create_app()
app.app_context().push()

celery.conf.update(
    worker_pool=Config.CELERY_WORKER_POOL,
    beat_schedule=BEAT_SCHEDULE,
)
