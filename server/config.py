import os
from dotenv import load_dotenv
from pathlib import Path


env_path = Path(".") / ".env"
load_dotenv(dotenv_path=env_path)


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "secret_key")

    # "production" enables the cron authorization gate
    APP_ENV = os.environ.get("APP_ENV", os.environ.get("FLASK_ENV", "development")).lower()

    # Cron trigger authorization
    # CRON_SECRET is sent by the scheduler as "Authorization: Bearer <secret>"
    CRON_SECRET = os.environ.get("CRON_SECRET")
    MANUAL_SYNC_KEY = os.environ.get("MANUAL_SYNC_KEY", "init-seven-eleven-2026")

    # MongoDB Configuration
    MONGODB_URI = os.environ.get("MONGODB_URI", "mongodb://localhost:27017/taiwan_food")
    MONGODB_DB_NAME = os.environ.get("MONGODB_DB_NAME", "taiwan_food")
    MONGODB_MAX_POOL_SIZE = int(os.environ.get("MONGODB_MAX_POOL_SIZE", 10))
    MONGODB_MIN_POOL_SIZE = int(os.environ.get("MONGODB_MIN_POOL_SIZE", 0))
    MONGODB_SERVER_SELECTION_TIMEOUT_MS = int(os.environ.get("MONGODB_SERVER_SELECTION_TIMEOUT_MS", 5000))
    MONGODB_CONNECT_TIMEOUT_MS = int(os.environ.get("MONGODB_CONNECT_TIMEOUT_MS", 10000))
    # Connect and create indexes inside create_app()
    MONGODB_INIT_ON_STARTUP = os.environ.get("MONGODB_INIT_ON_STARTUP", "True").lower() == "true"
    TOILET_COLLECTION = os.environ.get("TOILET_COLLECTION", "seven_eleven_toilets")

    # 7-ELEVEN e-map store locator (upstream directory service)
    SEVEN_ELEVEN_API_URL = os.environ.get("SEVEN_ELEVEN_API_URL", "https://emap.pcsc.com.tw/EMapSDK.aspx")
    SEVEN_ELEVEN_API_TIMEOUT = float(os.environ.get("SEVEN_ELEVEN_API_TIMEOUT", 15))  # seconds

    # Sync batching
    SYNC_BATCH_SIZE = int(os.environ.get("SYNC_BATCH_SIZE", 5))  # regions per invocation
    SYNC_REGION_DELAY_MS = int(os.environ.get("SYNC_REGION_DELAY_MS", 300))  # throttle between regions
    CATALOG_STALE_DAYS = int(os.environ.get("CATALOG_STALE_DAYS", 30))

    # Celery (optional in-process scheduler for the batch chain)
    CELERY_BROKER_URL = os.environ.get("CELERY_BROKER_URL")
    CELERY_WORKER_POOL = os.environ.get("CELERY_WORKER_POOL")
    if not CELERY_WORKER_POOL:
        CELERY_WORKER_POOL = "solo" if os.name == "nt" else "prefork"
    CELERY_SYNC_HOUR = int(os.environ.get("CELERY_SYNC_HOUR", 3))
    CELERY_SYNC_MINUTE = int(os.environ.get("CELERY_SYNC_MINUTE", 0))
    CELERY_BATCH_COUNTDOWN = int(os.environ.get("CELERY_BATCH_COUNTDOWN", 5))  # seconds between batches

    LOG_DIR = os.environ.get("LOG_DIR", "logs")

