import logging

from flask import Flask
from flask.json.provider import DefaultJSONProvider
from flask_cors import CORS
from celery import Celery
from bson import ObjectId
from datetime import datetime

from config import Config
from .common.errors import handle_exception

logger = logging.getLogger(__name__)


# Custom JSON Provider to handle MongoDB ObjectId and datetime (Flask 3.x)
class MongoJSONProvider(DefaultJSONProvider):
    def default(self, obj):
        if isinstance(obj, ObjectId):
            return str(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        return super().default(obj)


celery = Celery(__name__, broker=Config.CELERY_BROKER_URL)


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Setup logging (console + file)
    from .common.logging_config import setup_logging
    setup_logging(app)

    # Set custom JSON provider to handle MongoDB ObjectId (Flask 3.x)
    app.json = MongoJSONProvider(app)

    CORS(app, resources={r"/api/*": {
        "origins": "*",
        "methods": ["GET", "OPTIONS"],
        "allow_headers": "*"
    }})

    # Initialize MongoDB connection and create indexes
    if app.config.get("MONGODB_INIT_ON_STARTUP", True):
        from .core.clients.mongodb_client import get_mongodb_client
        try:
            mongodb_client = get_mongodb_client()
            if mongodb_client.is_healthy():
                logger.info("[INIT] MongoDB initialized successfully")
                mongodb_client.create_indexes()
                logger.info("[INIT] MongoDB indexes created/verified")
            else:
                logger.warning("[INIT] MongoDB connection not healthy")
        except Exception as e:
            logger.warning(f"[INIT] MongoDB initialization failed: {str(e)}")
            logger.warning("[INIT] Sync requests will fail until MongoDB is reachable")

    celery.conf.update(
        broker_url=app.config.get("CELERY_BROKER_URL"),
        timezone="Asia/Taipei",
    )

    from .config.di_setup import init_di
    init_di()

    from .controller.cron import init_app as cron_api_init
    cron_api = cron_api_init()
    app.register_blueprint(cron_api)

    from .controller.health import init_app as health_api_init
    health_api = health_api_init()
    app.register_blueprint(health_api)

    app.register_error_handler(Exception, handle_exception)

    return app
