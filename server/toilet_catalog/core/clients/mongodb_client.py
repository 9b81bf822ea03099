"""
MongoDB Client - Singleton Pattern
===================================

Purpose:
- Provides a single MongoDB connection instance across the application
- Handles connection pooling and error handling
- Creates the toilet catalog indexes

Usage:
    from toilet_catalog.core.clients.mongodb_client import get_mongodb_client

    client = get_mongodb_client()
    collection = client.get_collection("seven_eleven_toilets")
    store = collection.find_one({"poi_id": "123456"})
"""

from typing import Optional
from pymongo import ASCENDING, GEOSPHERE, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import (
    ConnectionFailure,
    ServerSelectionTimeoutError,
    ConfigurationError
)
import logging

from config import Config

logger = logging.getLogger(__name__)


class MongoDBClient:
    """
    Singleton MongoDB client for application-wide use.

    Features:
    - Connection pooling (configurable via env vars)
    - Automatic reconnection on failure
    - Health checking
    """

    _instance: Optional['MongoDBClient'] = None
    _client: Optional[MongoClient] = None
    _db: Optional[Database] = None

    def __new__(cls):
        """Ensure only one instance exists (Singleton pattern)."""
        if cls._instance is None:
            cls._instance = super(MongoDBClient, cls).__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize MongoDB client on first instantiation."""
        if self._client is None:
            self._connect()

    def _connect(self):
        """
        Establish MongoDB connection with configuration from Config.

        Environment Variables:
        - MONGODB_URI: Full connection string
        - MONGODB_DB_NAME: Database name
        - MONGODB_MAX_POOL_SIZE / MONGODB_MIN_POOL_SIZE: Pool bounds
        - MONGODB_SERVER_SELECTION_TIMEOUT_MS / MONGODB_CONNECT_TIMEOUT_MS
        """
        try:
            mongodb_uri = Config.MONGODB_URI
            db_name = Config.MONGODB_DB_NAME

            # Mask credentials for logging
            masked_uri = mongodb_uri.split('@')[-1] if '@' in mongodb_uri else mongodb_uri
            logger.info(f"[MONGODB] Connecting to MongoDB: {masked_uri}")

            self._client = MongoClient(
                mongodb_uri,
                maxPoolSize=Config.MONGODB_MAX_POOL_SIZE,
                minPoolSize=Config.MONGODB_MIN_POOL_SIZE,
                serverSelectionTimeoutMS=Config.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
                connectTimeoutMS=Config.MONGODB_CONNECT_TIMEOUT_MS,
                retryWrites=True,
                retryReads=True
            )

            self._db = self._client[db_name]

            self._client.admin.command('ping')

            logger.info(f"[MONGODB] Connected successfully to database: {db_name}")

        except ConnectionFailure as e:
            logger.error(f"[MONGODB] Connection failed: {e}")
            self._client = None
            self._db = None
            raise

        except ServerSelectionTimeoutError as e:
            logger.error(f"[MONGODB] Server selection timeout: {e}")
            logger.error("   Check if MongoDB is running and accessible")
            self._client = None
            self._db = None
            raise

        except ConfigurationError as e:
            logger.error(f"[MONGODB] Configuration error: {e}")
            self._client = None
            self._db = None
            raise

    def get_database(self) -> Optional[Database]:
        """
        Get MongoDB database instance.

        Returns:
            Database instance if connected, None otherwise
        """
        if self._db is None:
            logger.warning("[MONGODB] Database not available, attempting reconnect...")
            try:
                self._connect()
            except Exception as e:
                logger.error(f"[MONGODB] Reconnection failed: {e}")
                return None

        return self._db

    def is_healthy(self) -> bool:
        """Ping the server; False on any failure."""
        if self._client is None or self._db is None:
            return False

        try:
            self._client.admin.command('ping')
            return True
        except Exception as e:
            logger.warning(f"[MONGODB] Health check failed: {e}")
            return False

    def close(self):
        """Close MongoDB connection on application shutdown."""
        if self._client:
            logger.info("[MONGODB] Closing MongoDB connection...")
            self._client.close()
            self._client = None
            self._db = None
            logger.info("[MONGODB] MongoDB connection closed")

    def get_collection(self, collection_name: str) -> Optional[Collection]:
        """
        Get a specific collection from the database.

        Returns:
            Collection instance if connected, None otherwise
        """
        db = self.get_database()
        if db is None:
            return None

        return db[collection_name]

    def create_indexes(self):
        """
        Create indexes for the toilet catalog.

        - poi_id (unique): upsert key, makes overlapping runs converge
        - location (2dsphere): radius queries of the nearby-toilet lookup
        - city + district: per-region listing
        - updated_at: stale-entry reporting
        """
        db = self.get_database()
        if db is None:
            logger.error("[MONGODB] Cannot create indexes: Database not available")
            return

        collection = db[Config.TOILET_COLLECTION]
        collection.create_index("poi_id", unique=True, name="idx_poi_id")
        collection.create_index([("location", GEOSPHERE)], name="idx_location_2dsphere")
        collection.create_index([("city", ASCENDING), ("district", ASCENDING)], name="idx_city_district")
        collection.create_index("updated_at", name="idx_updated_at")
        logger.info(f"[MONGODB] Created indexes for {Config.TOILET_COLLECTION}: poi_id, location, city+district, updated_at")


# Singleton instance
_mongodb_client_instance: Optional[MongoDBClient] = None


def get_mongodb_client() -> MongoDBClient:
    """Get the singleton MongoDB client instance."""
    global _mongodb_client_instance

    if _mongodb_client_instance is None:
        _mongodb_client_instance = MongoDBClient()

    return _mongodb_client_instance


def close_mongodb_connection():
    """Close MongoDB connection on application shutdown."""
    global _mongodb_client_instance

    if _mongodb_client_instance:
        _mongodb_client_instance.close()
        _mongodb_client_instance = None
