"""
Database Clients Module
=======================

Provides singleton client connections for:
- MongoDB (toilet catalog)
"""

from .mongodb_client import MongoDBClient, get_mongodb_client, close_mongodb_connection

__all__ = [
    'MongoDBClient',
    'get_mongodb_client',
    'close_mongodb_connection'
]
