"""
Core Module
============

Infrastructure components for the application:
- clients/: Database client connections (MongoDB)
- di_container: Dependency injection container

Usage:
    from toilet_catalog.core.clients.mongodb_client import get_mongodb_client
    from toilet_catalog.core import DIContainer
"""

from .di_container import DIContainer
