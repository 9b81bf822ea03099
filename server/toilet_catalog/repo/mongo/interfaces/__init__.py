"""
MongoDB Repository Interfaces Package
"""

from .toilet_store_repository_interface import ToiletStoreRepositoryInterface

__all__ = [
    'ToiletStoreRepositoryInterface'
]
