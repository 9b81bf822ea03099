"""
Middleware package for Flask request/response interceptors.
"""

from .cron_auth_middleware import cron_authorized

__all__ = [
    'cron_authorized'
]
