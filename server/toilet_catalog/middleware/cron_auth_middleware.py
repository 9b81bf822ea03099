"""
Cron Trigger Authorization Middleware
=====================================

Purpose:
- Protect the sync trigger endpoints with @cron_authorized

A request is authorized when any of these holds:
1. the app is not running in production
2. ?key= matches the manual sync key
3. Authorization: Bearer <CRON_SECRET>

Outside production unauthorized requests are let through and logged.
"""

from functools import wraps
import hmac
import logging

from flask import current_app, request, jsonify

logger = logging.getLogger(__name__)


def _build_unauthorized_response():
    """Helper to build standardized unauthorized response."""
    return jsonify({
        "success": False,
        "error": "Unauthorized",
        "resultCode": "UNAUTHORIZED"
    }), 401


def _matches(candidate, expected):
    if not candidate or not expected:
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


def is_production():
    return str(current_app.config.get("APP_ENV", "")).lower() == "production"


def has_manual_key():
    return _matches(request.args.get("key"), current_app.config.get("MANUAL_SYNC_KEY"))


def has_cron_secret():
    secret = current_app.config.get("CRON_SECRET")
    if not secret:
        return False
    return _matches(request.headers.get("Authorization"), f"Bearer {secret}")


def cron_authorized(f):
    """
    Decorator to require cron credentials in production.

    Usage:
        @cron_authorized
        def sync_endpoint():
            ...
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if has_manual_key() or has_cron_secret():
            return f(*args, **kwargs)

        if is_production():
            logger.warning(f"[CRON] Rejected unauthorized sync request from {request.remote_addr}")
            return _build_unauthorized_response()

        logger.info("[CRON] Unauthenticated sync request allowed outside production")
        return f(*args, **kwargs)

    return decorated_function
