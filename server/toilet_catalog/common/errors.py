"""Application-wide error handler."""
import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

from .exceptions import CatalogSyncError

logger = logging.getLogger(__name__)


def handle_exception(e):
    """Turn any uncaught exception into a JSON response."""
    if isinstance(e, HTTPException):
        return jsonify({
            "success": False,
            "error": e.description,
            "resultCode": e.name.upper().replace(" ", "_")
        }), e.code

    logger.error(f"[ERROR] Unhandled exception: {e}", exc_info=True)

    body = {"success": False, "error": str(e), "resultCode": "INTERNAL_ERROR"}
    if isinstance(e, CatalogSyncError):
        body["resultCode"] = e.code
        body["details"] = e.details
    return jsonify(body), 500
