"""
Response helper functions.

Builders for the JSON envelopes returned by the cron endpoints:

    success: {success, message, resultCode, timestamp, duration, results}
    error:   {success, error, resultCode, ...details}
"""
import time
from datetime import datetime, timezone

from flask import jsonify


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_duration(started_at: float) -> str:
    """Seconds elapsed since a time.monotonic() reading, e.g. "1.23s"."""
    return f"{time.monotonic() - started_at:.2f}s"


def build_error_response(error, result_code, status_code=400, data=None):
    """
    Build standardized error response.

    Args:
        error: Error message
        result_code: Application result code
        status_code: HTTP status code (default 400)
        data: Optional dict merged into the body

    Returns:
        tuple: (json_response, status_code)

    Example:
        return build_error_response(
            "Unknown district id",
            "INVALID_DISTRICT",
            400,
            data={"validIds": registry.valid_ids()}
        )
    """
    body = {
        "success": False,
        "error": error,
        "resultCode": result_code
    }
    if data:
        body.update(data)
    return jsonify(body), status_code


def build_success_response(message, result_code, results=None, started_at=None, status_code=200):
    """
    Build standardized success response.

    Args:
        message: Human-readable summary
        result_code: Application result code
        results: Payload placed under "results"
        started_at: time.monotonic() reading taken when the request began
        status_code: HTTP status code (default 200)

    Returns:
        tuple: (json_response, status_code)
    """
    body = {
        "success": True,
        "message": message,
        "resultCode": result_code,
        "timestamp": utc_timestamp(),
    }
    if started_at is not None:
        body["duration"] = format_duration(started_at)
    if results is not None:
        body["results"] = results
    return jsonify(body), status_code
