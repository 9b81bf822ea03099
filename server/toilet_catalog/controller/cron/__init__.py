"""
Cron Controller Package
Flask Blueprint for the catalog sync trigger
"""

from flask import Blueprint


def init_app():
    """Initialize Cron controller."""
    from .cron_controller import CronController
    cron_bp = Blueprint("cron", __name__, url_prefix="/api/cron")
    CronController(cron_bp)
    return cron_bp
