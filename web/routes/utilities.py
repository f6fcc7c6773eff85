"""Utility routes: liveness marker and health probe."""

from datetime import datetime

import pytz
from flask import Blueprint, jsonify, request, current_app

from src.components.web import health_handler
from web.config import EXTENSION_KEY

utilities_bp = Blueprint('utilities', __name__)


@utilities_bp.route("/")
def index():
    """Plain text liveness marker."""
    return health_handler.LIVENESS_MESSAGE, 200, {'Content-Type': 'text/plain; charset=utf-8'}


@utilities_bp.route("/healthz")
def healthz():
    """Lightweight health probe endpoint for load balancers / monitoring."""
    resources = current_app.extensions[EXTENSION_KEY]
    try:
        server_start_time = current_app.config.get('SERVER_START_TIME') or datetime.now(pytz.utc)
        health = health_handler.get_server_health(
            resources.clock,
            resources.coordinator,
            server_start_time,
            resources.config.web_server_port,
            request.environ
        )
        return jsonify(health), 200
    except Exception as exc:
        current_app.logger.error(f"Health check failed: {exc}", exc_info=True)
        return jsonify({"status": "error", "error": str(exc)}), 500
