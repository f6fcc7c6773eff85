"""Health Check Handler for the countdown image server."""

import logging
import os
from datetime import datetime
from typing import Dict, Any

import pytz

from src.components.countdown_time_source import CountdownClock
from src.components.render_coordinator import RenderCoordinator

logger = logging.getLogger(__name__)

LIVENESS_MESSAGE = "OK - countdown image server running"


def get_server_health(
    clock: CountdownClock,
    coordinator: RenderCoordinator,
    server_start_time: datetime,
    web_server_port: int,
    request_environ: Dict[str, Any] = None
) -> Dict[str, Any]:
    """Lightweight health probe payload for load balancers / monitoring.

    Args:
        clock: Countdown clock holding the target deadline
        coordinator: Render coordinator whose cache stats are reported
        server_start_time: When the server started (timezone-aware)
        web_server_port: Web server port
        request_environ: Optional WSGI request environment

    Returns:
        Dictionary with health status information
    """
    logger.debug("Performing health check")

    current_time = datetime.now(pytz.utc)
    uptime_seconds = int((current_time - server_start_time).total_seconds())
    uptime_hours = uptime_seconds // 3600
    uptime_minutes = (uptime_seconds % 3600) // 60

    server_info = {
        'server_type': 'unknown',
        'server_software': 'unknown',
        'port': web_server_port,
        'pid': os.getpid(),
    }
    if request_environ:
        server_software = request_environ.get('SERVER_SOFTWARE', 'unknown')
        server_port = request_environ.get('SERVER_PORT')
        server_info.update({
            'server_type': _detect_server_type(server_software),
            'server_software': server_software,
            'port': int(server_port) if server_port else web_server_port,
        })

    remaining = clock.remaining(current_time)

    return {
        'status': 'ok',
        'timestamp': current_time.strftime('%Y-%m-%d %H:%M:%S %Z'),
        'start_time': server_start_time.strftime('%Y-%m-%d %H:%M:%S %Z'),
        'uptime': f"{uptime_hours}h {uptime_minutes}m",
        'uptime_seconds': uptime_seconds,
        'target': clock.target.isoformat(),
        'remaining_seconds': remaining.total_seconds,
        'is_elapsed': remaining.is_elapsed,
        'render_cache': coordinator.stats(),
        'server': server_info,
    }


def _detect_server_type(server_software: str) -> str:
    server_software_lower = (server_software or '').lower()
    if 'waitress' in server_software_lower:
        return 'waitress'
    if 'gunicorn' in server_software_lower:
        return 'gunicorn'
    if 'werkzeug' in server_software_lower:
        return 'flask-dev'
    return 'unknown'
