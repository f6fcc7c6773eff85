#!/usr/bin/python3

# Standard library imports
import atexit
import errno
import logging
import os
import signal
import sys
from datetime import datetime
from typing import Optional

_CURRENT_DIR = os.path.dirname(__file__)
_PROJECT_ROOT = os.path.abspath(os.path.join(_CURRENT_DIR, '..'))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

# Third-party imports
import pytz
from flask import Flask

# Local imports
from my_config import Config, get_config
from src.components.countdown_timer_generator import CountdownImageGenerator
from src.components.render_coordinator import RenderCoordinator
from src.utils.logging_utils import setup_logging
from web.config import EXTENSION_KEY, build_resources
from web.routes import register_all_blueprints

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[Config] = None,
    generator: Optional[CountdownImageGenerator] = None,
    coordinator: Optional[RenderCoordinator] = None,
) -> Flask:
    """Build the Flask app with its own clock, generator and render cache.

    Raises:
        ValueError: If the configured target deadline cannot be parsed
    """
    resources = build_resources(config, generator=generator, coordinator=coordinator)

    app = Flask(__name__)
    app.extensions[EXTENSION_KEY] = resources
    app.config['SERVER_START_TIME'] = datetime.now(pytz.utc)
    register_all_blueprints(app)

    logger.info(f"Countdown target: {resources.clock.target.isoformat()}")
    return app


def _shutdown_handler():
    """Log shutdown marker before exit"""
    logger.warning("=" * 100)
    logger.warning(f"🛑 WEB SERVER STOPPED - {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    logger.warning("=" * 100)


def _handle_signal(signum, frame):
    # Exit normally so the atexit marker is written once
    sys.exit(0)


def main():
    """Entry point for launching the web server."""
    config = get_config()

    setup_logging(
        app_name='web_server',
        log_level=logging.INFO,
        log_dir=config.log_dir,
    )
    logging.getLogger('werkzeug').setLevel(logging.WARNING)
    logging.getLogger('waitress').setLevel(logging.WARNING)

    logger.warning("=" * 100)
    logger.warning(f"🚀 WEB SERVER STARTED - {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    logger.warning("=" * 100)

    # Register shutdown handlers for graceful logging
    atexit.register(_shutdown_handler)
    signal.signal(signal.SIGTERM, _handle_signal)
    signal.signal(signal.SIGINT, _handle_signal)

    app = create_app(config)

    host = '0.0.0.0'
    port = config.web_server_port
    logger.info(f"Countdown image server running on port {port}")
    print(f"Attempting to start web server on http://{host}:{port}")

    if config.web_server_debug_mode_on:
        print("Using Flask dev server with auto-reload (debug mode)")
        try:
            app.run(debug=True, host=host, port=port, threaded=True, use_reloader=True)
        except OSError as exc:
            _handle_port_error(exc, port)
    else:
        from waitress import serve
        print("Using Waitress WSGI server for production deployment")
        try:
            serve(app, host=host, port=port, threads=config.web_server_threads, channel_timeout=120)
        except OSError as exc:
            _handle_port_error(exc, port)


def _handle_port_error(exc: OSError, port: int):
    """Log what to do about a port that could not be bound, then re-raise."""
    if exc.errno == errno.EACCES:
        logger.error(f"Port {port} requires elevated privileges; set PORT in .env to a port above 1023")
    elif exc.errno == errno.EADDRINUSE:
        logger.error(f"Port {port} is already in use; find the owner with: lsof -i :{port}")
    else:
        logger.error(f"Could not start web server on port {port}: {exc}")
    raise exc


if __name__ == "__main__":
    main()
