import logging
import os
import sys
import time
from functools import wraps
from logging.handlers import RotatingFileHandler

from flask import request

# Setup logger for this module
logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(filename)s:%(lineno)d - %(levelname)s - %(message)s'


class ColoredFormatter(logging.Formatter):
    """Custom formatter to add colors to console output"""

    def format(self, record):
        # Get the original formatted message without colors first
        log_message = super().format(record)

        # Only colorize WARNING and ERROR levels, leave INFO as default
        if record.levelname == 'WARNING':
            return f"\033[33m{log_message}\033[0m"  # Yellow
        elif record.levelname == 'ERROR':
            return f"\033[31m{log_message}\033[0m"  # Red
        elif record.levelname == 'CRITICAL':
            return f"\033[35m{log_message}\033[0m"  # Magenta
        else:
            return log_message


def setup_logging(
        app_name: str,
        log_level=logging.INFO,
        log_dir: str = 'logs',
        info_modules: list[str] = None,
        console: bool = True
):
    """
    Configure standardized logging with rotation.

    Sets up:
    - Rotating file handler (10MB max per file, 5 backups)
    - Console handler with colored output (optional)
    - Local timezone formatting

    Args:
        app_name: Name used for the log file (e.g., 'web_server')
        log_level: Logging level for root logger (default: logging.INFO)
        log_dir: Directory for log files (default: 'logs')
        info_modules: List of module names to set to INFO level (useful when root is WARNING)
        console: Also log to stderr with colors

    Returns:
        logging.Logger: Root logger instance (configured)
    """
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, f'{app_name}.log')

    # Create rotating file handler (10MB max, 5 backups = ~50MB total)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5
    )
    file_handler.setLevel(log_level if log_level != logging.WARNING else logging.INFO)
    file_formatter = logging.Formatter(LOG_FORMAT)
    file_formatter.converter = time.localtime  # Use local timezone instead of UTC
    file_handler.setFormatter(file_formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Clear any existing handlers (force=True equivalent)
    root_logger.handlers.clear()
    root_logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(ColoredFormatter(LOG_FORMAT))
        root_logger.addHandler(console_handler)

    # Set specific modules to INFO level if provided
    if info_modules:
        for module_name in info_modules:
            logging.getLogger(module_name).setLevel(logging.INFO)

    return logging.getLogger()


def log_web_activity(func):
    """
    Decorator for logging web activity: method, path, query, status and timing.

    Never breaks the request because of a logging failure.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        started = time.perf_counter()
        response = func(*args, **kwargs)

        try:
            status = getattr(response, 'status_code', None)
            if status is None and isinstance(response, tuple) and len(response) > 1:
                status = response[1]
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                f"{request.remote_addr} {request.method} {request.path}"
                f"{'?' + request.query_string.decode('latin-1') if request.query_string else ''}"
                f" -> {status or 200} ({elapsed_ms:.0f} ms)"
            )
        except Exception as e:
            logger.error(f"❌ Unexpected error logging web activity: {e}", exc_info=True)

        return response

    return wrapper
