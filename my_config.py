import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Non-sensitive config lives in a project-root .env; real environment variables win.
ROOT_DIR = Path(__file__).parent

env_file = ROOT_DIR / '.env'
if env_file.exists():
    load_dotenv(env_file)

DEFAULT_TARGET_ISO = "2026-01-31T10:30:00+02:00"
DEFAULT_TITLE = "TIME TO NEXT AUCTION"


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, falling back to the default on junk."""
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}, using {default}")
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def get_config():
    return Config(
        web_server_port=_env_int("PORT", 3000),
        web_server_debug_mode_on=_env_bool("WEB_SERVER_DEBUG_MODE_ON"),
        web_server_threads=_env_int("WEB_SERVER_THREADS", 8),
        target_iso=os.environ.get("TARGET_ISO") or DEFAULT_TARGET_ISO,
        default_timezone=os.environ.get("DEFAULT_TIMEZONE") or "Africa/Johannesburg",
        countdown_title=os.environ.get("COUNTDOWN_TITLE") or DEFAULT_TITLE,
        animation_cache_ttl_seconds=_env_int("ANIMATION_CACHE_TTL_SECONDS", 10),
        animation_cache_max_entries=_env_int("ANIMATION_CACHE_MAX_ENTRIES", 256),
        log_dir=os.environ.get("LOG_DIR") or "logs",
        font_path=os.environ.get("COUNTDOWN_FONT_PATH"),
    )


@dataclass
class Config:
    """Configuration settings for the countdown image server."""
    web_server_port: int = 3000
    web_server_debug_mode_on: bool = False
    web_server_threads: int = 8
    target_iso: str = DEFAULT_TARGET_ISO
    default_timezone: str = "Africa/Johannesburg"
    countdown_title: str = DEFAULT_TITLE
    animation_cache_ttl_seconds: int = 10
    animation_cache_max_entries: int = 256
    log_dir: str = "logs"
    font_path: Optional[str] = None
