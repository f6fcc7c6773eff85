"""Countdown Timer Handler for the image endpoints."""

import logging
import re
from typing import Mapping, Optional

from src.components.countdown_timer_generator import CountdownImageGenerator
from src.components.render_coordinator import (
    DURATION_DEFAULT,
    HEIGHT_DEFAULT,
    WIDTH_DEFAULT,
    RenderCoordinator,
    RenderRequest,
)

logger = logging.getLogger(__name__)

# Email clients and proxies must never reuse a countdown image
NO_CACHE_HEADERS = {
    'Cache-Control': 'no-store, no-cache, must-revalidate, proxy-revalidate, max-age=0',
    'Pragma': 'no-cache',
    'Expires': '0',
    'Surrogate-Control': 'no-store',
}

# Optional sign then ASCII digits; anything after the digits is ignored
_LEADING_INT = re.compile(r'\s*([+-]?)([0-9]+)')

# Longer values are far outside every clamp range
MAX_PARAM_DIGITS = 6


def parse_int_arg(args: Mapping[str, str], name: str, default: int) -> int:
    """Read an integer query parameter, falling back to the default.

    Accepts leading digits the way a lenient parser would ("640px" -> 640).
    """
    raw: Optional[str] = args.get(name)
    if raw is None:
        return default

    match = _LEADING_INT.match(raw)
    if match is None:
        logger.debug(f"Ignoring non-numeric {name}={raw!r}, using {default}")
        return default

    sign, digits = match.groups()
    if len(digits) > MAX_PARAM_DIGITS:
        digits = '9' * MAX_PARAM_DIGITS
    value = int(digits)
    return -value if sign == '-' else value


def image_request_from_args(args: Mapping[str, str]) -> RenderRequest:
    return RenderRequest.static(
        width=parse_int_arg(args, 'w', WIDTH_DEFAULT),
        height=parse_int_arg(args, 'h', HEIGHT_DEFAULT),
    )


def animation_request_from_args(args: Mapping[str, str]) -> RenderRequest:
    return RenderRequest.animation(
        width=parse_int_arg(args, 'w', WIDTH_DEFAULT),
        height=parse_int_arg(args, 'h', HEIGHT_DEFAULT),
        duration_seconds=parse_int_arg(args, 's', DURATION_DEFAULT),
    )


def generate_countdown_image(generator: CountdownImageGenerator, request: RenderRequest) -> bytes:
    """Render a fresh PNG for every request; static images are never cached."""
    logger.debug(f"Generating countdown PNG {request.width}x{request.height}")
    return generator.build_image(request.width, request.height)


def generate_countdown_animation(coordinator: RenderCoordinator, request: RenderRequest) -> bytes:
    """Fetch the looping GIF through the render cache.

    Raises:
        Exception: If the (possibly shared) build failed
    """
    logger.debug(f"Requesting countdown GIF {request.cache_key}")
    return coordinator.get_or_build_animation(request)
