"""Web server configuration and shared resources."""

import logging
from dataclasses import dataclass
from typing import Optional

from my_config import Config, get_config
from src.components.countdown_time_source import CountdownClock, parse_deadline
from src.components.countdown_timer_generator import CountdownImageGenerator
from src.components.render_coordinator import RenderCoordinator, RenderRequest

logger = logging.getLogger(__name__)

# Flask app.extensions key for the objects below
EXTENSION_KEY = 'countdown'


@dataclass
class CountdownResources:
    """Process-lifetime objects shared by all request handlers."""

    config: Config
    clock: CountdownClock
    generator: CountdownImageGenerator
    coordinator: RenderCoordinator


def build_resources(
    config: Optional[Config] = None,
    generator: Optional[CountdownImageGenerator] = None,
    coordinator: Optional[RenderCoordinator] = None,
) -> CountdownResources:
    """Create the clock, image generator and render coordinator for one app.

    Raises:
        ValueError: If the configured target deadline cannot be parsed
    """
    config = config or get_config()
    clock = CountdownClock(parse_deadline(config.target_iso, config.default_timezone))

    if generator is None:
        generator = CountdownImageGenerator(clock, config.countdown_title, font_path=config.font_path)

    if coordinator is None:
        def build_animation(request: RenderRequest) -> bytes:
            return generator.build_animation(request.width, request.height, request.duration_seconds)

        coordinator = RenderCoordinator(
            build_animation,
            ttl_seconds=config.animation_cache_ttl_seconds,
            max_entries=config.animation_cache_max_entries,
        )

    return CountdownResources(config=config, clock=clock, generator=generator, coordinator=coordinator)
