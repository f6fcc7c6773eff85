"""Countdown Timer Generator Component.

Builds the countdown images served to email clients:
    - a static PNG showing the time left at the instant of the request
    - a looping animated GIF that ticks down one second per frame

Dependencies:
    - Pillow (PIL)
    - pytz
"""

import logging
import time
from datetime import datetime, timedelta
from io import BytesIO
from typing import Callable, Optional

import pytz

from src.components.countdown_frame_renderer import render_frame
from src.components.countdown_surface import PillowSurface
from src.components.countdown_time_source import CountdownClock

logger = logging.getLogger(__name__)

# GIF encoding: one frame per simulated second, loop forever
FRAME_DURATION_MS = 1000
GIF_LOOP_FOREVER = 0
# Palette size per frame; the frames are mostly flat black-on-white so 64 colors
# keeps anti-aliased glyph edges while staying small
GIF_PALETTE_COLORS = 64


def utc_now() -> datetime:
    return datetime.now(pytz.utc)


class CountdownImageGenerator:
    """Renders countdown frames into PNG and GIF byte buffers."""

    def __init__(
        self,
        clock: CountdownClock,
        title: str,
        font_path: Optional[str] = None,
        now_func: Callable[[], datetime] = utc_now,
    ):
        self.clock = clock
        self.title = title
        self.font_path = font_path
        self.now_func = now_func

    def build_image(self, width: int, height: int, now: Optional[datetime] = None) -> bytes:
        """Render a single frame for ``now`` (default: wall clock) as PNG bytes.

        Never cached: every request shows the instant it was made.
        """
        now = now or self.now_func()
        remaining = self.clock.remaining(now)
        logger.debug(f"Rendering {width}x{height} PNG at {now.isoformat()} ({remaining.total_seconds}s left)")

        surface = PillowSurface(width, height, font_path=self.font_path)
        render_frame(surface, width, height, remaining, self.title)

        img_buffer = BytesIO()
        surface.image.save(img_buffer, format='PNG')
        return img_buffer.getvalue()

    def build_animation(self, width: int, height: int, duration_seconds: int, now: Optional[datetime] = None) -> bytes:
        """Render ``duration_seconds`` one-second-apart frames as a looping GIF.

        Frame i shows the remaining time at ``start + i`` seconds, where start
        is ``now`` truncated to the whole second. Identical consecutive frames
        (an elapsed deadline) are merged by the encoder into one longer frame,
        so the total duration stays ``duration_seconds`` seconds.

        Args:
            width: Frame width in pixels
            height: Frame height in pixels
            duration_seconds: Number of frames to render
            now: Freeze instant; defaults to the wall clock

        Returns:
            bytes: Encoded animated GIF
        """
        if duration_seconds < 1:
            raise ValueError(f"duration_seconds must be positive, got {duration_seconds}")

        start = (now or self.now_func()).replace(microsecond=0)
        started = time.perf_counter()
        logger.debug(f"Generating {duration_seconds} frames at {width}x{height} from {start.isoformat()}...")

        surface = PillowSurface(width, height, font_path=self.font_path)
        frames = []
        for i in range(duration_seconds):
            remaining = self.clock.remaining(start + timedelta(seconds=i))
            render_frame(surface, width, height, remaining, self.title)
            frames.append(surface.image.quantize(colors=GIF_PALETTE_COLORS))

        img_buffer = BytesIO()
        frames[0].save(
            img_buffer,
            format='GIF',
            save_all=True,
            append_images=frames[1:],
            duration=FRAME_DURATION_MS,
            loop=GIF_LOOP_FOREVER,
            optimize=False,
        )
        payload = img_buffer.getvalue()

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"Generated countdown GIF: {len(frames)} frames, {len(payload)} bytes, {elapsed_ms:.0f} ms")
        return payload
