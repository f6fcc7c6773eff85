# /tests/conftest.py
"""Shared fixtures for countdown image server tests"""

from datetime import datetime, timedelta

import pytest
import pytz

from my_config import Config
from src.components.countdown_surface import DrawingSurface
from src.components.countdown_time_source import CountdownClock

TARGET = datetime(2026, 1, 31, 8, 30, 0, tzinfo=pytz.utc)  # 10:30 SAST
TARGET_ISO = "2026-01-31T10:30:00+02:00"


class RecordingSurface(DrawingSurface):
    """DrawingSurface that records every call instead of drawing"""

    def __init__(self):
        self.calls = []

    def _record(self, name, *args):
        self.calls.append((name,) + args)

    def set_fill_style(self, color):
        self._record('set_fill_style', color)

    def set_stroke_style(self, color):
        self._record('set_stroke_style', color)

    def set_line_width(self, width):
        self._record('set_line_width', width)

    def set_font(self, size_px):
        self._record('set_font', size_px)

    def set_align(self, align):
        self._record('set_align', align)

    def set_baseline(self, baseline):
        self._record('set_baseline', baseline)

    def fill_rect(self, x, y, width, height):
        self._record('fill_rect', x, y, width, height)

    def stroke_rect(self, x, y, width, height):
        self._record('stroke_rect', x, y, width, height)

    def stroke_line(self, x0, y0, x1, y1):
        self._record('stroke_line', x0, y0, x1, y1)

    def draw_text(self, text, x, y):
        self._record('draw_text', text, x, y)

    def texts(self):
        return [call[1] for call in self.calls if call[0] == 'draw_text']


@pytest.fixture
def target():
    return TARGET


@pytest.fixture
def clock():
    return CountdownClock(TARGET)


@pytest.fixture
def one_second_before():
    return TARGET - timedelta(seconds=1)


@pytest.fixture
def recording_surface():
    return RecordingSurface()


@pytest.fixture
def test_config(tmp_path):
    return Config(
        web_server_port=3000,
        target_iso=TARGET_ISO,
        countdown_title="TIME TO NEXT AUCTION",
        animation_cache_ttl_seconds=30,
        animation_cache_max_entries=16,
        log_dir=str(tmp_path / 'logs'),
    )


@pytest.fixture
def recording_surface_factory():
    return RecordingSurface
