# /tests/test_countdown_frame_renderer.py
"""
Unit tests for the countdown frame renderer

Uses a recording surface to check the drawing commands, and the Pillow
surface to check that a reused surface yields identical pixels.
"""

import pytest

from src.components.countdown_frame_renderer import LABELS, frame_layout, render_frame
from src.components.countdown_surface import PillowSurface
from src.components.countdown_time_source import RemainingTime

TITLE = "TIME TO NEXT AUCTION"


class TestFrameLayout:
    """Test cases for proportional layout"""

    def test_default_size_geometry(self):
        layout = frame_layout(640, 200)

        assert layout.border == 3
        assert layout.padding_x == 26
        assert layout.title_height == 70
        assert layout.title_font_size == 24
        assert layout.digits_top == 90
        assert layout.digits_area_height == 80
        assert layout.digit_font_size == 52
        assert layout.label_font_size == 13
        assert layout.column_width == pytest.approx((640 - 52) / 4)

    def test_border_has_minimum(self):
        assert frame_layout(320, 140).border == 2

    def test_columns_are_equal_width_and_inside_padding(self):
        layout = frame_layout(1200, 600)
        centers = layout.column_centers()

        assert len(centers) == 4
        gaps = [b - a for a, b in zip(centers, centers[1:])]
        assert gaps == pytest.approx([layout.column_width] * 3)
        assert centers[0] - layout.column_width / 2 == pytest.approx(layout.padding_x)
        assert centers[-1] + layout.column_width / 2 == pytest.approx(1200 - layout.padding_x)


class TestRenderFrame:
    """Test cases for render_frame drawing commands"""

    def test_draws_title_digits_and_labels(self, recording_surface):
        remaining = RemainingTime(days=1, hours=2, minutes=3, seconds=4)
        render_frame(recording_surface, 640, 200, remaining, TITLE)

        assert recording_surface.texts() == [TITLE, "01", "02", "03", "04", *LABELS]

    def test_background_fills_whole_canvas_first(self, recording_surface):
        render_frame(recording_surface, 640, 200, RemainingTime(0, 0, 0, 5), TITLE)

        fill_index = recording_surface.calls.index(('fill_rect', 0, 0, 640, 200))
        assert ('set_fill_style', '#ffffff') in recording_surface.calls[:fill_index]

    def test_elapsed_renders_all_zero_digits(self, recording_surface):
        elapsed = RemainingTime(0, 0, 0, 0, is_elapsed=True)
        render_frame(recording_surface, 640, 200, elapsed, TITLE)

        assert recording_surface.texts()[1:5] == ["00", "00", "00", "00"]
        assert len(recording_surface.texts()) == 9

    def test_same_input_same_commands(self, recording_surface_factory):
        remaining = RemainingTime(0, 5, 6, 7)
        first, second = recording_surface_factory(), recording_surface_factory()

        render_frame(first, 800, 300, remaining, TITLE)
        render_frame(second, 800, 300, remaining, TITLE)

        assert first.calls == second.calls

    def test_styles_set_before_every_use(self, recording_surface):
        """Alignment, baseline and font are always set before text is drawn"""
        surface = recording_surface
        surface.set_align('left')
        surface.set_baseline('bottom')
        surface.set_font(99)
        surface.calls.clear()

        render_frame(surface, 640, 200, RemainingTime(0, 0, 0, 1), TITLE)

        first_text = next(i for i, call in enumerate(surface.calls) if call[0] == 'draw_text')
        names_before = {call[0] for call in surface.calls[:first_text]}
        assert {'set_fill_style', 'set_align', 'set_baseline', 'set_font'} <= names_before

    def test_reused_pillow_surface_is_idempotent(self):
        """Redrawing a surface gives the same pixels as drawing a fresh one"""
        remaining = RemainingTime(0, 1, 2, 3)

        fresh = PillowSurface(320, 140)
        render_frame(fresh, 320, 140, remaining, TITLE)

        reused = PillowSurface(320, 140)
        render_frame(reused, 320, 140, RemainingTime(9, 9, 9, 9), TITLE)
        reused.set_align('right')
        reused.set_baseline('bottom')
        reused.set_fill_style('#ff0000')
        render_frame(reused, 320, 140, remaining, TITLE)

        assert fresh.image.tobytes() == reused.image.tobytes()


class TestPillowSurface:
    """Test cases for the Pillow drawing backend"""

    def test_fill_rect_covers_exact_area(self):
        surface = PillowSurface(10, 10)
        surface.set_fill_style('#000000')
        surface.fill_rect(2, 3, 4, 5)

        assert surface.image.getpixel((2, 3)) == (0, 0, 0)
        assert surface.image.getpixel((5, 7)) == (0, 0, 0)
        assert surface.image.getpixel((6, 7)) == (255, 255, 255)
        assert surface.image.getpixel((5, 8)) == (255, 255, 255)

    def test_unknown_align_rejected(self):
        surface = PillowSurface(10, 10)
        with pytest.raises(ValueError):
            surface.set_align('justify')

    def test_unknown_baseline_rejected(self):
        surface = PillowSurface(10, 10)
        with pytest.raises(ValueError):
            surface.set_baseline('sideways')
