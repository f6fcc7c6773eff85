"""Countdown Frame Renderer Component.

Draws one countdown frame (title band plus four digit columns) onto any
DrawingSurface. Every size is a fraction of the canvas, so arbitrary
requested dimensions keep the same look.
"""

from dataclasses import dataclass
from typing import Tuple

from src.components.countdown_surface import DrawingSurface
from src.components.countdown_time_source import RemainingTime

# Color scheme
COLOR_BACKGROUND = "#ffffff"
COLOR_BORDER = "#222222"
COLOR_TEXT = "#111111"

LABELS = ("DAYS", "HOURS", "MINUTES", "SECONDS")
COLUMN_COUNT = len(LABELS)


@dataclass(frozen=True)
class FrameLayout:
    """Pixel geometry of a frame, derived from width and height."""

    width: int
    height: int
    border: int
    padding_x: int
    title_height: int
    title_font_size: int
    title_y: float
    digits_top: int
    digits_area_height: int
    digit_font_size: int
    digit_baseline_y: int
    label_font_size: int
    label_top_y: int
    column_width: float

    def column_centers(self) -> Tuple[float, ...]:
        return tuple(self.padding_x + self.column_width * (i + 0.5) for i in range(COLUMN_COUNT))


def frame_layout(width: int, height: int) -> FrameLayout:
    border = max(2, round(width * 0.004))
    padding_x = round(width * 0.04)
    title_height = round(height * 0.35)

    digits_top = title_height + round(height * 0.10)
    digits_bottom = height - round(height * 0.15)
    digits_area_height = digits_bottom - digits_top

    return FrameLayout(
        width=width,
        height=height,
        border=border,
        padding_x=padding_x,
        title_height=title_height,
        title_font_size=round(height * 0.12),
        title_y=title_height / 2 + round(height * 0.02),
        digits_top=digits_top,
        digits_area_height=digits_area_height,
        digit_font_size=round(digits_area_height * 0.65),
        digit_baseline_y=digits_top + round(digits_area_height * 0.68),
        label_font_size=round(digits_area_height * 0.16),
        label_top_y=digits_top + round(digits_area_height * 0.80),
        column_width=(width - padding_x * 2) / COLUMN_COUNT,
    )


def render_frame(surface: DrawingSurface, width: int, height: int, remaining: RemainingTime, title: str) -> None:
    """Draw a complete frame showing ``remaining``.

    Sets every style it relies on before drawing, so a surface reused across
    animation frames produces the same pixels for the same input. An elapsed
    deadline simply shows all zeros.
    """
    layout = frame_layout(width, height)
    border = layout.border

    # Background
    surface.set_fill_style(COLOR_BACKGROUND)
    surface.fill_rect(0, 0, width, height)

    # Border
    surface.set_stroke_style(COLOR_BORDER)
    surface.set_line_width(border)
    surface.stroke_rect(border / 2, border / 2, width - border, height - border)

    # Divider under the title band
    surface.set_line_width(max(1, border - 1))
    surface.stroke_line(0, layout.title_height, width, layout.title_height)

    # Title
    surface.set_fill_style(COLOR_TEXT)
    surface.set_align('center')
    surface.set_baseline('middle')
    surface.set_font(layout.title_font_size)
    surface.draw_text(title, width / 2, layout.title_y)

    centers = layout.column_centers()

    # Big digits
    surface.set_baseline('alphabetic')
    surface.set_font(layout.digit_font_size)
    for cx, value in zip(centers, remaining.as_digits()):
        surface.draw_text(value, cx, layout.digit_baseline_y)

    # Labels underneath
    surface.set_baseline('top')
    surface.set_font(layout.label_font_size)
    for cx, label in zip(centers, LABELS):
        surface.draw_text(label, cx, layout.label_top_y)
