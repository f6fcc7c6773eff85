"""Drawing surface used by the countdown frame renderer.

The renderer only talks to ``DrawingSurface``; ``PillowSurface`` is the
backend that actually rasterizes, using canvas-style text alignment and
baselines mapped onto Pillow text anchors.
"""

import logging
import os
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Optional

from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)

# Canvas textAlign -> Pillow horizontal anchor
ALIGN_ANCHORS = {
    'left': 'l',
    'start': 'l',
    'center': 'm',
    'right': 'r',
    'end': 'r',
}

# Canvas textBaseline -> Pillow vertical anchor
BASELINE_ANCHORS = {
    'top': 'a',
    'hanging': 'a',
    'middle': 'm',
    'alphabetic': 's',
    'ideographic': 'd',
    'bottom': 'd',
}

FONT_CANDIDATES = [
    "/usr/share/fonts/truetype/msttcorefonts/Arial.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/Library/Fonts/Arial.ttf",
    "/System/Library/Fonts/Supplemental/Arial.ttf",
    "/System/Library/Fonts/Helvetica.ttc",
    "C:/Windows/Fonts/arial.ttf",
    "Arial.ttf",
]


class DrawingSurface(ABC):
    """Minimal 2D drawing capability set the frame renderer needs."""

    @abstractmethod
    def set_fill_style(self, color: str) -> None: ...

    @abstractmethod
    def set_stroke_style(self, color: str) -> None: ...

    @abstractmethod
    def set_line_width(self, width: float) -> None: ...

    @abstractmethod
    def set_font(self, size_px: int) -> None: ...

    @abstractmethod
    def set_align(self, align: str) -> None: ...

    @abstractmethod
    def set_baseline(self, baseline: str) -> None: ...

    @abstractmethod
    def fill_rect(self, x: float, y: float, width: float, height: float) -> None: ...

    @abstractmethod
    def stroke_rect(self, x: float, y: float, width: float, height: float) -> None: ...

    @abstractmethod
    def stroke_line(self, x0: float, y0: float, x1: float, y1: float) -> None: ...

    @abstractmethod
    def draw_text(self, text: str, x: float, y: float) -> None: ...


@lru_cache(maxsize=64)
def load_font(size_px: int, font_path: Optional[str] = None) -> ImageFont.ImageFont:
    """Load a TrueType font at the given pixel size.

    Tries the configured path first, then well-known system fonts, then
    Pillow's bundled default font.
    """
    candidates = [font_path] if font_path else []
    home_dir = os.path.expanduser("~")
    candidates += [f"{home_dir}/.fonts/Arial.ttf"] + FONT_CANDIDATES

    for candidate in candidates:
        try:
            font = ImageFont.truetype(candidate, size_px)
            logger.debug(f"Loaded font: {candidate} ({size_px}px)")
            return font
        except (OSError, IOError):
            continue

    logger.warning(f"No TrueType fonts found, using default font at {size_px}px")
    return ImageFont.load_default(size_px)


class PillowSurface(DrawingSurface):
    """DrawingSurface backed by a Pillow RGB image."""

    def __init__(self, width: int, height: int, font_path: Optional[str] = None):
        self.width = width
        self.height = height
        self.font_path = font_path
        self.image = Image.new('RGB', (width, height), color=(255, 255, 255))
        self._draw = ImageDraw.Draw(self.image)
        self._fill = '#000000'
        self._stroke = '#000000'
        self._line_width = 1.0
        self._font = load_font(10, font_path)
        self._align = 'start'
        self._baseline = 'alphabetic'

    def set_fill_style(self, color: str) -> None:
        self._fill = color

    def set_stroke_style(self, color: str) -> None:
        self._stroke = color

    def set_line_width(self, width: float) -> None:
        self._line_width = width

    def set_font(self, size_px: int) -> None:
        self._font = load_font(max(1, int(size_px)), self.font_path)

    def set_align(self, align: str) -> None:
        if align not in ALIGN_ANCHORS:
            raise ValueError(f"Unknown text align: {align}")
        self._align = align

    def set_baseline(self, baseline: str) -> None:
        if baseline not in BASELINE_ANCHORS:
            raise ValueError(f"Unknown text baseline: {baseline}")
        self._baseline = baseline

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            return
        box = [round(x), round(y), round(x + width) - 1, round(y + height) - 1]
        self._draw.rectangle(box, fill=self._fill)

    def stroke_rect(self, x: float, y: float, width: float, height: float) -> None:
        # Canvas strokes straddle the path; Pillow outlines grow inward from the box
        half = self._line_width / 2
        box = [round(x - half), round(y - half), round(x + width + half) - 1, round(y + height + half) - 1]
        self._draw.rectangle(box, outline=self._stroke, width=max(1, round(self._line_width)))

    def stroke_line(self, x0: float, y0: float, x1: float, y1: float) -> None:
        self._draw.line([(x0, y0), (x1, y1)], fill=self._stroke, width=max(1, round(self._line_width)))

    def draw_text(self, text: str, x: float, y: float) -> None:
        anchor = ALIGN_ANCHORS[self._align] + BASELINE_ANCHORS[self._baseline]
        self._draw.text((x, y), text, fill=self._fill, font=self._font, anchor=anchor)
