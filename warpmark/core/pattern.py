"""
Text Pattern Generator
======================
Tiles the watermark text across a single-channel canvas.

Layout:
- Texts on the same line are spaced by 110% of the text width
- Lines are spaced by 110% of the text height
- Each line starts text_w / 10 further left than the previous one, so the
  gaps between texts never line up vertically (brick pattern)
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from .errors import ConfigurationError, ResourceUnavailable

logger = logging.getLogger(__name__)

Font = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]


class FontProvider:
    """
    Resolves the font used to measure and draw the watermark text.

    Lookup order:
    1. An explicit font file (must load, otherwise ResourceUnavailable)
    2. Bold DejaVu / Arial from the usual system locations
    3. Pillow's bundled default font
    """

    DEFAULT_CANDIDATES = (
        "DejaVuSans-Bold.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
        "/usr/share/fonts/TTF/DejaVuSans-Bold.ttf",
        "/usr/share/fonts/dejavu/DejaVuSans-Bold.ttf",
        "/Library/Fonts/DejaVuSans-Bold.ttf",
        "arialbd.ttf",
    )

    def __init__(
            self,
            font_path: Optional[Union[str, Path]] = None,
            candidates: Sequence[str] = DEFAULT_CANDIDATES
    ):
        self._font_path = font_path
        self._candidates = tuple(candidates)
        self._cached_fonts: dict[int, Font] = {}

    def get_font(self, size: int) -> Font:
        """
        Get or create a cached font object for the given size.

        Raises:
            ResourceUnavailable: If an explicit font file cannot be loaded.
        """
        if size not in self._cached_fonts:
            self._cached_fonts[size] = self._load(size)
        return self._cached_fonts[size]

    def _load(self, size: int) -> Font:
        if self._font_path is not None:
            try:
                return ImageFont.truetype(str(self._font_path), size)
            except OSError as e:
                raise ResourceUnavailable(
                    f"Cannot load font: {self._font_path}", original_error=e
                ) from e

        for candidate in self._candidates:
            try:
                font = ImageFont.truetype(candidate, size)
            except OSError:
                continue
            logger.debug("Using font %s", candidate)
            return font

        logger.info("No system font found, falling back to Pillow's default font")
        return ImageFont.load_default(size=size)

    def clear(self):
        self._cached_fonts.clear()


@dataclass(frozen=True)
class TextMetrics:
    """Ink bounding box of the rendered text."""
    width: int
    height: int
    offset_x: int = 0
    offset_y: int = 0


def measure_text(text: str, font: Font) -> TextMetrics:
    """Measure the rendered text's bounding box."""
    temp_img = Image.new("L", (1, 1), 0)
    temp_draw = ImageDraw.Draw(temp_img)
    left, top, right, bottom = temp_draw.textbbox((0, 0), text, font=font)
    return TextMetrics(
        width=int(right - left),
        height=int(bottom - top),
        offset_x=int(left),
        offset_y=int(top),
    )


def _round(value: float) -> int:
    # half away from zero; only used on non-negative values
    return int(value + 0.5)


class TextPatternGenerator:
    """
    Draws the text repeatedly over a canvas of any size.

    The text is measured once, at construction.
    """

    SPACING_RATIO = 1.1
    LINE_SHIFT_DIVISOR = 10

    def __init__(self, text: str, font: Font):
        if not text:
            raise ConfigurationError("Watermark text cannot be empty")

        self.text = text
        self.font = font
        self.metrics = measure_text(text, font)
        logger.info("text_w=%d, text_h=%d", self.metrics.width, self.metrics.height)

        # Shift between two texts on two different lines
        self.vertical_spacing = _round(self.metrics.height * self.SPACING_RATIO)
        # Shift between two texts on the same line
        self.horizontal_spacing = _round(self.metrics.width * self.SPACING_RATIO)
        # How much we shift each line
        self.line_shift = -(self.metrics.width // self.LINE_SHIFT_DIVISOR)

        if self.vertical_spacing <= 0 or self.horizontal_spacing <= 0:
            raise ConfigurationError(
                f"Watermark text {text!r} measures {self.metrics.width}x"
                f"{self.metrics.height} pixels; cannot tile an empty pattern"
            )

    def generate(
            self,
            width: int,
            height: int,
            background: int = 0,
            foreground: int = 255
    ) -> np.ndarray:
        """
        Build a (height, width) uint8 buffer filled with `background` and
        covered with the tiled text in `foreground`.
        """
        canvas = Image.new("L", (width, height), background)
        draw = ImageDraw.Draw(canvas)

        right_edge = self.metrics.offset_x + self.metrics.width
        drawn = 0
        line = 0
        while line * self.vertical_spacing < height:
            start_y = line * self.vertical_spacing
            start_x = line * self.line_shift
            while start_x < width:
                # texts entirely left of the canvas leave no ink
                if start_x + right_edge > 0:
                    draw.text((start_x, start_y), self.text, font=self.font, fill=foreground)
                    drawn += 1
                start_x += self.horizontal_spacing
            line += 1

        logger.debug("Drew %d texts on %d lines (%dx%d canvas)", drawn, line, width, height)
        return np.array(canvas, dtype=np.uint8)
