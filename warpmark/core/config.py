"""
Watermark Configuration
=======================
Immutable settings shared (read-only) by every stage of the pipeline.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import cv2

from .errors import ConfigurationError


class Interpolation(Enum):
    """Resampling mode used by the warp and rotation stages."""
    NEAREST = "nearest"
    BILINEAR = "bilinear"
    BICUBIC = "bicubic"

    @property
    def cv2_flag(self) -> int:
        return {
            Interpolation.NEAREST: cv2.INTER_NEAREST,
            Interpolation.BILINEAR: cv2.INTER_LINEAR,
            Interpolation.BICUBIC: cv2.INTER_CUBIC,
        }[self]


class WarpMode(Enum):
    """
    How the sinusoidal displacement is applied.

    SINGLE_AXIS: only y is displaced, by sin(wx * x).
    COUPLED: both axes are displaced, by sin(wx * x) * sin(wy * y).
    """
    SINGLE_AXIS = "single-axis"
    COUPLED = "coupled"


class BlendStrategy(Enum):
    """Which blend passes end up in the output image."""
    DARKEN_INVERT = "darken-invert"
    LIGHTEN_THEN_DARKEN = "lighten-then-darken"
    SINUSOIDAL_ALPHA = "sinusoidal-alpha"


@dataclass(frozen=True)
class WatermarkConfig:
    """
    Configuration for the warped pattern watermark.

    Attributes:
        text: Watermark text, tiled across the image.
        font_size: Glyph size in pixels.
        font_path: Optional TTF/OTF file; system fonts are searched otherwise.
        period_x: Period of the oscillation along x, as a fraction of image width.
        period_y: Period of the oscillation along y, as a fraction of image height.
        amplitude_x: Horizontal displacement amplitude, in pixels.
        amplitude_y: Vertical displacement amplitude, in pixels.
        warp_mode: Single-axis or coupled displacement.
        rotation: Rotation of the whole pattern, in degrees.
        interpolation: Resampling mode for warp and rotation.
        blend_ratio: Strength of the sinusoidal alpha strategy (0.0-1.0).
        blend_strategy: Which blend passes are applied to the output.
    """
    text: str
    font_size: int = 16
    font_path: Optional[str] = None
    period_x: float = 0.2
    period_y: float = 0.2
    amplitude_x: float = 0.0
    amplitude_y: float = 6.0
    warp_mode: WarpMode = WarpMode.SINGLE_AXIS
    rotation: float = 10.0
    interpolation: Interpolation = Interpolation.BICUBIC
    blend_ratio: float = 0.5
    blend_strategy: BlendStrategy = BlendStrategy.DARKEN_INVERT

    def __post_init__(self):
        if not self.text or not self.text.strip():
            raise ConfigurationError("Watermark text cannot be empty")

        if not 1 <= self.font_size <= 500:
            raise ConfigurationError("Font size must be between 1 and 500")

        if self.period_x <= 0 or self.period_y <= 0:
            raise ConfigurationError("Warp periods must be positive")

        if self.amplitude_x < 0 or self.amplitude_y < 0:
            raise ConfigurationError("Warp amplitudes cannot be negative")

        if not 0.0 <= self.blend_ratio <= 1.0:
            raise ConfigurationError("Blend ratio must be between 0.0 and 1.0")
