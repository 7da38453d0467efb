"""
Geometric Warp
==============
Sinusoidal displacement of a pattern buffer.

Each output pixel (x, y) is resampled from the source at (x + dx, y + dy):

    coupled:      s = sin(wx * x) * sin(wy * y)
                  dx = 0.5 * amplitude_x * s
                  dy = 0.5 * amplitude_y * s

    single-axis:  dx = 0
                  dy = 0.5 * amplitude_y * sin(wx * x)

The displacement is smooth, so the text bends without tearing, which makes
the pattern harder to match and subtract.
"""

import logging
import math
from typing import Tuple

import numpy as np

from .config import Interpolation, WarpMode
from .resample import Pixel, remap

logger = logging.getLogger(__name__)


def angular_frequencies(
        width: int,
        height: int,
        period_x: float,
        period_y: float
) -> Tuple[float, float]:
    """
    Convert periods expressed as fractions of the image size to angular
    frequencies (radians per pixel).
    """
    wx = 2 * math.pi / (width * period_x)
    wy = 2 * math.pi / (height * period_y)
    return wx, wy


def displacement(
        xs: np.ndarray,
        ys: np.ndarray,
        amplitude_x: float,
        amplitude_y: float,
        wx: float,
        wy: float,
        mode: WarpMode = WarpMode.COUPLED
) -> Tuple[np.ndarray, np.ndarray]:
    """Return (dx, dy) for the given coordinate arrays."""
    if mode is WarpMode.SINGLE_AXIS:
        dx = np.zeros_like(xs, dtype=np.float64)
        dy = 0.5 * amplitude_y * np.sin(wx * xs)
        return dx, dy

    s = np.sin(wx * xs) * np.sin(wy * ys)
    return 0.5 * amplitude_x * s, 0.5 * amplitude_y * s


def warp(
        buffer: np.ndarray,
        amplitude_x: float,
        amplitude_y: float,
        wx: float,
        wy: float,
        interpolation: Interpolation = Interpolation.BICUBIC,
        mode: WarpMode = WarpMode.COUPLED,
        fallback: Pixel = 0
) -> np.ndarray:
    """
    Warp a buffer with a sinusoidal displacement.

    Args:
        buffer: 1- or 3-channel source buffer (not modified).
        amplitude_x: Horizontal amplitude in pixels (ignored in single-axis mode).
        amplitude_y: Vertical amplitude in pixels.
        wx: Angular frequency along x.
        wy: Angular frequency along y (ignored in single-axis mode).
        interpolation: Resampling mode.
        mode: Coupled or single-axis displacement.
        fallback: Color for samples that land outside the source.

    Returns:
        New buffer with the same dimensions.
    """
    if amplitude_x == 0 and amplitude_y == 0:
        return buffer.copy()

    height, width = buffer.shape[:2]
    ys, xs = np.indices((height, width), dtype=np.float64)
    dx, dy = displacement(xs, ys, amplitude_x, amplitude_y, wx, wy, mode)

    logger.debug(
        "Warping %dx%d buffer (%s, ax=%s, ay=%s, wx=%.5f, wy=%.5f)",
        width, height, mode.value, amplitude_x, amplitude_y, wx, wy
    )
    return remap(buffer, xs + dx, ys + dy, interpolation, fallback)
