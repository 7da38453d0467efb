"""
Blend Engine
============
Composites an overlay onto a base buffer through a combining function.

The combining function receives (x, y, base_pixel, overlay_pixel) and returns
the new base pixel. Every output pixel depends only on the inputs at the same
coordinate, which makes the in-place update safe.

Two ways to supply it:
- BlendFunction subclasses are called once with whole numpy arrays, so
  their rule must be written with elementwise numpy operations
- Plain callables are called once per coordinate with plain ints / tuples.
  Simple to write, but a Python-level loop over every pixel

A single-channel overlay on a 3-channel base is broadcast, so the same mask
value is applied to R, G and B.
"""

import logging
import math
from typing import Callable

import numpy as np

from .errors import DimensionMismatch

logger = logging.getLogger(__name__)

BlendFn = Callable[[np.ndarray, np.ndarray, np.ndarray, np.ndarray], np.ndarray]


def _read_only(array: np.ndarray) -> np.ndarray:
    view = array.view()
    view.flags.writeable = False
    return view


def _pixel(value):
    if np.ndim(value) == 0:
        return value.item()
    return tuple(v.item() for v in value)


def _combine_per_pixel(f, base: np.ndarray, overlay: np.ndarray) -> np.ndarray:
    """Call a plain combining function once per coordinate."""
    height, width = base.shape[:2]
    result = np.empty(base.shape, dtype=np.float64)
    for y in range(height):
        for x in range(width):
            result[y, x] = f(x, y, _pixel(base[y, x]), _pixel(overlay[y, x]))
    return result


def _combine_vectorized(f: "BlendFunction", base: np.ndarray, overlay: np.ndarray) -> np.ndarray:
    """Call a BlendFunction once with whole arrays."""
    height, width = base.shape[:2]
    ys, xs = np.indices((height, width))
    overlay_view = _read_only(overlay)
    if base.ndim == 3:
        xs = xs[..., np.newaxis]
        ys = ys[..., np.newaxis]
        if overlay.ndim == 2:
            overlay_view = overlay_view[..., np.newaxis]
    elif overlay.ndim == 3:
        overlay_view = overlay_view[..., 0]

    result = np.asarray(f(xs, ys, _read_only(base), overlay_view))
    return np.broadcast_to(result, base.shape)


def blend(base: np.ndarray, overlay: np.ndarray, f: BlendFn) -> np.ndarray:
    """
    Replace every base pixel with f(x, y, base_pixel, overlay_pixel).

    BlendFunction strategies are applied to whole arrays at once. Any other
    callable is treated as a per-pixel function: it is called for each
    coordinate with the pixels as an int (1 channel) or a tuple of ints, and
    returns the new base pixel in the same form.

    Args:
        base: Buffer to modify in place.
        overlay: Read-only buffer with the same width and height. A
                 single-channel overlay applies to every base channel.
        f: Combining function or BlendFunction strategy.

    Returns:
        The (mutated) base buffer.

    Raises:
        DimensionMismatch: If width/height or channel counts differ. Base is
                           left untouched.
    """
    height, width = base.shape[:2]
    o_height, o_width = overlay.shape[:2]
    base_channels = 1 if base.ndim == 2 else base.shape[2]
    overlay_channels = 1 if overlay.ndim == 2 else overlay.shape[2]
    if (width, height) != (o_width, o_height) or overlay_channels not in (1, base_channels):
        raise DimensionMismatch(
            (width, height), (o_width, o_height), base_channels, overlay_channels
        )

    logger.debug("Blending %dx%d overlay with %r", width, height, f)

    if isinstance(f, BlendFunction):
        result = _combine_vectorized(f, base, overlay)
    else:
        if overlay.ndim == 3 and overlay_channels == 1:
            overlay = overlay[..., 0]
        result = _combine_per_pixel(f, _read_only(base), overlay)

    if np.issubdtype(base.dtype, np.integer):
        info = np.iinfo(base.dtype)
        if np.issubdtype(result.dtype, np.floating):
            result = np.rint(result)
        result = np.clip(result, info.min, info.max)

    base[...] = result.astype(base.dtype, copy=False)
    return base


class BlendFunction:
    """Strategy object wrapping a single combine(x, y, base, overlay) rule."""

    name = "custom"

    def combine(self, x, y, base, overlay):
        raise NotImplementedError

    def __call__(self, x, y, base, overlay):
        return self.combine(x, y, base, overlay)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Lighten(BlendFunction):
    """max(base, mask): pushes the mark into dark and mid tones."""

    name = "lighten"

    def combine(self, x, y, base, overlay):
        return np.maximum(base, overlay)


class DarkenInvert(BlendFunction):
    """min(base, 255 - mask): pushes the mark into light tones."""

    name = "darken-invert"

    def combine(self, x, y, base, overlay):
        return np.minimum(base, 255 - overlay)


class SinusoidalAlpha(BlendFunction):
    """
    Alpha-mix each pixel towards its inverse where the mask is set.

    The alpha oscillates along x between 0 and `ratio`, so the strength of
    the mark changes smoothly across the image.
    """

    name = "sinusoidal-alpha"

    def __init__(self, ratio: float = 0.5, w_x: float = 2 * math.pi / 200.0):
        self.ratio = ratio
        self.w_x = w_x

    def combine(self, x, y, base, overlay):
        alpha = self.ratio * (0.5 + 0.5 * np.sin(self.w_x * x))
        alpha = alpha * (overlay / 255.0)
        base = base.astype(np.float64)
        return base + alpha * ((255.0 - base) - base)

    def __repr__(self) -> str:
        return f"SinusoidalAlpha(ratio={self.ratio}, w_x={self.w_x})"
