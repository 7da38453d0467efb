"""
Resampling Helpers
==================
Thin wrappers around OpenCV's remap/warpAffine.

Every function works on 1-channel (H, W) and 3-channel (H, W, 3) uint8
buffers. Coordinates that fall outside the source receive the fallback color.
"""

from typing import Sequence, Tuple, Union

import cv2
import numpy as np

from .config import Interpolation
from .projection import Projection

Pixel = Union[int, Tuple[int, ...]]


def _border_value(buffer: np.ndarray, fallback: Pixel) -> Tuple[int, ...]:
    # cv2 fills missing channels of a scalar border with 0, so spell it out
    channels = 1 if buffer.ndim == 2 else buffer.shape[2]
    if isinstance(fallback, (int, np.integer, float)):
        return (int(fallback),) * channels
    fallback = tuple(int(v) for v in fallback)
    if len(fallback) != channels:
        raise ValueError(
            f"Fallback color has {len(fallback)} channels, buffer has {channels}"
        )
    return fallback


def remap(
        buffer: np.ndarray,
        map_x: np.ndarray,
        map_y: np.ndarray,
        interpolation: Interpolation = Interpolation.BICUBIC,
        fallback: Pixel = 0
) -> np.ndarray:
    """
    Build a new buffer where output[y, x] = buffer(map_x[y, x], map_y[y, x]).

    Args:
        buffer: Source buffer.
        map_x: Fractional source x coordinate for each output pixel.
        map_y: Fractional source y coordinate for each output pixel.
        interpolation: Resampling mode.
        fallback: Color used for coordinates outside the source.

    Returns:
        Buffer shaped like the maps (plus the source channel axis).
    """
    return cv2.remap(
        np.ascontiguousarray(buffer),
        np.asarray(map_x, dtype=np.float32),
        np.asarray(map_y, dtype=np.float32),
        interpolation.cv2_flag,
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=_border_value(buffer, fallback),
    )


def sample(
        buffer: np.ndarray,
        x: float,
        y: float,
        interpolation: Interpolation = Interpolation.BICUBIC,
        fallback: Pixel = 0
) -> Pixel:
    """Read a single pixel at a fractional coordinate."""
    out = remap(
        buffer,
        np.array([[x]], dtype=np.float32),
        np.array([[y]], dtype=np.float32),
        interpolation,
        fallback,
    )
    value = out[0, 0]
    if np.ndim(value) == 0:
        return int(value)
    return tuple(int(v) for v in value)


def warp_affine(
        buffer: np.ndarray,
        projection: Projection,
        size: Sequence[int],
        interpolation: Interpolation = Interpolation.BICUBIC,
        fallback: Pixel = 0
) -> np.ndarray:
    """
    Apply `projection` (source -> destination) to a buffer.

    Args:
        size: (width, height) of the output buffer.
    """
    width, height = size
    return cv2.warpAffine(
        np.ascontiguousarray(buffer),
        projection.affine_2x3(),
        (int(width), int(height)),
        flags=interpolation.cv2_flag,
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=_border_value(buffer, fallback),
    )
