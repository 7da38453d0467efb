"""
Rotation & Canvas Fitting
=========================
The pattern is rotated as a whole, so it has to be drawn on a canvas large
enough that, once rotated about its center, it still covers the target
image with no empty corners. The canvas is then cropped back to the target
size around its center.
"""

import logging
import math
from typing import List, Tuple

import numpy as np

from .config import Interpolation
from .errors import InternalInvariantError
from .projection import Projection
from .resample import Pixel, warp_affine

logger = logging.getLogger(__name__)

# Bicubic sampling reads two pixels on each side of the sample point
INTERPOLATION_MARGIN = 2


def _ceil(value: float) -> int:
    # sin/cos noise (e.g. cos(pi/2) = 6e-17) must not add a whole pixel
    return math.ceil(value - 1e-9)


def corners(width: float, height: float) -> List[Tuple[float, float]]:
    return [(0.0, 0.0), (width, 0.0), (0.0, height), (width, height)]


def fit_canvas_size(
        target_w: int,
        target_h: int,
        angle: float,
        margin: int = INTERPOLATION_MARGIN
) -> Tuple[int, int]:
    """
    Compute the canvas size needed to cover a target rectangle after rotation.

    The four corners of the target are rotated by `angle` degrees about the
    target's center; the canvas is the bounding box of the result. It is
    never smaller than the target itself, so it can always be cropped back,
    and gets `margin` extra pixels on every side so that resampling near the
    target's corners never reads past the canvas edge.

    Returns:
        (canvas_w, canvas_h)
    """
    theta = math.radians(angle)
    rotation = Projection.rotate_about(theta, target_w / 2.0, target_h / 2.0)

    points = np.array(corners(target_w, target_h))
    xs, ys = rotation.apply_many(points[:, 0], points[:, 1])

    canvas_w = max(_ceil(xs.max() - xs.min()), target_w) + 2 * margin
    canvas_h = max(_ceil(ys.max() - ys.min()), target_h) + 2 * margin
    logger.info("buf_w=%d, buf_h=%d", canvas_w, canvas_h)
    return canvas_w, canvas_h


def crop_offset(canvas_w: int, canvas_h: int, target_w: int, target_h: int) -> Tuple[int, int]:
    """Top-left corner of the centered target rectangle inside the canvas."""
    return canvas_w // 2 - target_w // 2, canvas_h // 2 - target_h // 2


def rotate_and_crop(
        canvas: np.ndarray,
        angle: float,
        target_w: int,
        target_h: int,
        interpolation: Interpolation = Interpolation.BICUBIC,
        fallback: Pixel = 0
) -> np.ndarray:
    """
    Rotate a canvas about its center and crop the centered target rectangle.

    Raises:
        InternalInvariantError: If the canvas is smaller than the target.
    """
    canvas_h, canvas_w = canvas.shape[:2]
    if canvas_w < target_w or canvas_h < target_h:
        raise InternalInvariantError(
            f"Canvas {canvas_w}x{canvas_h} is smaller than target {target_w}x{target_h}"
        )

    theta = math.radians(angle)
    # cv2 puts pixel centers on integer coordinates
    rotation = Projection.rotate_about(theta, (canvas_w - 1) / 2.0, (canvas_h - 1) / 2.0)
    rotated = warp_affine(canvas, rotation, (canvas_w, canvas_h), interpolation, fallback)

    x, y = crop_offset(canvas_w, canvas_h, target_w, target_h)
    return rotated[y:y + target_h, x:x + target_w].copy()
