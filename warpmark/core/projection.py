"""
Projection - 2D Affine Transform
================================
A 3x3 homogeneous matrix used to compose translate/rotate transforms.

Composition reads right to left, so
    Projection.translate(cx, cy) * Projection.rotate(theta) * Projection.translate(-cx, -cy)
first moves the center to the origin, rotates, then moves it back.
"""

import math
from typing import Tuple

import numpy as np


class Projection:
    """Affine transform stored as a 3x3 matrix."""

    def __init__(self, matrix: np.ndarray):
        matrix = np.asarray(matrix, dtype=np.float64)
        if matrix.shape != (3, 3):
            raise ValueError(f"Projection matrix must be 3x3, got {matrix.shape}")
        self.matrix = matrix

    @classmethod
    def translate(cls, tx: float, ty: float) -> "Projection":
        return cls(np.array([
            [1.0, 0.0, tx],
            [0.0, 1.0, ty],
            [0.0, 0.0, 1.0],
        ]))

    @classmethod
    def rotate(cls, theta: float) -> "Projection":
        """
        Rotation by `theta` radians.

        In image coordinates (y pointing down) a positive angle turns clockwise.
        """
        c, s = math.cos(theta), math.sin(theta)
        return cls(np.array([
            [c, -s, 0.0],
            [s, c, 0.0],
            [0.0, 0.0, 1.0],
        ]))

    @classmethod
    def rotate_about(cls, theta: float, cx: float, cy: float) -> "Projection":
        """Rotation by `theta` radians around the point (cx, cy)."""
        return cls.translate(cx, cy) * cls.rotate(theta) * cls.translate(-cx, -cy)

    def __mul__(self, other: "Projection") -> "Projection":
        if not isinstance(other, Projection):
            return NotImplemented
        return Projection(self.matrix @ other.matrix)

    def __call__(self, point: Tuple[float, float]) -> Tuple[float, float]:
        return self.apply(point)

    def apply(self, point: Tuple[float, float]) -> Tuple[float, float]:
        """Map a single (x, y) point."""
        x, y = point
        u, v, w = self.matrix @ np.array([x, y, 1.0])
        return float(u / w), float(v / w)

    def apply_many(self, xs: np.ndarray, ys: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """Map arrays of x and y coordinates (any matching shape)."""
        m = self.matrix
        u = m[0, 0] * xs + m[0, 1] * ys + m[0, 2]
        v = m[1, 0] * xs + m[1, 1] * ys + m[1, 2]
        w = m[2, 0] * xs + m[2, 1] * ys + m[2, 2]
        return u / w, v / w

    def affine_2x3(self) -> np.ndarray:
        """Top two rows of the matrix, in the layout cv2.warpAffine expects."""
        return self.matrix[:2, :].astype(np.float64)

    def __repr__(self) -> str:
        return f"Projection({self.matrix.tolist()!r})"
