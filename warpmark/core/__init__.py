"""
Core Module - Pure Algorithm Logic
==================================
Pattern synthesis (tiling, warp, rotation), the blend engine and the
image codec. No command-line dependencies.
"""

from .blend import BlendFunction, DarkenInvert, Lighten, SinusoidalAlpha, blend
from .codec import load_image, save_image
from .config import BlendStrategy, Interpolation, WarpMode, WatermarkConfig
from .errors import (
    ConfigurationError,
    DimensionMismatch,
    EncodeFailure,
    InternalInvariantError,
    ResourceUnavailable,
    WatermarkError,
)
from .pattern import FontProvider, TextMetrics, TextPatternGenerator, measure_text
from .projection import Projection
from .resample import remap, sample, warp_affine
from .rotation import crop_offset, fit_canvas_size, rotate_and_crop
from .warp import angular_frequencies, warp
from .watermarker import Watermarker, add_pattern_watermark

__all__ = [
    # Pipeline
    "Watermarker",
    "WatermarkConfig",
    "add_pattern_watermark",
    "BlendStrategy",
    "Interpolation",
    "WarpMode",

    # Stages
    "blend",
    "BlendFunction",
    "Lighten",
    "DarkenInvert",
    "SinusoidalAlpha",
    "FontProvider",
    "TextMetrics",
    "TextPatternGenerator",
    "measure_text",
    "warp",
    "angular_frequencies",
    "fit_canvas_size",
    "rotate_and_crop",
    "crop_offset",
    "Projection",
    "remap",
    "sample",
    "warp_affine",

    # Codec
    "load_image",
    "save_image",

    # Errors
    "WatermarkError",
    "ConfigurationError",
    "DimensionMismatch",
    "ResourceUnavailable",
    "EncodeFailure",
    "InternalInvariantError",
]
