"""
Warpmark Package
================
Tiled, warped, rotated text watermarks for photographs.

Modules:
    - core: Pattern synthesis, blend engine and image codec

Usage:
    from warpmark import Watermarker, WatermarkConfig
    result = Watermarker(WatermarkConfig(text="Sample")).process("in.jpg", "out.jpg")
"""

__version__ = "1.0.0"
__app_name__ = "warpmark"

from .core import (
    BlendStrategy,
    ConfigurationError,
    DimensionMismatch,
    EncodeFailure,
    Interpolation,
    ResourceUnavailable,
    WarpMode,
    WatermarkConfig,
    WatermarkError,
    Watermarker,
    add_pattern_watermark,
)

__all__ = [
    # Version info
    "__version__",
    "__app_name__",

    # Pipeline
    "Watermarker",
    "WatermarkConfig",
    "add_pattern_watermark",
    "BlendStrategy",
    "Interpolation",
    "WarpMode",

    # Errors
    "WatermarkError",
    "ConfigurationError",
    "DimensionMismatch",
    "ResourceUnavailable",
    "EncodeFailure",
]
