"""
Watermark Exceptions
====================
Error taxonomy for the pattern watermarking pipeline.

Hierarchy:
    - WatermarkError (base)
        - ConfigurationError (degenerate watermark configuration)
        - DimensionMismatch (blend buffers of different sizes)
        - ResourceUnavailable (font or input image cannot be loaded)
        - EncodeFailure (output image cannot be written)
        - InternalInvariantError (pipeline invariant violated)

Each error also derives from the closest built-in exception, so callers
catching ValueError / OSError keep working.
"""

from typing import Optional


class WatermarkError(Exception):
    """
    Base class for all watermarking errors.

    Attributes:
        message: Human-readable description.
        original_error: The wrapped exception, if any.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ConfigurationError(WatermarkError, ValueError):
    """Raised when the watermark configuration cannot produce a pattern."""


class DimensionMismatch(WatermarkError, ValueError):
    """Raised when blending buffers whose width/height or channels differ."""

    def __init__(self, base_size, overlay_size, base_channels=1, overlay_channels=1):
        super().__init__(
            f"Dimensions of images should match: base is {base_size[0]}x{base_size[1]}"
            f"x{base_channels}, overlay is {overlay_size[0]}x{overlay_size[1]}x{overlay_channels}"
        )
        self.base_size = base_size
        self.overlay_size = overlay_size
        self.base_channels = base_channels
        self.overlay_channels = overlay_channels


class ResourceUnavailable(WatermarkError, OSError):
    """Raised when a font or input image cannot be loaded."""


class EncodeFailure(WatermarkError, OSError):
    """Raised when the output image cannot be written."""


class InternalInvariantError(WatermarkError, AssertionError):
    """Raised when a pipeline stage receives buffers it should never see."""
