"""
Pattern Watermarker
===================
End-to-end pipeline for the warped text watermark.

Pipeline:
1. Fit a canvas that still covers the image once rotated
2. Tile the text over the canvas (white on black)
3. Warp the canvas with a sinusoidal displacement
4. Rotate it and crop the center back to the image size -> mask
5. Blend the mask onto the image

Blend strategies:
- DARKEN_INVERT: min(pixel, 255 - mask) only. This is the default.
- LIGHTEN_THEN_DARKEN: max(pixel, mask), then darken-invert on the result
- SINUSOIDAL_ALPHA: alpha-mix towards the inverse color, strength
  oscillating along x
"""

import logging
import math
from pathlib import Path
from typing import List, Optional, Tuple, Union

import numpy as np
from PIL import Image

from .blend import BlendFunction, DarkenInvert, Lighten, SinusoidalAlpha, blend
from .codec import load_image, save_image
from .config import BlendStrategy, WatermarkConfig
from .errors import InternalInvariantError
from .pattern import FontProvider, TextPatternGenerator
from .rotation import INTERPOLATION_MARGIN, fit_canvas_size, rotate_and_crop
from .warp import angular_frequencies, warp

logger = logging.getLogger(__name__)

MASK_BACKGROUND = 0
MASK_FOREGROUND = 255


class Watermarker:
    """
    Applies a tiled, warped, rotated text watermark to images.

    The font is resolved and the text measured once, when the watermarker is
    created; a text that renders to nothing raises ConfigurationError here,
    before any image work.
    """

    def __init__(
            self,
            config: Union[WatermarkConfig, str],
            font_provider: Optional[FontProvider] = None
    ):
        """
        Initialize the Watermarker.

        Args:
            config: A WatermarkConfig, or just the watermark text to use the
                    default settings.
            font_provider: Optional FontProvider; one is built from
                           config.font_path otherwise.

        Raises:
            ConfigurationError: If the text is empty or measures zero pixels.
            ResourceUnavailable: If an explicit font file cannot be loaded.
        """
        if isinstance(config, str):
            config = WatermarkConfig(text=config)
        self.config = config
        self._fonts = font_provider or FontProvider(config.font_path)
        font = self._fonts.get_font(config.font_size)
        self._pattern = TextPatternGenerator(config.text, font)

    @property
    def pattern(self) -> TextPatternGenerator:
        return self._pattern

    def create_watermark(self, size: Tuple[int, int]) -> np.ndarray:
        """
        Build the single-channel watermark mask for an image of `size`.

        Args:
            size: (width, height) of the target image.

        Returns:
            (height, width) uint8 mask, 255 where the watermark is present.
        """
        cfg = self.config
        w, h = size

        # The buffer is rotated eventually, so it must be big enough to still
        # cover the image afterwards.
        # The warp moves samples by up to half the amplitude, and its own
        # resampling reads past that.
        warp_margin = math.ceil(0.5 * max(cfg.amplitude_x, cfg.amplitude_y)) + INTERPOLATION_MARGIN
        canvas_w, canvas_h = fit_canvas_size(w, h, cfg.rotation, INTERPOLATION_MARGIN + warp_margin)
        canvas = self._pattern.generate(canvas_w, canvas_h, MASK_BACKGROUND, MASK_FOREGROUND)

        wx, wy = angular_frequencies(w, h, cfg.period_x, cfg.period_y)
        canvas = warp(
            canvas,
            cfg.amplitude_x,
            cfg.amplitude_y,
            wx,
            wy,
            interpolation=cfg.interpolation,
            mode=cfg.warp_mode,
            fallback=MASK_BACKGROUND,
        )

        mask = rotate_and_crop(
            canvas, cfg.rotation, w, h,
            interpolation=cfg.interpolation,
            fallback=MASK_BACKGROUND,
        )
        if mask.shape != (h, w):
            raise InternalInvariantError(f"Mask is {mask.shape}, expected {(h, w)}")
        return mask

    def blend_passes(self, size: Tuple[int, int]) -> List[BlendFunction]:
        """Blend functions applied, in order, for the configured strategy."""
        strategy = self.config.blend_strategy
        if strategy is BlendStrategy.DARKEN_INVERT:
            return [DarkenInvert()]
        if strategy is BlendStrategy.LIGHTEN_THEN_DARKEN:
            return [Lighten(), DarkenInvert()]

        w, h = size
        wx, _ = angular_frequencies(w, h, self.config.period_x, self.config.period_y)
        return [SinusoidalAlpha(ratio=self.config.blend_ratio, w_x=wx)]

    def watermark(self, image: Union[np.ndarray, Image.Image]) -> np.ndarray:
        """
        Apply the watermark to an image.

        Args:
            image: (height, width, 3) uint8 buffer or PIL Image. Not modified.

        Returns:
            New (height, width, 3) uint8 buffer with the watermark applied.
        """
        result, _ = self.watermark_with_mask(image)
        return result

    def watermark_with_mask(
            self,
            image: Union[np.ndarray, Image.Image]
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Like watermark(), but also return the mask that was blended in."""
        if isinstance(image, Image.Image):
            image = np.array(image.convert("RGB"), dtype=np.uint8)

        if image.ndim != 3 or image.shape[2] != 3:
            raise ValueError(f"Expected a 3-channel image, got shape {image.shape}")

        h, w = image.shape[:2]
        logger.info("Creating watermark for %dx%d image", w, h)
        mask = self.create_watermark((w, h))

        result = image.copy()
        for blend_fn in self.blend_passes((w, h)):
            logger.debug("Applying %s pass", blend_fn.name)
            blend(result, mask, blend_fn)
        return result, mask

    def process(
            self,
            image_path: Union[str, Path],
            output_path: Optional[Union[str, Path]] = None,
            mask_path: Optional[Union[str, Path]] = None
    ) -> np.ndarray:
        """
        Watermark an image file.

        Args:
            image_path: Path to the source image.
            output_path: Optional path to save the result. If None, not saved.
            mask_path: Optional path to save the watermark mask, for inspection.

        Returns:
            The watermarked buffer.

        Raises:
            ResourceUnavailable: If the source image cannot be decoded.
            EncodeFailure: If an output file cannot be written.
        """
        image = load_image(image_path)
        result, mask = self.watermark_with_mask(image)

        if mask_path:
            save_image(mask, mask_path)
        if output_path:
            save_image(result, output_path)

        return result


# Convenience function for simple usage
def add_pattern_watermark(
        image_path: Union[str, Path],
        output_path: Union[str, Path],
        text: str,
        **options
) -> None:
    """
    Convenience function to watermark an image file.

    Args:
        image_path: Source image path.
        output_path: Destination path for watermarked image.
        text: Watermark text.
        **options: Any other WatermarkConfig field (rotation, font_size, ...).
    """
    watermarker = Watermarker(WatermarkConfig(text=text, **options))
    watermarker.process(image_path, output_path)
