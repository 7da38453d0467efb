"""
Image Codec
===========
Decodes image files into numpy buffers and encodes buffers back to files,
using Pillow. Both directions are all-or-nothing.
"""

import logging
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image, ImageOps

from .errors import EncodeFailure, ResourceUnavailable

logger = logging.getLogger(__name__)

JPEG_QUALITY = 95


def load_image(image_path: Union[str, Path]) -> np.ndarray:
    """
    Decode an image file into a (height, width, 3) uint8 RGB buffer.

    EXIF orientation is applied, so the buffer matches what viewers show.

    Raises:
        ResourceUnavailable: If the file is missing or cannot be decoded.
    """
    image_path = Path(image_path)
    if not image_path.exists():
        raise ResourceUnavailable(f"Image not found: {image_path}")

    try:
        with Image.open(image_path) as img:
            img = ImageOps.exif_transpose(img)
            if img.mode != "RGB":
                img = img.convert("RGB")
            buffer = np.array(img, dtype=np.uint8)
    except OSError as e:
        raise ResourceUnavailable(f"Cannot decode image: {image_path}", original_error=e) from e

    logger.info("Found image with dimensions (%d, %d)", buffer.shape[1], buffer.shape[0])
    return buffer


def to_pil(buffer: np.ndarray) -> Image.Image:
    """Wrap a 1-channel or 3-channel uint8 buffer into a PIL image."""
    return Image.fromarray(buffer)


def save_image(buffer: np.ndarray, output_path: Union[str, Path], quality: int = JPEG_QUALITY) -> Path:
    """
    Encode a buffer to `output_path`; the format follows the file extension.

    Raises:
        EncodeFailure: If the file cannot be written.
    """
    output_path = Path(output_path)
    image = to_pil(np.ascontiguousarray(buffer, dtype=np.uint8))

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        suffix = output_path.suffix.lower()
        if suffix in [".jpg", ".jpeg"]:
            image.save(output_path, quality=quality)
        else:
            image.save(output_path)
    except (OSError, ValueError) as e:
        raise EncodeFailure(f"Cannot write image: {output_path}", original_error=e) from e

    logger.info("Saved %s", output_path)
    return output_path
