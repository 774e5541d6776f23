"""Decode and encode images at the boundary of the pixel engine."""
from pathlib import Path
from typing import Union
import logging

import numpy as np
from PIL import Image
from PIL import ImageOps

from pixedit.types import ImageLoadError, PixelBuffer

logger = logging.getLogger(__name__)


def buffer_from_image(img: Image.Image) -> PixelBuffer:
    """
    Convert a PIL image to a PixelBuffer.

    EXIF orientation is applied and every mode is converted to RGBA.
    """
    img = ImageOps.exif_transpose(img)
    if img.mode != 'RGBA':
        img = img.convert('RGBA')
    return PixelBuffer.from_array(np.array(img))


def buffer_to_image(buffer: PixelBuffer) -> Image.Image:
    """Convert a PixelBuffer to an RGBA PIL image (copy of the data)."""
    return Image.fromarray(buffer.pixels.copy())


def load_buffer(path: Union[str, Path]) -> PixelBuffer:
    """
    Load an image file into a PixelBuffer.

    Args:
        path: Path to image file

    Returns:
        Decoded RGBA buffer

    Raises:
        FileNotFoundError: If file doesn't exist
        ImageLoadError: If file cannot be decoded
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Image file not found: {path}")

    if not path.is_file():
        raise ImageLoadError(f"Path is not a file: {path}")

    try:
        with Image.open(path) as img:
            buffer = buffer_from_image(img)
    except (IOError, OSError) as e:
        raise ImageLoadError(f"Failed to load image {path}: {e}") from e

    logger.info(f"Loaded {path.name}: {buffer.width}x{buffer.height}")
    return buffer


def save_buffer(buffer: PixelBuffer, path: Union[str, Path]) -> Path:
    """
    Save a buffer as an image file; the format follows the extension.

    Formats without alpha (e.g. JPEG) get the alpha channel dropped.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    img = buffer_to_image(buffer)
    if path.suffix.lower() in ('.jpg', '.jpeg', '.bmp'):
        img = img.convert('RGB')
    img.save(path)

    logger.info(f"Saved {buffer.width}x{buffer.height} image to {path}")
    return path
