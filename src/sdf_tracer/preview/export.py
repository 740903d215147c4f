"""Image export utilities for rendered framebuffers.

This module converts the linear framebuffer to 8-bit pixels and writes
binary PPM (P6) images:

    P6\\n<width> <height>\\n255\\n<width * height * 3 bytes, row-major, RGB>

Tone mapping only rescales pixels that overflow: when a pixel's brightest
channel exceeds 1, all three channels are divided by it. This keeps the hue
of highlights instead of clipping each channel independently.

Example:
    >>> from sdf_tracer.preview.export import save_ppm
    >>> from sdf_tracer.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(1024, 768)
    >>> renderer.render()
    >>> save_ppm(renderer.get_image_numpy(), "out.ppm")
"""

from __future__ import annotations

import io
import logging
import os

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)


def tone_map_max_channel(image: npt.NDArray[np.float32]) -> npt.NDArray[np.float32]:
    """Scale down pixels whose brightest channel exceeds 1.

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        New image where every pixel with max channel > 1 is divided by that
        maximum. Other pixels are unchanged. Values are not clamped.
    """
    image = np.asarray(image, dtype=np.float32)
    peak = image.max(axis=-1, keepdims=True)
    result = image.copy()
    np.divide(image, peak, out=result, where=peak > 1.0)
    return result


def image_to_uint8(image: npt.NDArray[np.float32]) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to 8-bit for export.

    Applies max-channel tone mapping, clamps to [0, 1], and quantizes by
    truncating 255 * value.

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    clamped = np.clip(tone_map_max_channel(image), 0.0, 1.0)
    return (clamped * 255).astype(np.uint8)


def encode_ppm(image: npt.NDArray[np.float32]) -> bytes:
    """Encode a linear float image as binary PPM bytes.

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        The complete P6 file contents.
    """
    buffer = io.BytesIO()
    PILImage.fromarray(image_to_uint8(image)).save(buffer, format="PPM")
    return buffer.getvalue()


def save_ppm(image: npt.NDArray[np.float32], filepath: str | os.PathLike[str]) -> None:
    """Save a linear float image as a binary PPM file.

    Args:
        image: Linear image array of shape (H, W, 3).
        filepath: Output file path.

    Raises:
        OSError: If the file cannot be written. The failure is logged
            before it propagates.
    """
    pil_image = PILImage.fromarray(image_to_uint8(image))
    try:
        pil_image.save(filepath, format="PPM")
    except OSError:
        logger.error("Failed to write image to %s", filepath)
        raise
    logger.info("Saved %dx%d image to %s", pil_image.width, pil_image.height, filepath)
