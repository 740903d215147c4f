"""Preview module for image output.

Components:
    export: Max-channel tone mapping, 8-bit quantization, and binary PPM
        encoding/saving via Pillow

Example:
    >>> from sdf_tracer.preview import save_ppm
    >>> save_ppm(image, "out.ppm")
"""

from sdf_tracer.preview.export import (
    encode_ppm,
    image_to_uint8,
    save_ppm,
    tone_map_max_channel,
)

__all__ = [
    "tone_map_max_channel",
    "image_to_uint8",
    "encode_ppm",
    "save_ppm",
]
