"""Pinhole camera model for primary ray generation.

The camera sits at the world origin and looks down the negative z axis with
+y up. The image plane is placed so that its height spans the vertical field
of view, at a distance expressed in pixel units:

    x = (i + 0.5) - width / 2
    y = -(j + 0.5) + height / 2
    z = -height / (2 * tan(vfov / 2))

Row j = 0 is the top of the image, so the framebuffer is already in the
top-to-bottom order image files expect.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from sdf_tracer.camera.pinhole import PinholeCamera, setup_camera, get_ray
    >>>
    >>> setup_camera(PinholeCamera(vfov=60.0))
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0, 0, 1024, 768)  # Ray through the top-left pixel
"""

import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from sdf_tracer.core.constants import FIELD_OF_VIEW
from sdf_tracer.core.ray import Ray, vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class PinholeCamera:
    """Configuration for the pinhole camera.

    Attributes:
        vfov: Vertical field of view in degrees (0 < vfov < 180).
    """

    vfov: float = FIELD_OF_VIEW


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

# tan(vfov / 2), set by setup_camera
_tan_half_fov = ti.field(dtype=ti.f32, shape=())


def setup_camera(camera: PinholeCamera) -> None:
    """Initialize camera state from configuration.

    Must be called before rendering.

    Args:
        camera: Camera configuration.

    Raises:
        ValueError: If the field of view is not in (0, 180) degrees.
    """
    if not 0.0 < camera.vfov < 180.0:
        raise ValueError(f"Field of view must be in (0, 180) degrees, got {camera.vfov}")
    _tan_half_fov[None] = math.tan(math.radians(camera.vfov) / 2.0)


def get_tan_half_fov() -> float:
    """Get tan(vfov / 2) of the current camera."""
    return float(_tan_half_fov[None])


@ti.func
def get_ray(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the primary ray through the center of a pixel.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray from the origin with normalized direction.
    """
    x = (ti.cast(pixel_i, ti.f32) + 0.5) - ti.cast(width, ti.f32) / 2.0
    y = -(ti.cast(pixel_j, ti.f32) + 0.5) + ti.cast(height, ti.f32) / 2.0
    z = -ti.cast(height, ti.f32) / (2.0 * _tan_half_fov[None])
    return Ray(origin=vec3(0.0, 0.0, 0.0), direction=tm.normalize(vec3(x, y, z)))
