"""Single-shot renderer wrapping the integrator kernels.

This module provides a convenient wrapper around the core integrator that:
- Configures the camera and render target in one place
- Runs one full-frame render and waits for it to finish
- Collects per-depth ray counts and degenerate normal events
- Logs render statistics on the host once the kernel completes

Pixels are independent tasks inside one parallel Taichi loop; the renderer
only returns after every pixel has been written.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from sdf_tracer.core.renderer import Renderer
    >>> from sdf_tracer.scene.four_spheres import create_four_spheres_scene
    >>>
    >>> scene, camera = create_four_spheres_scene()
    >>> renderer = Renderer(1024, 768, camera)
    >>> stats = renderer.render()
    >>> renderer.save_ppm("out.ppm")
"""

import logging
import os
import time
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti

from sdf_tracer.camera.pinhole import PinholeCamera, setup_camera
from sdf_tracer.core.constants import IMAGE_HEIGHT, IMAGE_WIDTH
from sdf_tracer.core.integrator import (
    clear_ray_counts,
    clear_render_target,
    get_framebuffer_numpy,
    get_ray_counts,
    render_image,
    setup_render_target,
)
from sdf_tracer.core.marcher import clear_degenerate_normal_count, get_degenerate_normal_count
from sdf_tracer.preview.export import encode_ppm, image_to_uint8, save_ppm

logger = logging.getLogger(__name__)


@dataclass
class RenderStats:
    """Statistics collected during one render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        elapsed_seconds: Wall-clock time of the render, including the sync.
        rays_per_depth: Number of rays cast at each recursion depth. The last
            entry counts rays cut off by the depth limit.
        degenerate_normals: Hits whose primitive could not provide a normal.
    """

    width: int
    height: int
    elapsed_seconds: float
    rays_per_depth: tuple[int, ...]
    degenerate_normals: int

    @property
    def total_rays(self) -> int:
        """Total number of rays cast, excluding shadow rays."""
        return sum(self.rays_per_depth)


def log_render_statistics(stats: RenderStats) -> None:
    """Report render statistics through the module logger."""
    logger.info(
        "Rendered %dx%d in %.3fs (%d rays)",
        stats.width,
        stats.height,
        stats.elapsed_seconds,
        stats.total_rays,
    )
    for depth, count in enumerate(stats.rays_per_depth):
        logger.debug("Depth %d: %d rays", depth, count)
    if stats.degenerate_normals > 0:
        logger.warning(
            "%d hits had no defined surface normal and were shaded with a zero normal",
            stats.degenerate_normals,
        )


class Renderer:
    """Renders the current scene into a linear color buffer.

    The scene itself lives in the global Taichi fields filled by the
    SceneManager; the renderer owns the camera setup and the render target
    size.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        camera: The camera configuration in use.
    """

    def __init__(
        self,
        width: int = IMAGE_WIDTH,
        height: int = IMAGE_HEIGHT,
        camera: PinholeCamera | None = None,
    ) -> None:
        """Initialize the renderer.

        Args:
            width: Image width in pixels (max 2048).
            height: Image height in pixels (max 2048).
            camera: Camera configuration. Defaults to the 60 degree pinhole.

        Raises:
            ValueError: If the dimensions or the field of view are invalid.
        """
        self._width = width
        self._height = height
        self._camera = camera if camera is not None else PinholeCamera()
        setup_camera(self._camera)
        setup_render_target(width, height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def camera(self) -> PinholeCamera:
        """Get the camera configuration."""
        return self._camera

    def render(self) -> RenderStats:
        """Render every pixel once and collect statistics.

        Previous buffer contents and counters are discarded.

        Returns:
            RenderStats for this render.
        """
        # Another renderer may have changed the shared camera or target
        setup_camera(self._camera)
        setup_render_target(self._width, self._height)
        clear_ray_counts()
        clear_degenerate_normal_count()

        start = time.perf_counter()
        render_image()
        ti.sync()
        elapsed = time.perf_counter() - start

        stats = RenderStats(
            width=self._width,
            height=self._height,
            elapsed_seconds=elapsed,
            rays_per_depth=get_ray_counts(),
            degenerate_normals=get_degenerate_normal_count(),
        )
        log_render_statistics(stats)
        return stats

    def reset(self) -> None:
        """Clear the color buffer without changing the image size."""
        clear_render_target()

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the linear rendered image.

        Returns:
            NumPy array of shape (height, width, 3) with dtype float32,
            row 0 at the top. Values are not tone mapped.
        """
        return get_framebuffer_numpy()

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the tone mapped image as an 8-bit NumPy array."""
        return image_to_uint8(self.get_image_numpy())

    def to_ppm_bytes(self) -> bytes:
        """Encode the rendered image as binary PPM."""
        return encode_ppm(self.get_image_numpy())

    def save_ppm(self, filepath: str | os.PathLike[str]) -> None:
        """Save the rendered image as a binary PPM file.

        Args:
            filepath: Path to save the image (e.g., "out.ppm").

        Raises:
            OSError: If the file cannot be written.
        """
        save_ppm(self.get_image_numpy(), filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return f"Renderer(width={self.width}, height={self.height}, vfov={self.camera.vfov})"
