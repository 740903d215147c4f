"""Whitted-style integrator for sphere-traced SDF scenes.

This module implements the shading kernel: every camera ray is marched into
the scene, and each hit spawns a refracted ray (unless Fresnel reports total
reflection), a reflected ray, and one shadow ray per light. The final color
is a fixed-weight blend of the four terms using the material albedo.

Key features:
    - Exact Fresnel split gating the refracted branch
    - Reflection and refraction depth capped at MAX_RECURSION_DEPTH
    - Marched shadow rays for point lights
    - Phong diffuse and specular terms
    - Self-intersection avoidance with ray offset
    - Per-depth ray counters for render statistics

Taichi functions cannot recurse at runtime. cast_ray walks the reflect/refract
tree with a small per-ray stack of (origin, direction, depth, weight) frames
instead. The color of a hit is linear in the colors of its two child rays, so
each child carries its parent's weight times the matching albedo term and
adds its own contribution straight into the result. The refracted child is
popped before the reflected one, the same branch order as a recursive caster.

Note: the Fresnel coefficient only decides whether a refracted ray is
traced. It does not weight the reflected and refracted colors; the albedo
weights alone do.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from sdf_tracer.core.integrator import render_image, setup_render_target
    >>> from sdf_tracer.scene.four_spheres import create_four_spheres_scene
    >>> from sdf_tracer.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_four_spheres_scene()
    >>> setup_camera(camera)
    >>> setup_render_target(1024, 768)
    >>> render_image()
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from sdf_tracer.camera.pinhole import get_ray
from sdf_tracer.core.constants import BACKGROUND_COLOR, MAX_RECURSION_DEPTH
from sdf_tracer.core.marcher import HitRecord, march
from sdf_tracer.core.ray import fresnel, offset_ray_origin, reflect, refract
from sdf_tracer.scene.lights import light_intensities, light_positions, num_lights

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Ray Statistics
# =============================================================================

# Number of rays traced per recursion depth. Index MAX_RECURSION_DEPTH + 1
# counts the rays cut off with the background color without marching.
_ray_counts = ti.field(dtype=ti.i32, shape=MAX_RECURSION_DEPTH + 2)


def clear_ray_counts() -> None:
    """Reset the per-depth ray counters."""
    _ray_counts.fill(0)


def get_ray_counts() -> tuple[int, ...]:
    """Get the number of rays cast at each recursion depth.

    Returns:
        Tuple of counts indexed by depth, from 0 to MAX_RECURSION_DEPTH + 1.
    """
    return tuple(int(c) for c in _ray_counts.to_numpy())


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Linear (not tone mapped) color per pixel, indexed [column, row]
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffer.

    Sets the active image dimensions and clears the buffer. The buffer is
    preallocated to MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT.

    Args:
        width: Image width in pixels (1 to MAX_IMAGE_WIDTH).
        height: Image height in pixels (1 to MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the color buffer to zero."""
    _color_buffer.fill(0.0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Shading
# =============================================================================


@ti.func
def direct_lighting(point: vec3, normal: vec3, direction: vec3, specular_exponent: ti.f32):
    """Accumulate unoccluded diffuse and specular intensity from all lights.

    A shadow ray is marched from the hit point (offset toward the light side
    of the surface) to each light. Any surface hit strictly closer than the
    light blocks it.

    Args:
        point: The shaded surface point.
        normal: The surface normal at the point.
        direction: The direction of the ray that hit the point.
        specular_exponent: Phong exponent of the surface material.

    Returns:
        A tuple of (diffuse_intensity, specular_intensity).
    """
    diffuse = 0.0
    specular = 0.0

    for k in range(num_lights[None]):
        to_light = light_positions[k] - point
        light_dir = tm.normalize(to_light)
        light_distance = tm.length(to_light)

        shadow_origin = offset_ray_origin(point, normal, light_dir)
        shadow = march(shadow_origin, light_dir)
        occluded = shadow.hit == 1 and tm.length(shadow.point - shadow_origin) < light_distance

        if not occluded:
            intensity = light_intensities[k]
            diffuse += intensity * tm.max(0.0, tm.dot(light_dir, normal))
            highlight = tm.max(0.0, -tm.dot(reflect(-light_dir, normal), direction))
            specular += (highlight**specular_exponent) * intensity

    return diffuse, specular


@ti.func
def _local_color(direction: vec3, rec: HitRecord) -> vec3:
    """Diffuse and specular part of a hit's color."""
    material = rec.material
    diffuse, specular = direct_lighting(
        rec.point, rec.normal, direction, material.specular_exponent
    )
    return (
        material.diffuse_color * diffuse * material.albedo[0]
        + vec3(1.0, 1.0, 1.0) * specular * material.albedo[1]
    )


# Pending frames never exceed one sibling per depth plus the two newest children
RAY_STACK_SIZE = MAX_RECURSION_DEPTH + 3


@ti.func
def cast_ray(origin: vec3, direction: vec3) -> vec3:
    """Trace one camera ray and its reflected and refracted descendants.

    Each hit contributes its direct light, then queues a refracted ray
    (unless Fresnel reports total reflection) weighted by albedo[3] and a
    reflected ray weighted by albedo[2], one level deeper. Rays deeper than
    MAX_RECURSION_DEPTH, and rays that hit nothing, contribute the background
    color.

    Args:
        origin: The starting point of the ray.
        direction: The normalized ray direction.

    Returns:
        The linear RGB color carried by the ray.
    """
    background = vec3(BACKGROUND_COLOR[0], BACKGROUND_COLOR[1], BACKGROUND_COLOR[2])
    color = vec3(0.0, 0.0, 0.0)

    stack_origins = ti.Matrix.zero(ti.f32, RAY_STACK_SIZE, 3)
    stack_directions = ti.Matrix.zero(ti.f32, RAY_STACK_SIZE, 3)
    stack_depths = ti.Vector.zero(ti.i32, RAY_STACK_SIZE)
    stack_weights = ti.Vector.zero(ti.f32, RAY_STACK_SIZE)

    for k in ti.static(range(3)):
        stack_origins[0, k] = origin[k]
        stack_directions[0, k] = direction[k]
    stack_weights[0] = 1.0
    top = 1

    while top > 0:
        top -= 1
        ray_origin = vec3(stack_origins[top, 0], stack_origins[top, 1], stack_origins[top, 2])
        ray_dir = vec3(stack_directions[top, 0], stack_directions[top, 1], stack_directions[top, 2])
        depth = stack_depths[top]
        weight = stack_weights[top]
        _ray_counts[depth] += 1

        if depth > MAX_RECURSION_DEPTH:
            color += background * weight
        else:
            rec = march(ray_origin, ray_dir)
            if rec.hit == 0:
                color += background * weight
            else:
                point = rec.point
                normal = rec.normal
                material = rec.material
                color += _local_color(ray_dir, rec) * weight

                # Reflected frame first, so the refracted one is popped first
                reflect_dir = tm.normalize(reflect(ray_dir, normal))
                reflect_origin = offset_ray_origin(point, normal, reflect_dir)
                for k in ti.static(range(3)):
                    stack_origins[top, k] = reflect_origin[k]
                    stack_directions[top, k] = reflect_dir[k]
                stack_depths[top] = depth + 1
                stack_weights[top] = weight * material.albedo[2]
                top += 1

                kr = fresnel(ray_dir, normal, material.refractive_index)
                if kr < 1.0:
                    refract_dir = tm.normalize(
                        refract(ray_dir, normal, material.refractive_index, 1.0)
                    )
                    refract_origin = offset_ray_origin(point, normal, refract_dir)
                    for k in ti.static(range(3)):
                        stack_origins[top, k] = refract_origin[k]
                        stack_directions[top, k] = refract_dir[k]
                    stack_depths[top] = depth + 1
                    stack_weights[top] = weight * material.albedo[3]
                    top += 1

    return color


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_kernel(width: ti.i32, height: ti.i32):
    """Render one sample per pixel into the color buffer.

    Each pixel is an independent task writing only its own slot.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
    """
    for i, j in ti.ndrange(width, height):
        ray = get_ray(i, j, width, height)
        _color_buffer[i, j] = cast_ray(ray.origin, ray.direction)


@ti.kernel
def _render_single_pixel(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    """Render a specific pixel without touching the color buffer.

    Used for testing and debugging individual pixel rendering.
    """
    ray = get_ray(pixel_i, pixel_j, width, height)
    return cast_ray(ray.origin, ray.direction)


@ti.kernel
def _trace_kernel(origin: vec3, direction: vec3) -> vec3:
    """Cast a single arbitrary ray from depth 0."""
    return cast_ray(origin, tm.normalize(direction))


# =============================================================================
# Public Rendering API
# =============================================================================


def render_image() -> None:
    """Render every pixel of the active render target.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    _render_kernel(width, height)


def render_pixel(pixel_i: int, pixel_j: int) -> tuple[float, float, float]:
    """Render a single pixel of the active render target.

    This is a Python-callable function for testing. For production rendering,
    use render_image() which processes all pixels in parallel.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).

    Returns:
        Tuple of (R, G, B) linear color values.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    color = _render_single_pixel(pixel_i, pixel_j, width, height)

    return (float(color[0]), float(color[1]), float(color[2]))


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> tuple[float, float, float]:
    """Cast one ray through the current scene.

    Args:
        origin: Ray origin as (x, y, z).
        direction: Ray direction as (x, y, z); normalized before casting.

    Returns:
        Tuple of (R, G, B) linear color values.
    """
    color = _trace_kernel(vec3(*origin), vec3(*direction))
    return (float(color[0]), float(color[1]), float(color[2]))


def get_framebuffer_numpy() -> npt.NDArray[np.float32]:
    """Get the rendered linear image as a NumPy array.

    Values are not clamped; use the export tone mapping for display.

    Returns:
        NumPy array of shape (height, width, 3), row 0 at the top.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    # Get raw image data (full buffer) and extract active region
    full_image = _color_buffer.to_numpy()
    image = full_image[:width, :height, :]

    # Transpose from (width, height, 3) to (height, width, 3)
    image = np.transpose(image, (1, 0, 2))

    return np.ascontiguousarray(image, dtype=np.float32)
