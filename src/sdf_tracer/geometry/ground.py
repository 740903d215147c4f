"""Bounded checkerboard ground plane.

The plane y = -4 is not part of the distance field. The marcher falls back
to it when sphere tracing finds no primitive. Only a finite patch counts as
a hit: |x| < 10 and -30 < z < -10, and the hit must lie closer than
GROUND_HIT_LIMIT along the ray.
"""

import taichi as ti
import taichi.math as tm

from sdf_tracer.core.constants import EPSILON, MAX_DISTANCE

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# =============================================================================
# Ground Plane Parameters
# =============================================================================

GROUND_Y = -4.0
GROUND_HALF_WIDTH = 10.0
GROUND_Z_NEAR = -10.0
GROUND_Z_FAR = -30.0

# Hits at or beyond this distance are treated as misses
GROUND_HIT_LIMIT = 1000.0

GROUND_COLOR_ODD = (0.3, 0.3, 0.3)  # Light gray
GROUND_COLOR_EVEN = (0.3, 0.2, 0.1)  # Brown


@ti.func
def checker_color(x: ti.f32, z: ti.f32) -> vec3:
    """Tile color at a point of the ground plane.

    Tiles are 2 units wide. The x index is shifted by 1000 so it stays
    positive across the patch.
    """
    tile = ti.cast(ti.floor(0.5 * x + 1000.0), ti.i32) + ti.cast(ti.floor(0.5 * z), ti.i32)
    color = vec3(GROUND_COLOR_EVEN[0], GROUND_COLOR_EVEN[1], GROUND_COLOR_EVEN[2])
    if (tile & 1) == 1:
        color = vec3(GROUND_COLOR_ODD[0], GROUND_COLOR_ODD[1], GROUND_COLOR_ODD[2])
    return color


@ti.func
def intersect_ground(origin: vec3, direction: vec3):
    """Intersect a ray with the bounded ground patch.

    Args:
        origin: The starting point of the ray.
        direction: The normalized ray direction.

    Returns:
        A tuple of (hit, t, point) where hit is 1 if the ray crosses the
        patch in front of its origin within GROUND_HIT_LIMIT.
    """
    plane_dist = MAX_DISTANCE
    point = vec3(0.0, 0.0, 0.0)
    t = 0.0
    if ti.abs(direction.y) > EPSILON:
        t = -(origin.y - GROUND_Y) / direction.y
        point = origin + direction * t
        if (
            t > 0.0
            and ti.abs(point.x) < GROUND_HALF_WIDTH
            and point.z < GROUND_Z_NEAR
            and point.z > GROUND_Z_FAR
        ):
            plane_dist = t

    hit = 0
    if plane_dist < GROUND_HIT_LIMIT:
        hit = 1
    return hit, t, point
