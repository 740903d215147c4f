"""Axis-aligned box primitive as a signed distance field.

The box distance is exact (and therefore 1-Lipschitz): outside, it is the
Euclidean distance to the nearest face, edge, or corner; inside, it is minus
the distance to the nearest face.

Normals are estimated from the distance field by central differences, so the
same approach carries over to any primitive whose gradient has no simple
closed form.
"""

import taichi as ti
import taichi.math as tm

from sdf_tracer.core.constants import EPSILON

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Box:
    """An axis-aligned box.

    Attributes:
        center: The center point of the box (vec3).
        half_extents: Half the box size along each axis (all positive).
    """

    center: vec3
    half_extents: vec3


@ti.func
def box_distance(box: Box, point: vec3) -> ti.f32:
    """Signed distance from a point to the box surface."""
    q = ti.abs(point - box.center) - box.half_extents
    outside = tm.length(tm.max(q, 0.0))
    inside = tm.min(tm.max(q.x, tm.max(q.y, q.z)), 0.0)
    return outside + inside


@ti.func
def box_normal(box: Box, point: vec3):
    """Outward unit normal of the box from the distance gradient.

    The gradient vanishes where opposite faces are equally close (for
    example the center of a cube). Those queries report failure.

    Args:
        box: The box.
        point: The query point, usually on or near the surface.

    Returns:
        A tuple of (ok, normal) where ok is 1 on success and 0 for a
        degenerate query, in which case normal is the zero vector.
    """
    h = EPSILON * 0.5
    dx = vec3(h, 0.0, 0.0)
    dy = vec3(0.0, h, 0.0)
    dz = vec3(0.0, 0.0, h)
    gradient = vec3(
        box_distance(box, point + dx) - box_distance(box, point - dx),
        box_distance(box, point + dy) - box_distance(box, point - dy),
        box_distance(box, point + dz) - box_distance(box, point - dz),
    )
    length = tm.length(gradient)
    ok = 0
    normal = vec3(0.0, 0.0, 0.0)
    # A unit gradient measured over 2h has length 2h
    if length >= h:
        ok = 1
        normal = gradient / length
    return ok, normal
