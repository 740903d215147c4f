"""Sphere primitive as a signed distance field.

This module provides the Sphere dataclass, its exact signed distance
function, and its analytic normal. The distance is 1-Lipschitz, which is
what sphere tracing needs to step safely.

An analytic ray-sphere intersection is also provided. The marcher never
uses it; it serves as a closed-form reference for the marched distance.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from sdf_tracer.geometry.sphere import Sphere, sphere_distance
    >>> sphere = Sphere(center=ti.math.vec3(-3, 0, -16), radius=2.0)
    >>> # Use sphere_distance within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from sdf_tracer.core.constants import EPSILON

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.func
def sphere_distance(sphere: Sphere, point: vec3) -> ti.f32:
    """Signed distance from a point to the sphere surface.

    Negative inside, zero on the surface, positive outside.
    """
    return tm.length(point - sphere.center) - sphere.radius


@ti.func
def sphere_normal(sphere: Sphere, point: vec3):
    """Outward unit normal of the sphere at a point.

    The normal is undefined at the center. Points closer than EPSILON to the
    center report failure instead of dividing by a vanishing length.

    Args:
        sphere: The sphere.
        point: The query point, usually on or near the surface.

    Returns:
        A tuple of (ok, normal) where ok is 1 on success and 0 for a
        degenerate query, in which case normal is the zero vector.
    """
    to_point = point - sphere.center
    dist = tm.length(to_point)
    ok = 0
    normal = vec3(0.0, 0.0, 0.0)
    if dist >= EPSILON:
        ok = 1
        normal = to_point / dist
    return ok, normal


@ti.func
def intersect_sphere(origin: vec3, direction: vec3, sphere: Sphere):
    """Closed-form distance along a ray to the first sphere crossing.

    Uses the geometric construction: project the center onto the ray (tca),
    then step back by the half chord (thc). Rays whose closest approach lies
    behind the origin are rejected.

    Args:
        origin: The starting point of the ray.
        direction: The normalized ray direction.
        sphere: The sphere to intersect.

    Returns:
        A tuple of (hit, t) where hit is 1 if the ray crosses the sphere in
        front of its origin and t is the distance to the crossing.
    """
    to_center = sphere.center - origin
    tca = tm.dot(to_center, direction)
    d2 = tm.dot(to_center, to_center) - tca * tca
    r2 = sphere.radius * sphere.radius
    hit = 0
    t = 0.0
    if tca >= 0.0 and d2 <= r2:
        thc = ti.sqrt(r2 - d2)
        t0 = tca - thc
        t1 = tca + thc
        if t0 < 0.0:
            t0 = t1
        if t0 >= 0.0:
            hit = 1
            t = t0
    return hit, t
