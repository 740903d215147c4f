"""Ray data structure and optics utilities for Whitted-style shading.

This module provides the Ray dataclass and the vector optics the shader is
built from: mirror reflection, Snell refraction, and the exact Fresnel
reflectance split. All operations are Taichi functions for use inside kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from sdf_tracer.core.ray import Ray, ray_at, reflect
    >>> # Use within a Taichi kernel:
    >>> # bounced = reflect(vec3(0.0, 0.0, -1.0), vec3(0.0, 0.0, 1.0))
"""

import taichi as ti
import taichi.math as tm

from sdf_tracer.core.constants import EPSILON

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3), normalized by
            every producer in this package.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(origin: vec3, direction: vec3, t: ti.f32) -> vec3:
    """Compute the point origin + t * direction."""
    return origin + t * direction


@ti.func
def offset_ray_origin(point: vec3, normal: vec3, direction: vec3) -> vec3:
    """Offset a secondary ray origin to avoid hitting the surface it leaves.

    The point is pushed EPSILON along the normal, toward the side of the
    surface the new ray travels into: below the surface when the direction
    points against the normal, above it otherwise.

    Args:
        point: The surface point the ray starts from.
        normal: The surface normal at the point.
        direction: The direction of the new ray.

    Returns:
        The offset origin point.
    """
    offset_dir = normal
    if tm.dot(direction, normal) < 0.0:
        offset_dir = -normal
    return point + EPSILON * offset_dir


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - normal * 2.0 * tm.dot(incident, normal)


@ti.func
def refract(incident: vec3, normal: vec3, eta_t: ti.f32, eta_i: ti.f32) -> vec3:
    """Refract an incident vector through a surface using Snell's law.

    When the incident direction comes from inside the medium (the cosine
    against the outward normal is negative after negation), the normal is
    flipped and the two refractive indices swap roles.

    A negative discriminant means there is no transmitted ray. The function
    still returns a direction, the fixed vector (1, 0, 0), so the shader can
    keep compositing a refract term without a special case.

    Args:
        incident: The incoming direction vector (should be normalized).
        normal: The outward surface normal (should be normalized).
        eta_t: Refractive index on the far side of an entering ray.
        eta_i: Refractive index on the near side of an entering ray.

    Returns:
        The refracted direction vector (not normalized), or (1, 0, 0).
    """
    cos_i = -tm.clamp(tm.dot(incident, normal), -1.0, 1.0)
    n = normal
    n_i = eta_i
    n_t = eta_t
    if cos_i < 0.0:
        # Ray exits the medium: swap the media and flip the normal
        cos_i = -cos_i
        n = -normal
        n_i = eta_t
        n_t = eta_i

    eta = n_i / n_t
    k = 1.0 - eta * eta * (1.0 - cos_i * cos_i)
    result = vec3(1.0, 0.0, 0.0)
    if k >= 0.0:
        result = incident * eta + n * (eta * cos_i - ti.sqrt(k))
    return result


@ti.func
def fresnel(incident: vec3, normal: vec3, ior: ti.f32) -> ti.f32:
    """Compute the reflected fraction with the exact Fresnel equations.

    Averages the s- and p-polarized reflectances. The outside medium has
    index 1. Total internal reflection (transmitted sine >= 1) yields 1.

    Args:
        incident: The incoming ray direction (should be normalized).
        normal: The outward surface normal (should be normalized).
        ior: Refractive index of the material (> 0).

    Returns:
        The reflectance coefficient kr in [0, 1].
    """
    cos_i = tm.clamp(tm.dot(incident, normal), -1.0, 1.0)
    eta_i = 1.0
    eta_t = ior
    if cos_i > 0.0:
        eta_i = ior
        eta_t = 1.0

    sin_t = eta_i / eta_t * ti.sqrt(tm.max(0.0, 1.0 - cos_i * cos_i))

    kr = 1.0
    if sin_t < 1.0:
        cos_t = ti.sqrt(tm.max(0.0, 1.0 - sin_t * sin_t))
        cos_i = ti.abs(cos_i)
        r_s = ((eta_t * cos_i) - (eta_i * cos_t)) / ((eta_t * cos_i) + (eta_i * cos_t))
        r_p = ((eta_i * cos_i) - (eta_t * cos_t)) / ((eta_i * cos_i) + (eta_t * cos_t))
        kr = (r_s * r_s + r_p * r_p) / 2.0
    return kr
