"""Core rendering module.

This module contains the fundamental building blocks for sphere tracing:

Components:
    constants: Tolerances, limits, background color, and image defaults
    ray: Ray data structure, offsetting, reflection, refraction, Fresnel
    marcher: Sphere-tracing loop with the ground plane fallback
    integrator: Recursive Whitted-style shading and render kernels
    renderer: Host-side render wrapper with statistics and export

All compute-intensive operations use Taichi kernels.
"""

from .constants import (
    BACKGROUND_COLOR,
    EPSILON,
    FIELD_OF_VIEW,
    IMAGE_HEIGHT,
    IMAGE_WIDTH,
    MAX_DISTANCE,
    MAX_MARCHING_STEPS,
    MAX_RECURSION_DEPTH,
)
from .ray import Ray, fresnel, offset_ray_origin, ray_at, reflect, refract, vec3

# Note: marcher, integrator and renderer are NOT imported here because they
# allocate Taichi fields. Import them directly after ti.init(), e.g.:
#   from sdf_tracer.core.renderer import Renderer

__all__ = [
    "MAX_DISTANCE",
    "EPSILON",
    "MAX_MARCHING_STEPS",
    "MAX_RECURSION_DEPTH",
    "BACKGROUND_COLOR",
    "IMAGE_WIDTH",
    "IMAGE_HEIGHT",
    "FIELD_OF_VIEW",
    "Ray",
    "vec3",
    "ray_at",
    "offset_ray_origin",
    "reflect",
    "refract",
    "fresnel",
]
