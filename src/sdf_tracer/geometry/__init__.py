"""Geometry module for signed distance field primitives.

This module provides the implicit surfaces the marcher walks through:

Components:
    sphere: Sphere primitive (exact distance, analytic normal, closed-form
        ray intersection used as a reference)
    box: Axis-aligned box primitive (exact distance, gradient normal)
    ground: Bounded checkerboard plane used when marching finds nothing

Every primitive exposes the same pair of Taichi functions:
    distance = <kind>_distance(primitive, point)
    ok, normal = <kind>_normal(primitive, point)

New primitive kinds must keep their distance 1-Lipschitz so that sphere
tracing never steps through a surface.
"""

from .box import Box, box_distance, box_normal
from .ground import checker_color, intersect_ground
from .sphere import Sphere, intersect_sphere, sphere_distance, sphere_normal

__all__ = [
    "Sphere",
    "sphere_distance",
    "sphere_normal",
    "intersect_sphere",
    "Box",
    "box_distance",
    "box_normal",
    "checker_color",
    "intersect_ground",
]
