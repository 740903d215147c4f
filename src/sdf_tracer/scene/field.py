"""Scene distance field over all stored primitives.

This module stores primitives in Taichi fields and evaluates the scene
distance field: the nearest non-negative primitive distance at a point,
found by a linear scan over every primitive of every kind.

Primitives that report a negative distance (the point is inside them) are
skipped. Once a ray has entered a volume, that volume stops attracting the
marcher, which then only converges on surfaces still ahead of it.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from sdf_tracer.scene.field import add_sphere, clear_scene, scene_distance
    >>> clear_scene()
    >>> add_sphere(ti.math.vec3(-3, 0, -16), 2.0, material_id=0)
    >>> # Use scene_distance within a Taichi kernel:
    >>> # dist, kind, index = scene_distance(point)
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from sdf_tracer.core.constants import MAX_DISTANCE
from sdf_tracer.geometry.box import Box, box_distance, box_normal
from sdf_tracer.geometry.sphere import Sphere, sphere_distance, sphere_normal

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


class PrimitiveKind(IntEnum):
    """Tag identifying which storage array a primitive lives in.

    NONE is returned by the scene field when no primitive qualifies.
    """

    NONE = -1
    SPHERE = 0
    BOX = 1


# Maximum number of primitives supported in the scene, per kind
MAX_SPHERES = 256
MAX_BOXES = 256

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Box storage: Structure of Arrays layout
box_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_BOXES)
box_half_extents = ti.Vector.field(3, dtype=ti.f32, shape=MAX_BOXES)
box_material_ids = ti.field(dtype=ti.i32, shape=MAX_BOXES)
num_boxes = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all primitives from the scene.

    Resets the primitive counts to zero. The actual field data is not
    cleared but will be overwritten when new primitives are added.
    """
    num_spheres[None] = 0
    num_boxes[None] = 0


def add_sphere(center: vec3, radius: float, material_id: int = 0) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (should be positive).
        material_id: The material index to associate with this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = center
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def add_box(center: vec3, half_extents: vec3, material_id: int = 0) -> int:
    """Add an axis-aligned box to the scene.

    Args:
        center: The center point of the box.
        half_extents: Half the box size along x, y, z (all positive).
        material_id: The material index to associate with this box.

    Returns:
        The index of the added box.

    Raises:
        RuntimeError: If the maximum number of boxes is exceeded.
    """
    idx = num_boxes[None]
    if idx >= MAX_BOXES:
        raise RuntimeError(f"Maximum number of boxes ({MAX_BOXES}) exceeded")
    box_centers[idx] = center
    box_half_extents[idx] = half_extents
    box_material_ids[idx] = material_id
    num_boxes[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def get_box_count() -> int:
    """Get the number of boxes in the scene."""
    return int(num_boxes[None])


@ti.func
def _get_sphere(i: ti.i32) -> Sphere:
    return Sphere(center=sphere_centers[i], radius=sphere_radii[i])


@ti.func
def _get_box(i: ti.i32) -> Box:
    return Box(center=box_centers[i], half_extents=box_half_extents[i])


@ti.func
def scene_distance(point: vec3):
    """Evaluate the scene distance field at a point.

    Scans all spheres, then all boxes, keeping the smallest non-negative
    distance. Ties keep the primitive found first.

    Args:
        point: The query point.

    Returns:
        A tuple of (distance, kind, index). When no primitive qualifies the
        result is (MAX_DISTANCE, PrimitiveKind.NONE, -1).
    """
    min_dist = MAX_DISTANCE
    hit_kind = int(PrimitiveKind.NONE)
    hit_index = -1

    for i in range(num_spheres[None]):
        dist = sphere_distance(_get_sphere(i), point)
        if dist >= 0.0 and dist < min_dist:
            min_dist = dist
            hit_kind = int(PrimitiveKind.SPHERE)
            hit_index = i

    for i in range(num_boxes[None]):
        dist = box_distance(_get_box(i), point)
        if dist >= 0.0 and dist < min_dist:
            min_dist = dist
            hit_kind = int(PrimitiveKind.BOX)
            hit_index = i

    return min_dist, hit_kind, hit_index


@ti.func
def primitive_normal(kind: ti.i32, index: ti.i32, point: vec3):
    """Dispatch a normal query to the primitive's kind.

    Returns:
        A tuple of (ok, normal); see sphere_normal and box_normal.
    """
    ok = 0
    normal = vec3(0.0, 0.0, 0.0)
    if kind == int(PrimitiveKind.SPHERE):
        ok, normal = sphere_normal(_get_sphere(index), point)
    elif kind == int(PrimitiveKind.BOX):
        ok, normal = box_normal(_get_box(index), point)
    return ok, normal


@ti.func
def primitive_material_id(kind: ti.i32, index: ti.i32) -> ti.i32:
    """Material index owned by a primitive, or -1 for an unknown kind."""
    material_id = -1
    if kind == int(PrimitiveKind.SPHERE):
        material_id = sphere_material_ids[index]
    elif kind == int(PrimitiveKind.BOX):
        material_id = box_material_ids[index]
    return material_id
