"""Sphere-tracing ray marcher with a checkerboard ground fallback.

The marcher walks a ray through the scene distance field. Each step advances
by the distance to the nearest qualifying surface, which can never overshoot
a 1-Lipschitz field. A step shorter than EPSILON is a hit.

Marching stops early when no primitive qualifies at the current point. When
the step budget runs out or marching stops without a hit, the ray is tested
against the bounded ground plane instead.

Normal queries that fail (a hit point at a primitive's defining point) are
not fatal. The hit keeps a zero normal and an atomic counter records the
event so the host can report it after the kernel finishes.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from sdf_tracer.core.marcher import march
    >>> # Use within a Taichi kernel:
    >>> # rec = march(origin, direction)
    >>> # if rec.hit == 1: ...
"""

import taichi as ti
import taichi.math as tm

from sdf_tracer.core.constants import EPSILON, MAX_MARCHING_STEPS
from sdf_tracer.geometry.ground import checker_color, intersect_ground
from sdf_tracer.materials.material import Material, default_material, get_material
from sdf_tracer.scene.field import (
    PrimitiveKind,
    primitive_material_id,
    primitive_normal,
    scene_distance,
)

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.dataclass
class HitRecord:
    """Result of marching one ray.

    Attributes:
        hit: 1 if the ray hit a primitive or the ground patch, 0 otherwise.
        t: Distance travelled along the ray to the hit point.
        point: The hit point. Only valid if hit == 1.
        normal: The outward unit normal at the hit point, or the zero vector
            when the primitive could not provide one. Only valid if hit == 1.
        material: Copy of the hit surface's material. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    material: Material


# Number of hits whose primitive could not provide a normal
_degenerate_normal_count = ti.field(dtype=ti.i32, shape=())


def clear_degenerate_normal_count() -> None:
    """Reset the degenerate normal counter."""
    _degenerate_normal_count[None] = 0


def get_degenerate_normal_count() -> int:
    """Number of degenerate normal queries since the last reset."""
    return int(_degenerate_normal_count[None])


@ti.func
def _make_miss_record() -> HitRecord:
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material=default_material(),
    )


@ti.func
def _march_primitives(origin: vec3, direction: vec3) -> HitRecord:
    """Sphere-trace the distance field, ignoring the ground plane."""
    result = _make_miss_record()
    depth = EPSILON

    # Active flag for marching continuation
    active = 1

    for _ in range(MAX_MARCHING_STEPS):
        if active == 1:
            dist, kind, index = scene_distance(origin + direction * depth)

            if kind == int(PrimitiveKind.NONE):
                # Inside every primitive, or an empty scene
                active = 0
            else:
                depth += dist
                if dist < EPSILON:
                    point = origin + direction * depth
                    ok, normal = primitive_normal(kind, index, point)
                    if ok == 0:
                        _degenerate_normal_count[None] += 1
                    result = HitRecord(
                        hit=1,
                        t=depth,
                        point=point,
                        normal=normal,
                        material=get_material(primitive_material_id(kind, index)),
                    )
                    active = 0

    return result


@ti.func
def march(origin: vec3, direction: vec3) -> HitRecord:
    """March a ray through the scene and return the first surface hit.

    Args:
        origin: The starting point of the ray.
        direction: The normalized ray direction.

    Returns:
        A HitRecord. Primitive hits carry the primitive's material. Ground
        hits carry the default material with the tile color as diffuse color
        and an up-facing normal.
    """
    result = _march_primitives(origin, direction)

    if result.hit == 0:
        ground_hit, t, point = intersect_ground(origin, direction)
        if ground_hit == 1:
            material = default_material()
            material.diffuse_color = checker_color(point.x, point.z)
            result = HitRecord(
                hit=1,
                t=t,
                point=point,
                normal=vec3(0.0, 1.0, 0.0),
                material=material,
            )

    return result
