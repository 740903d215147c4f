"""Phong-style material used by the Whitted shader.

A material carries four albedo weights that scale the diffuse, specular,
reflected, and refracted contributions of a hit. The weights are not required
to sum to one; the shader uses them as plain multipliers.

Materials are registered once at scene-build time and stored in Taichi fields
so that the marcher can copy a primitive's material into its hit record.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from sdf_tracer.materials.material import add_material
    >>> glass = add_material(1.5, (0.0, 0.5, 0.1, 0.8), (0.6, 0.7, 0.8), 125.0)
"""

from collections.abc import Sequence

import taichi as ti
import taichi.math as tm

# Type aliases for vectors using Taichi's math module
vec3 = tm.vec3
vec4 = tm.vec4


@ti.dataclass
class Material:
    """Surface response of a primitive.

    Attributes:
        refractive_index: Index of refraction (> 0). Only gates and bends
            the refracted ray; opaque materials typically use 1.0.
        albedo: Weights for (diffuse, specular, reflect, refract) terms.
        diffuse_color: RGB color scaled by the diffuse light intensity.
        specular_exponent: Phong exponent of the specular highlight (>= 0).
    """

    refractive_index: ti.f32
    albedo: vec4
    diffuse_color: vec3
    specular_exponent: ti.f32


@ti.func
def default_material() -> Material:
    """Material used by surfaces that are not registered primitives.

    Returns:
        A black, fully diffuse material with refractive index 1.
    """
    return Material(
        refractive_index=1.0,
        albedo=vec4(1.0, 0.0, 0.0, 0.0),
        diffuse_color=vec3(0.0, 0.0, 0.0),
        specular_exponent=0.0,
    )


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of materials in the scene
MAX_MATERIALS = 256

material_refractive_indices = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_albedos = ti.Vector.field(4, dtype=ti.f32, shape=MAX_MATERIALS)
material_diffuse_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_specular_exponents = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Clear all materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_materials[None] = 0


def _check_components(name: str, values: Sequence[float], count: int) -> None:
    if len(values) != count:
        raise ValueError(f"{name} must have {count} components, got {len(values)}")


def add_material(
    refractive_index: float,
    albedo: Sequence[float],
    diffuse_color: Sequence[float],
    specular_exponent: float,
) -> int:
    """Add a material to the material registry.

    Args:
        refractive_index: Index of refraction. Must be > 0.
        albedo: Four weights (diffuse, specular, reflect, refract).
        diffuse_color: RGB diffuse color.
        specular_exponent: Phong exponent. Must be >= 0.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any parameter is out of range or has the wrong arity.
    """
    if refractive_index <= 0.0:
        raise ValueError(f"Refractive index must be positive, got {refractive_index}")
    if specular_exponent < 0.0:
        raise ValueError(f"Specular exponent must be non-negative, got {specular_exponent}")
    _check_components("albedo", albedo, 4)
    _check_components("diffuse_color", diffuse_color, 3)

    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_refractive_indices[idx] = refractive_index
    material_albedos[idx] = [float(a) for a in albedo]
    material_diffuse_colors[idx] = [float(c) for c in diffuse_color]
    material_specular_exponents[idx] = specular_exponent
    num_materials[None] = idx + 1
    return idx


def get_material_count() -> int:
    """Get the number of materials in the registry."""
    return int(num_materials[None])


@ti.func
def get_material(material_idx: ti.i32) -> Material:
    """Get a copy of a registered material by index.

    Args:
        material_idx: The index of the material in the registry.

    Returns:
        The material record.
    """
    return Material(
        refractive_index=material_refractive_indices[material_idx],
        albedo=material_albedos[material_idx],
        diffuse_color=material_diffuse_colors[material_idx],
        specular_exponent=material_specular_exponents[material_idx],
    )
