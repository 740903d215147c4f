"""Scene manager that owns primitives, materials, and lights.

This module provides the host-side API for building a scene. The
SceneManager validates input, writes it into the Taichi field storage, and
keeps a Python-side record of everything it added.

The manager owns the scene: primitives and lights exist from the moment they
are added until clear() is called or a new manager is created. Rendering
only reads the stored data.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from sdf_tracer.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> ivory = scene.add_material(1.0, (0.6, 0.3, 0.1, 0.0), (0.4, 0.4, 0.3), 50.0)
    >>> scene.add_sphere((-3.0, 0.0, -16.0), 2.0, ivory)
    >>> scene.add_light((-20.0, 20.0, 20.0), 1.5)
"""

from dataclasses import dataclass

import taichi.math as tm

from sdf_tracer.materials.material import (
    MAX_MATERIALS,
    add_material,
    clear_materials,
    get_material_count,
)
from sdf_tracer.scene.field import (
    MAX_BOXES,
    MAX_SPHERES,
    PrimitiveKind,
    add_box,
    add_sphere,
    clear_scene,
    get_box_count,
    get_sphere_count,
)
from sdf_tracer.scene.lights import MAX_LIGHTS, add_light, clear_lights, get_light_count

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass
class MaterialInfo:
    """Information about a registered material.

    Attributes:
        material_id: The material index.
        refractive_index: Index of refraction.
        albedo: Weights for (diffuse, specular, reflect, refract).
        diffuse_color: RGB diffuse color.
        specular_exponent: Phong exponent.
    """

    material_id: int
    refractive_index: float
    albedo: tuple[float, float, float, float]
    diffuse_color: tuple[float, float, float]
    specular_exponent: float


@dataclass
class PrimitiveInfo:
    """Information about a primitive in the scene.

    Attributes:
        kind: The primitive kind.
        index: The index in the storage arrays of that kind.
        center: The defining center point.
        size: Radius for spheres, half extents for boxes.
        material_id: The material index assigned to the primitive.
    """

    kind: PrimitiveKind
    index: int
    center: tuple[float, float, float]
    size: float | tuple[float, float, float]
    material_id: int


@dataclass
class LightInfo:
    """Information about a point light.

    Attributes:
        index: The index in the light storage arrays.
        position: World-space position.
        intensity: Scalar intensity.
    """

    index: int
    position: tuple[float, float, float]
    intensity: float


def _as_vec3(name: str, values: tuple[float, float, float]) -> vec3:
    if len(values) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(values)}")
    return vec3(float(values[0]), float(values[1]), float(values[2]))


class SceneManager:
    """Owning scene builder for primitives, materials, and lights.

    Attributes:
        materials: List of MaterialInfo for all registered materials.
        primitives: List of PrimitiveInfo in insertion order.
        lights: List of LightInfo in insertion order.

    Example:
        >>> scene = SceneManager()
        >>> glass = scene.add_material(1.5, (0.0, 0.5, 0.1, 0.8), (0.6, 0.7, 0.8), 125.0)
        >>> scene.add_sphere((-1.0, -1.5, -12.0), 2.0, glass)
        >>> scene.add_light((30.0, 50.0, -25.0), 1.8)
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.materials: list[MaterialInfo] = []
        self.primitives: list[PrimitiveInfo] = []
        self.lights: list[LightInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        clear_materials()
        clear_lights()
        self.materials.clear()
        self.primitives.clear()
        self.lights.clear()

    def clear(self) -> None:
        """Clear the entire scene (primitives, materials, and lights)."""
        self._clear_all()

    # =========================================================================
    # Material Management
    # =========================================================================

    def add_material(
        self,
        refractive_index: float,
        albedo: tuple[float, float, float, float],
        diffuse_color: tuple[float, float, float],
        specular_exponent: float,
    ) -> int:
        """Add a material to the scene.

        Args:
            refractive_index: Index of refraction (> 0).
            albedo: Weights for (diffuse, specular, reflect, refract).
            diffuse_color: RGB diffuse color.
            specular_exponent: Phong exponent (>= 0).

        Returns:
            The material ID for this material.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If any parameter is out of range.
        """
        material_id = add_material(refractive_index, albedo, diffuse_color, specular_exponent)

        info = MaterialInfo(
            material_id=material_id,
            refractive_index=refractive_index,
            albedo=tuple(albedo),
            diffuse_color=tuple(diffuse_color),
            specular_exponent=specular_exponent,
        )
        self.materials.append(info)

        return material_id

    def get_material_count(self) -> int:
        """Get the total number of materials in the scene."""
        return get_material_count()

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get information about a material by ID.

        Args:
            material_id: The material index.

        Returns:
            MaterialInfo for the material, or None if not found.
        """
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    def _check_material_id(self, material_id: int) -> None:
        if material_id < 0 or material_id >= get_material_count():
            raise ValueError(f"Invalid material_id: {material_id}")

    # =========================================================================
    # Primitive Management
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere (> 0).
            material_id: The material ID to assign to the sphere.

        Returns:
            The index of the added sphere.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
            ValueError: If the radius or material_id is invalid.
        """
        if radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        self._check_material_id(material_id)

        sphere_index = add_sphere(_as_vec3("center", center), radius, material_id)

        self.primitives.append(
            PrimitiveInfo(
                kind=PrimitiveKind.SPHERE,
                index=sphere_index,
                center=tuple(center),
                size=radius,
                material_id=material_id,
            )
        )
        return sphere_index

    def add_box(
        self,
        center: tuple[float, float, float],
        half_extents: tuple[float, float, float],
        material_id: int,
    ) -> int:
        """Add an axis-aligned box to the scene.

        Args:
            center: The center point of the box as (x, y, z).
            half_extents: Half the box size along x, y, z (all > 0).
            material_id: The material ID to assign to the box.

        Returns:
            The index of the added box.

        Raises:
            RuntimeError: If the maximum number of boxes is exceeded.
            ValueError: If an extent or the material_id is invalid.
        """
        extents = _as_vec3("half_extents", half_extents)
        if min(half_extents) <= 0.0:
            raise ValueError(f"Box half extents must be positive, got {half_extents}")
        self._check_material_id(material_id)

        box_index = add_box(_as_vec3("center", center), extents, material_id)

        self.primitives.append(
            PrimitiveInfo(
                kind=PrimitiveKind.BOX,
                index=box_index,
                center=tuple(center),
                size=tuple(half_extents),
                material_id=material_id,
            )
        )
        return box_index

    # =========================================================================
    # Light Management
    # =========================================================================

    def add_light(self, position: tuple[float, float, float], intensity: float) -> int:
        """Add a point light to the scene.

        Args:
            position: World-space position as (x, y, z).
            intensity: Scalar intensity (> 0).

        Returns:
            The index of the added light.

        Raises:
            RuntimeError: If the maximum number of lights is exceeded.
            ValueError: If the intensity is not positive.
        """
        if intensity <= 0.0:
            raise ValueError(f"Light intensity must be positive, got {intensity}")

        light_index = add_light(_as_vec3("position", position), intensity)
        self.lights.append(LightInfo(index=light_index, position=tuple(position), intensity=intensity))
        return light_index

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return get_sphere_count()

    def get_box_count(self) -> int:
        """Get the number of boxes in the scene."""
        return get_box_count()

    def get_primitive_count(self) -> int:
        """Get the total number of primitives in the scene."""
        return self.get_sphere_count() + self.get_box_count()

    def get_light_count(self) -> int:
        """Get the number of lights in the scene."""
        return get_light_count()

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_spheres() -> int:
        """Get the maximum number of spheres supported."""
        return MAX_SPHERES

    @staticmethod
    def get_max_boxes() -> int:
        """Get the maximum number of boxes supported."""
        return MAX_BOXES

    @staticmethod
    def get_max_materials() -> int:
        """Get the maximum number of materials supported."""
        return MAX_MATERIALS

    @staticmethod
    def get_max_lights() -> int:
        """Get the maximum number of lights supported."""
        return MAX_LIGHTS
