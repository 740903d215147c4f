"""Four spheres and three lights over a checkerboard.

This module provides a factory for the standard demonstration scene:

- Ivory sphere at (-3, 0, -16), radius 2
- Glass sphere at (-1, -1.5, -12), radius 2
- Red rubber sphere at (1.5, -0.5, -18), radius 3
- Mirror sphere at (7, 5, -18), radius 4
- Three point lights above and around the camera
- The checkerboard ground patch (always present, not part of the scene)

The camera is the fixed pinhole at the origin with a 60 degree field of view.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from sdf_tracer.scene.four_spheres import create_four_spheres_scene
    >>> from sdf_tracer.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_four_spheres_scene()
    >>> setup_camera(camera)
"""

from dataclasses import dataclass

from sdf_tracer.camera.pinhole import PinholeCamera
from sdf_tracer.core.constants import FIELD_OF_VIEW
from sdf_tracer.scene.manager import SceneManager


@dataclass(frozen=True)
class MaterialPreset:
    """Named material parameters for SceneManager.add_material."""

    refractive_index: float
    albedo: tuple[float, float, float, float]
    diffuse_color: tuple[float, float, float]
    specular_exponent: float


# =============================================================================
# Materials
# =============================================================================

# Opaque materials use refractive index 1.0 and a zero refract weight
IVORY = MaterialPreset(1.0, (0.6, 0.3, 0.1, 0.0), (0.4, 0.4, 0.3), 50.0)
GLASS = MaterialPreset(1.5, (0.0, 0.5, 0.1, 0.8), (0.6, 0.7, 0.8), 125.0)
RED_RUBBER = MaterialPreset(1.0, (0.9, 0.1, 0.0, 0.0), (0.3, 0.1, 0.1), 10.0)
MIRROR = MaterialPreset(1.0, (0.0, 10.0, 0.8, 0.0), (1.0, 1.0, 1.0), 1425.0)

# =============================================================================
# Geometry and Lights
# =============================================================================

# (center, radius, material)
SPHERES = (
    ((-3.0, 0.0, -16.0), 2.0, IVORY),
    ((-1.0, -1.5, -12.0), 2.0, GLASS),
    ((1.5, -0.5, -18.0), 3.0, RED_RUBBER),
    ((7.0, 5.0, -18.0), 4.0, MIRROR),
)

# (position, intensity)
LIGHTS = (
    ((-20.0, 20.0, 20.0), 1.5),
    ((30.0, 50.0, -25.0), 1.8),
    ((30.0, 20.0, 30.0), 1.7),
)


def create_four_spheres_scene() -> tuple[SceneManager, PinholeCamera]:
    """Create the four-sphere, three-light scene.

    Materials are registered in the order ivory, glass, red rubber, mirror,
    so their material IDs are 0 to 3.

    Returns:
        A tuple of (SceneManager, PinholeCamera) where:
        - SceneManager holds all materials, spheres, and lights
        - PinholeCamera is the fixed 60 degree camera
    """
    scene = SceneManager()

    material_ids: dict[MaterialPreset, int] = {}
    for preset in (IVORY, GLASS, RED_RUBBER, MIRROR):
        material_ids[preset] = scene.add_material(
            preset.refractive_index,
            preset.albedo,
            preset.diffuse_color,
            preset.specular_exponent,
        )

    for center, radius, preset in SPHERES:
        scene.add_sphere(center, radius, material_ids[preset])

    for position, intensity in LIGHTS:
        scene.add_light(position, intensity)

    return scene, PinholeCamera(vfov=FIELD_OF_VIEW)
