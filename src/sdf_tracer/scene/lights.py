"""Point light storage.

Lights are isotropic point sources with a scalar intensity. They are fixed
for the whole render; the shader iterates over all of them for every hit,
marching one shadow ray per light.
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Maximum number of point lights in the scene
MAX_LIGHTS = 16

light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_intensities = ti.field(dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_lights() -> None:
    """Remove all lights."""
    num_lights[None] = 0


def add_light(position: vec3, intensity: float) -> int:
    """Add a point light.

    Args:
        position: World-space position of the light.
        intensity: Scalar intensity (should be positive).

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
    """
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_positions[idx] = position
    light_intensities[idx] = intensity
    num_lights[None] = idx + 1
    return idx


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])
