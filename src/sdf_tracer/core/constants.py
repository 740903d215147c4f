"""Fixed rendering constants.

Every tunable the marcher, shader, and renderer depend on lives here so that
Taichi captures them as compile-time constants. Nothing in this module is
mutated at runtime.
"""

from typing import Final

# =============================================================================
# Ray Marching
# =============================================================================

# Distance reported by the scene field when no primitive qualifies
MAX_DISTANCE: Final = 9999.0

# Hit threshold, initial marching depth, and self-intersection offset
EPSILON: Final = 1e-3

# Sphere tracing step budget per ray
MAX_MARCHING_STEPS: Final = 128

# =============================================================================
# Shading
# =============================================================================

# Rays deeper than this return the background color without marching
MAX_RECURSION_DEPTH: Final = 4

BACKGROUND_COLOR: Final = (0.2, 0.7, 0.8)

# =============================================================================
# Image
# =============================================================================

IMAGE_WIDTH: Final = 1024
IMAGE_HEIGHT: Final = 768

# Vertical field of view in degrees
FIELD_OF_VIEW: Final = 60.0
