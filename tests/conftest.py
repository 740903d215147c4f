"""Pytest configuration for renderer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene data and render counters before and after each test.

    This ensures tests are isolated from each other.
    """
    # Import here so that Taichi is initialized before fields are allocated
    from sdf_tracer.core.integrator import clear_ray_counts
    from sdf_tracer.core.marcher import clear_degenerate_normal_count
    from sdf_tracer.materials.material import clear_materials
    from sdf_tracer.scene.field import clear_scene
    from sdf_tracer.scene.lights import clear_lights

    def _clear_all():
        clear_scene()
        clear_materials()
        clear_lights()
        clear_ray_counts()
        clear_degenerate_normal_count()

    _clear_all()

    yield

    _clear_all()
