"""Unit tests for the pinhole camera.

Tests cover:
- Field of view validation and setup
- Primary ray origin and normalization
- Pixel-to-direction mapping (center, corners, row order)
"""

import math

import pytest
import taichi as ti


def _primary_ray(i, j, width, height):
    from sdf_tracer.camera.pinhole import get_ray

    origin = ti.field(dtype=ti.math.vec3, shape=())
    direction = ti.field(dtype=ti.math.vec3, shape=())

    @ti.kernel
    def test_kernel(pi: ti.i32, pj: ti.i32, w: ti.i32, h: ti.i32):
        ray = get_ray(pi, pj, w, h)
        origin[None] = ray.origin
        direction[None] = ray.direction

    test_kernel(i, j, width, height)
    return origin[None], direction[None]


class TestCameraSetup:
    """Tests for camera configuration."""

    def test_default_field_of_view(self):
        """Test that the default camera uses a 60 degree field of view."""
        from sdf_tracer.camera.pinhole import PinholeCamera, get_tan_half_fov, setup_camera

        setup_camera(PinholeCamera())
        assert abs(get_tan_half_fov() - math.tan(math.radians(30.0))) < 1e-6

    @pytest.mark.parametrize("vfov", [0.0, -10.0, 180.0, 270.0])
    def test_invalid_field_of_view_raises(self, vfov):
        """Test that degenerate fields of view are rejected."""
        from sdf_tracer.camera.pinhole import PinholeCamera, setup_camera

        with pytest.raises(ValueError, match="Field of view"):
            setup_camera(PinholeCamera(vfov=vfov))


class TestRayGeneration:
    """Tests for primary ray generation."""

    def test_center_ray_direction(self):
        """Test that the single pixel of a 1x1 image looks down -z."""
        from sdf_tracer.camera.pinhole import PinholeCamera, setup_camera

        setup_camera(PinholeCamera())
        origin, direction = _primary_ray(0, 0, 1, 1)

        assert origin[0] == 0.0 and origin[1] == 0.0 and origin[2] == 0.0
        assert abs(direction[0]) < 1e-6
        assert abs(direction[1]) < 1e-6
        assert abs(direction[2] + 1.0) < 1e-6

    def test_top_left_pixel_points_up_and_left(self):
        """Test that row 0 is the top of the image and column 0 the left."""
        from sdf_tracer.camera.pinhole import PinholeCamera, setup_camera

        setup_camera(PinholeCamera())
        _, direction = _primary_ray(0, 0, 1024, 768)

        assert direction[0] < 0.0
        assert direction[1] > 0.0
        assert direction[2] < 0.0

    def test_pixel_mapping_formula(self):
        """Test a pixel against the image plane construction."""
        from sdf_tracer.camera.pinhole import PinholeCamera, setup_camera

        setup_camera(PinholeCamera(vfov=60.0))
        width, height = 1024, 768
        i, j = 100, 700
        _, direction = _primary_ray(i, j, width, height)

        x = (i + 0.5) - width / 2.0
        y = -(j + 0.5) + height / 2.0
        z = -height / (2.0 * math.tan(math.radians(30.0)))
        norm = math.sqrt(x * x + y * y + z * z)
        for k, expected in enumerate((x / norm, y / norm, z / norm)):
            assert abs(direction[k] - expected) < 1e-5

    def test_corner_rays_symmetric(self):
        """Test that opposite corners mirror each other."""
        from sdf_tracer.camera.pinhole import PinholeCamera, setup_camera

        setup_camera(PinholeCamera())
        _, top_left = _primary_ray(0, 0, 64, 48)
        _, bottom_right = _primary_ray(63, 47, 64, 48)

        assert abs(top_left[0] + bottom_right[0]) < 1e-6
        assert abs(top_left[1] + bottom_right[1]) < 1e-6
        assert abs(top_left[2] - bottom_right[2]) < 1e-6

    def test_vertical_extent_matches_field_of_view(self):
        """Test that the top edge of the image is half the field of view up."""
        from sdf_tracer.camera.pinhole import PinholeCamera, setup_camera

        setup_camera(PinholeCamera(vfov=90.0))
        # Pixel centers of a tall 1-column image approach the top edge
        _, direction = _primary_ray(0, 0, 1, 1000)

        angle = math.degrees(math.atan2(direction[1], -direction[2]))
        assert abs(angle - 45.0) < 0.1

    def test_ray_direction_normalized(self):
        """Test that generated directions have unit length."""
        from sdf_tracer.camera.pinhole import PinholeCamera, setup_camera

        setup_camera(PinholeCamera(vfov=40.0))
        for i, j in [(0, 0), (13, 7), (31, 23)]:
            _, d = _primary_ray(i, j, 32, 24)
            assert abs(math.sqrt(d[0] ** 2 + d[1] ** 2 + d[2] ** 2) - 1.0) < 1e-5
