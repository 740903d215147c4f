"""Unit tests for ray utilities and optics.

Tests cover:
- Ray dataclass and ray_at
- Secondary ray origin offsetting
- Mirror reflection
- Snell refraction, including the inside/outside swap and total internal
  reflection
- Exact Fresnel reflectance
"""

import math

import taichi as ti


class TestRay:
    """Tests for the Ray dataclass and point evaluation."""

    def test_ray_at(self):
        """Test that ray_at walks t units along the direction."""
        from sdf_tracer.core.ray import Ray, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(1.0, 2.0, 3.0), direction=vec3(0.0, 0.0, -1.0))
            result[None] = ray_at(ray.origin, ray.direction, 2.5)

        test_kernel()
        p = result[None]
        assert abs(p[0] - 1.0) < 1e-6
        assert abs(p[1] - 2.0) < 1e-6
        assert abs(p[2] - 0.5) < 1e-6


class TestOffsetRayOrigin:
    """Tests for self-intersection avoidance."""

    def test_offset_against_normal(self):
        """Test that rays entering the surface start below it."""
        from sdf_tracer.core.ray import offset_ray_origin, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = offset_ray_origin(
                vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 1.0), vec3(0.0, 0.0, -1.0)
            )

        test_kernel()
        p = result[None]
        assert abs(p[0]) < 1e-7
        assert abs(p[1]) < 1e-7
        assert abs(p[2] + 1e-3) < 1e-7

    def test_offset_along_normal(self):
        """Test that rays leaving the surface start above it."""
        from sdf_tracer.core.ray import offset_ray_origin, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = offset_ray_origin(
                vec3(1.0, 0.0, 0.0), vec3(1.0, 0.0, 0.0), vec3(0.6, 0.8, 0.0)
            )

        test_kernel()
        p = result[None]
        assert abs(p[0] - 1.001) < 1e-6
        assert abs(p[1]) < 1e-7


class TestReflect:
    """Tests for mirror reflection."""

    def test_reflect_head_on(self):
        """Test that a ray hitting a surface head-on bounces straight back."""
        from sdf_tracer.core.ray import reflect, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect(vec3(0.0, 0.0, -1.0), vec3(0.0, 0.0, 1.0))

        test_kernel()
        r = result[None]
        assert abs(r[0]) < 1e-6
        assert abs(r[1]) < 1e-6
        assert abs(r[2] - 1.0) < 1e-6

    def test_reflect_oblique(self):
        """Test that reflection flips only the normal component."""
        from sdf_tracer.core.ray import reflect, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect(vec3(0.6, -0.8, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        r = result[None]
        assert abs(r[0] - 0.6) < 1e-6
        assert abs(r[1] - 0.8) < 1e-6
        assert abs(r[2]) < 1e-6


class TestRefract:
    """Tests for Snell refraction."""

    def test_refract_matched_indices_passes_through(self):
        """Test that equal indices leave the direction unchanged."""
        from sdf_tracer.core.ray import refract, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = refract(vec3(0.0, 0.0, -1.0), vec3(0.0, 0.0, 1.0), 1.0, 1.0)

        test_kernel()
        r = result[None]
        assert abs(r[0]) < 1e-6
        assert abs(r[1]) < 1e-6
        assert abs(r[2] + 1.0) < 1e-6

    def test_refract_entering_bends_toward_normal(self):
        """Test that a ray entering glass bends toward the normal."""
        from sdf_tracer.core.ray import refract, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            incident = ti.math.normalize(vec3(1.0, 0.0, -1.0))
            result[None] = refract(incident, vec3(0.0, 0.0, 1.0), 1.5, 1.0)

        test_kernel()
        r = result[None]
        sin_t = r[0] / math.sqrt(r[0] ** 2 + r[1] ** 2 + r[2] ** 2)
        # Snell: sin_t = sin_i / 1.5
        assert abs(sin_t - math.sqrt(0.5) / 1.5) < 1e-5
        assert r[2] < 0.0

    def test_refract_exiting_swaps_media(self):
        """Test that a ray leaving glass bends away from the normal."""
        from sdf_tracer.core.ray import refract, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            incident = ti.math.normalize(vec3(0.3, 0.0, 1.0))
            result[None] = refract(incident, vec3(0.0, 0.0, 1.0), 1.5, 1.0)

        test_kernel()
        r = result[None]
        sin_i = 0.3 / math.sqrt(1.09)
        sin_t = r[0] / math.sqrt(r[0] ** 2 + r[1] ** 2 + r[2] ** 2)
        assert abs(sin_t - 1.5 * sin_i) < 1e-5
        assert r[2] > 0.0

    def test_refract_total_internal_reflection(self):
        """Test that a negative discriminant yields the fixed (1, 0, 0) direction."""
        from sdf_tracer.core.ray import refract, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            incident = ti.math.normalize(vec3(1.0, 0.0, 1.0))
            result[None] = refract(incident, vec3(0.0, 0.0, 1.0), 1.5, 1.0)

        test_kernel()
        r = result[None]
        assert r[0] == 1.0
        assert r[1] == 0.0
        assert r[2] == 0.0


class TestFresnel:
    """Tests for the exact Fresnel reflectance."""

    def test_fresnel_normal_incidence_glass(self):
        """Test the 4% reflectance of glass at normal incidence."""
        from sdf_tracer.core.ray import fresnel, vec3

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = fresnel(vec3(0.0, 0.0, -1.0), vec3(0.0, 0.0, 1.0), 1.5)

        test_kernel()
        assert abs(result[None] - 0.04) < 1e-5

    def test_fresnel_total_internal_reflection(self):
        """Test that a ray inside glass beyond the critical angle reflects fully."""
        from sdf_tracer.core.ray import fresnel, vec3

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            incident = ti.math.normalize(vec3(1.0, 0.0, 1.0))
            result[None] = fresnel(incident, vec3(0.0, 0.0, 1.0), 1.5)

        test_kernel()
        assert result[None] == 1.0

    def test_fresnel_index_one_is_transparent(self):
        """Test that a refractive index of 1 reflects nothing."""
        from sdf_tracer.core.ray import fresnel, vec3

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            incident = ti.math.normalize(vec3(0.5, 0.0, -1.0))
            result[None] = fresnel(incident, vec3(0.0, 0.0, 1.0), 1.0)

        test_kernel()
        assert abs(result[None]) < 1e-6

    def test_fresnel_grazing_is_bounded(self):
        """Test that kr stays within [0, 1] at grazing angles."""
        from sdf_tracer.core.ray import fresnel, vec3

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            incident = ti.math.normalize(vec3(1.0, 0.0, -0.01))
            result[None] = fresnel(incident, vec3(0.0, 0.0, 1.0), 1.5)

        test_kernel()
        assert 0.0 <= result[None] <= 1.0
        assert result[None] > 0.5
