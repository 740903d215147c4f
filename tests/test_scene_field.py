"""Unit tests for the scene distance field and primitive storage.

Tests cover:
- Primitive storage and capacity limits
- Nearest-primitive selection across kinds
- Skipping primitives that contain the query point
- Normal and material dispatch by primitive kind
"""

import pytest
import taichi as ti


class TestPrimitiveStorage:
    """Tests for adding and clearing primitives."""

    def test_add_and_clear(self):
        """Test that counts track additions and reset on clear."""
        from sdf_tracer.scene.field import (
            add_box,
            add_sphere,
            clear_scene,
            get_box_count,
            get_sphere_count,
            vec3,
        )

        assert add_sphere(vec3(0.0, 0.0, -5.0), 1.0, 0) == 0
        assert add_sphere(vec3(2.0, 0.0, -5.0), 1.0, 0) == 1
        assert add_box(vec3(0.0, 0.0, -9.0), vec3(1.0, 1.0, 1.0), 0) == 0
        assert get_sphere_count() == 2
        assert get_box_count() == 1

        clear_scene()
        assert get_sphere_count() == 0
        assert get_box_count() == 0

    def test_sphere_capacity(self):
        """Test that exceeding the sphere capacity raises."""
        from sdf_tracer.scene.field import MAX_SPHERES, add_sphere, vec3

        for i in range(MAX_SPHERES):
            add_sphere(vec3(float(i), 0.0, -5.0), 0.5, 0)

        with pytest.raises(RuntimeError, match="Maximum number of spheres"):
            add_sphere(vec3(0.0, 0.0, 0.0), 0.5, 0)


class TestSceneDistance:
    """Tests for scene_distance."""

    def _query(self, point):
        from sdf_tracer.scene.field import scene_distance, vec3

        dist = ti.field(dtype=ti.f32, shape=())
        kind = ti.field(dtype=ti.i32, shape=())
        index = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel(p: vec3):
            dist[None], kind[None], index[None] = scene_distance(p)

        test_kernel(vec3(*point))
        return dist[None], kind[None], index[None]

    def test_empty_scene(self):
        """Test that an empty scene reports no primitive."""
        from sdf_tracer.core.constants import MAX_DISTANCE
        from sdf_tracer.scene.field import PrimitiveKind

        dist, kind, index = self._query((0.0, 0.0, 0.0))
        assert abs(dist - MAX_DISTANCE) < 1e-2
        assert kind == PrimitiveKind.NONE
        assert index == -1

    def test_nearest_primitive_across_kinds(self):
        """Test that the closest sphere or box wins."""
        from sdf_tracer.scene.field import PrimitiveKind, add_box, add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, -10.0), 1.0, 0)
        add_box(vec3(0.0, 0.0, -5.0), vec3(1.0, 1.0, 1.0), 0)

        dist, kind, index = self._query((0.0, 0.0, 0.0))
        assert abs(dist - 4.0) < 1e-5
        assert kind == PrimitiveKind.BOX
        assert index == 0

    def test_tie_keeps_first_primitive(self):
        """Test that equal distances keep the primitive scanned first."""
        from sdf_tracer.scene.field import PrimitiveKind, add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, -5.0), 1.0, 0)
        add_sphere(vec3(0.0, 0.0, 5.0), 1.0, 0)

        dist, kind, index = self._query((0.0, 0.0, 0.0))
        assert abs(dist - 4.0) < 1e-5
        assert kind == PrimitiveKind.SPHERE
        assert index == 0

    def test_point_inside_primitive_is_excluded(self):
        """Test that a primitive containing the point does not attract it."""
        from sdf_tracer.core.constants import MAX_DISTANCE
        from sdf_tracer.scene.field import PrimitiveKind, add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, -5.0), 2.0, 0)

        dist, kind, _ = self._query((0.0, 0.0, -5.0))
        assert abs(dist - MAX_DISTANCE) < 1e-2
        assert kind == PrimitiveKind.NONE

    def test_inside_one_sees_the_other(self):
        """Test that an enclosing primitive is skipped in favor of the next one."""
        from sdf_tracer.scene.field import PrimitiveKind, add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, 0.0), 2.0, 0)
        add_sphere(vec3(0.0, 0.0, -10.0), 1.0, 0)

        dist, kind, index = self._query((0.0, 0.0, 0.0))
        assert abs(dist - 9.0) < 1e-5
        assert kind == PrimitiveKind.SPHERE
        assert index == 1


class TestPrimitiveDispatch:
    """Tests for normal and material lookups by kind."""

    def test_normal_and_material_dispatch(self):
        """Test that sphere and box queries reach their own storage."""
        from sdf_tracer.scene.field import (
            PrimitiveKind,
            add_box,
            add_sphere,
            primitive_material_id,
            primitive_normal,
            vec3,
        )

        add_sphere(vec3(0.0, 0.0, -5.0), 1.0, 3)
        add_box(vec3(4.0, 0.0, -5.0), vec3(1.0, 1.0, 1.0), 7)

        sphere_normal = ti.field(dtype=ti.math.vec3, shape=())
        box_normal = ti.field(dtype=ti.math.vec3, shape=())
        materials = ti.field(dtype=ti.i32, shape=3)

        sphere_kind = int(PrimitiveKind.SPHERE)
        box_kind = int(PrimitiveKind.BOX)
        none_kind = int(PrimitiveKind.NONE)

        @ti.kernel
        def test_kernel():
            _, sphere_normal[None] = primitive_normal(sphere_kind, 0, vec3(0.0, 0.0, -4.0))
            _, box_normal[None] = primitive_normal(box_kind, 0, vec3(5.0, 0.0, -5.0))
            materials[0] = primitive_material_id(sphere_kind, 0)
            materials[1] = primitive_material_id(box_kind, 0)
            materials[2] = primitive_material_id(none_kind, 0)

        test_kernel()
        assert abs(sphere_normal[None][2] - 1.0) < 1e-5
        assert abs(box_normal[None][0] - 1.0) < 1e-3
        assert materials[0] == 3
        assert materials[1] == 7
        assert materials[2] == -1
