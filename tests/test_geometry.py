import math

import numpy as np
import pytest

from onevis.geometry import (
    Quaternion,
    bound_line_vertices,
    cube_vertices,
    identity,
    look_at,
    perspective,
    rotation_matrix,
    scale_matrix,
    translation_matrix,
)


def apply(matrix, point):
    result = matrix @ np.array([*point, 1.0])
    return result[:3] / result[3]


def test_identity_leaves_points_alone():
    assert np.allclose(apply(identity(), (3.0, -2.0, 5.0)), (3.0, -2.0, 5.0))


def test_scale_matrix_scales_components():
    assert np.allclose(apply(scale_matrix(2, 3, 4), (1, 1, 1)), (2, 3, 4))


def test_translation_matrix_moves_point():
    assert np.allclose(apply(translation_matrix(1, -2, 3), (0, 0, 0)), (1, -2, 3))


def test_translation_inverse():
    product = translation_matrix(1, 2, 3) @ translation_matrix(-1, -2, -3)
    assert np.allclose(product, identity())


@pytest.mark.parametrize("axis", [(1, 0, 0), (0, 1, 0), (0, 0, 1), (1, 2, 3)])
def test_rotation_is_orthonormal(axis):
    m = rotation_matrix(37.0, *axis)[:3, :3]
    assert np.allclose(m @ m.T, np.eye(3))
    assert math.isclose(np.linalg.det(m), 1.0)


def test_rotation_keeps_axis_fixed():
    axis = np.array([1.0, 2.0, 3.0])
    m = rotation_matrix(70.0, *axis)
    assert np.allclose(apply(m, axis), axis)


def test_rotation_undone_by_negative_angle():
    product = rotation_matrix(50.0, 0, 1, 1) @ rotation_matrix(-50.0, 0, 1, 1)
    assert np.allclose(product, identity())


def test_rotation_axis_is_normalised():
    assert np.allclose(rotation_matrix(30.0, 0, 0, 5), rotation_matrix(30.0, 0, 0, 1))


def test_rotation_about_z_is_counter_clockwise():
    assert np.allclose(apply(rotation_matrix(90.0, 0, 0, 1), (1, 0, 0)), (0, 1, 0))


def test_perspective_maps_near_and_far_planes():
    near, far = 0.1, 100.0
    m = perspective(45.0, 4 / 3, near, far)
    assert math.isclose(apply(m, (0, 0, -near))[2], -1.0)
    assert math.isclose(apply(m, (0, 0, -far))[2], 1.0)


def test_perspective_aspect_relation():
    m = perspective(45.0, 2.0, 0.1, 100.0)
    assert math.isclose(m[0, 0] * 2.0, m[1, 1])


@pytest.mark.parametrize("args", [(45.0, 1.0, 1.0, 1.0), (45.0, 0.0, 0.1, 10.0), (0.0, 1.0, 0.1, 10.0)])
def test_perspective_degenerate_is_identity(args):
    assert np.allclose(perspective(*args), identity())


def test_look_at_puts_eye_at_origin_and_center_ahead():
    eye = (1.0, 2.0, 3.0)
    center = (-1.0, 0.5, 0.0)
    m = look_at(eye, center, (0, 1, 0))
    assert np.allclose(apply(m, eye), (0, 0, 0))
    moved = apply(m, center)
    distance = np.linalg.norm(np.subtract(center, eye))
    assert np.allclose(moved, (0, 0, -distance))


def test_look_at_same_point_is_identity():
    assert np.allclose(look_at((1, 1, 1), (1, 1, 1), (0, 1, 0)), identity())


def test_quaternion_default_is_identity_rotation():
    v = (0.3, -0.7, 2.0)
    assert np.allclose(Quaternion().rotate_vector(v), v)


@pytest.mark.parametrize("axis,angle", [((1, 0, 0), 30.0), ((0, 1, 1), 120.0), ((2, -1, 0.5), -75.0)])
def test_quaternion_matches_rotation_matrix(axis, angle):
    q = Quaternion.from_axis_and_angle(axis, angle)
    v = (0.4, -1.2, 0.9)
    assert np.allclose(q.rotate_vector(v), apply(rotation_matrix(angle, *axis), v))


def test_quaternion_product_composes_rotations():
    a = Quaternion.from_axis_and_angle((1, 0, 0), 40.0)
    b = Quaternion.from_axis_and_angle((0, 1, 0), 25.0)
    v = (1.0, 2.0, 3.0)
    assert np.allclose((a * b).rotate_vector(v), a.rotate_vector(b.rotate_vector(v)))


def test_quaternion_normalized_has_unit_length():
    q = Quaternion(2.0, 1.0, -3.0, 0.5).normalized()
    assert math.isclose(q.length, 1.0)


def test_quaternion_zero_normalized_stays_zero():
    assert Quaternion(0.0, 0.0, 0.0, 0.0).normalized() == Quaternion(0.0, 0.0, 0.0, 0.0)


def test_quaternion_mul_rejects_other_types():
    with pytest.raises(TypeError):
        Quaternion() * 2


def test_cube_vertices_cover_cube():
    vertices = cube_vertices()
    assert vertices.shape == (36, 3)
    assert set(np.unique(vertices)) == {-1.0, 1.0}
    assert len({tuple(v) for v in vertices}) == 8


def test_cube_triangles_lie_on_faces():
    for triangle in cube_vertices().reshape(12, 3, 3):
        shared = np.all(triangle == triangle[0], axis=0)
        assert shared.sum() == 1


def test_bound_lines_are_cube_edges():
    segments = bound_line_vertices().reshape(12, 2, 3)
    edges = {frozenset(map(tuple, seg)) for seg in segments}
    assert len(edges) == 12
    for a, b in segments:
        assert np.count_nonzero(a != b) == 1