import math

import numpy as np
import pytest

from onevis.camera import Camera, project_to_sphere


def apply(matrix, point):
    result = matrix @ np.array([*point, 1.0])
    return result[:3] / result[3]


def test_project_center_is_sphere_pole():
    assert np.allclose(project_to_sphere(400, 300, 800, 600), (0, 0, 1))


@pytest.mark.parametrize("x,y", [(0, 0), (800, 600), (123, 456), (400, 10), (-500, 2000)])
def test_project_gives_unit_vector(x, y):
    assert math.isclose(np.linalg.norm(project_to_sphere(x, y, 800, 600)), 1.0)


def test_project_outside_sphere_lies_on_rim():
    assert math.isclose(project_to_sphere(800, 0, 800, 600)[2], 0.0, abs_tol=1e-12)


def test_default_camera_distance():
    assert Camera().distance == 1.5


def test_wheel_zero_keeps_distance():
    camera = Camera()
    camera.wheel(0)
    assert camera.distance == 1.5


def test_wheel_forward_moves_closer():
    camera = Camera()
    camera.wheel(120)
    assert camera.distance < 1.5


@pytest.mark.parametrize("delta,expected", [(100000, 0.1), (-100000, 10.0)])
def test_wheel_clamps_distance(delta, expected):
    camera = Camera()
    camera.wheel(delta)
    assert camera.distance == expected


def test_wheel_round_trip():
    camera = Camera()
    camera.wheel(240)
    camera.wheel(-240)
    assert math.isclose(camera.distance, 1.5)


def test_press_records_position():
    camera = Camera()
    camera.press(12, 34)
    assert camera.last_pos == (12, 34)


def test_drag_without_motion_keeps_view():
    camera = Camera()
    before = camera.view_matrix()
    camera.press(200, 200)
    camera.drag(200, 200, 800, 600)
    assert np.allclose(camera.view_matrix(), before)


def test_drag_rotates_and_stays_normalised():
    camera = Camera()
    before = camera.view_matrix()
    camera.press(400, 300)
    camera.drag(500, 250, 800, 600)
    assert camera.last_pos == (500, 250)
    assert math.isclose(camera.rotation.length, 1.0)
    assert not np.allclose(camera.view_matrix(), before)


def test_drag_back_restores_view():
    camera = Camera()
    before = camera.view_matrix()
    camera.press(400, 300)
    camera.drag(450, 300, 800, 600)
    camera.drag(400, 300, 800, 600)
    assert np.allclose(camera.view_matrix(), before)


def test_view_places_origin_at_distance():
    camera = Camera()
    camera.press(300, 300)
    camera.drag(420, 200, 800, 600)
    camera.wheel(50)
    origin = apply(camera.view_matrix(), (0, 0, 0))
    assert np.allclose(origin, (0, 0, -camera.distance))


def test_projection_uses_aspect():
    m = Camera().projection_matrix(800, 600)
    assert math.isclose(m[0, 0] * 800 / 600, m[1, 1])


def test_projection_maps_near_plane():
    m = Camera().projection_matrix(640, 480)
    assert math.isclose(apply(m, (0, 0, -0.1))[2], -1.0)


def test_projection_rejects_zero_height():
    with pytest.raises(ValueError):
        Camera().projection_matrix(800, 0)