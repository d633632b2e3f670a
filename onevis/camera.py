"""Trackball camera orbiting the origin."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from onevis.geometry import Quaternion, look_at, perspective

DEFAULT_DISTANCE = 1.5
MIN_DISTANCE = 0.1
MAX_DISTANCE = 10.0
FIELD_OF_VIEW = 45.0
NEAR_PLANE = 0.1
FAR_PLANE = 100.0
_WHEEL_BASE = 1.001
_MIN_AXIS_LENGTH_SQUARED = 0.0001


def project_to_sphere(x: float, y: float, width: float, height: float) -> np.ndarray:
    """Map a widget position onto the unit trackball sphere."""
    px = 2.0 * x / width - 1.0
    py = 1.0 - 2.0 * y / height
    d = math.hypot(px, py)
    pz = 0.0
    if d <= 1.0:
        pz = math.sqrt(1.0 - d * d)
    else:
        px /= d
        py /= d
    vector = np.array([px, py, pz])
    return vector / np.linalg.norm(vector)


@dataclass
class Camera:
    """An orbiting camera controlled by mouse drags and the wheel."""

    distance: float = DEFAULT_DISTANCE
    rotation: Quaternion = field(default_factory=Quaternion)
    last_pos: tuple[float, float] = (0.0, 0.0)

    def press(self, x: float, y: float) -> None:
        """Remember where a drag starts."""
        self.last_pos = (x, y)

    def drag(self, x: float, y: float, width: float, height: float) -> None:
        """Rotate the camera for a drag from the last position to ``(x, y)``."""
        previous = project_to_sphere(*self.last_pos, width, height)
        current = project_to_sphere(x, y, width, height)
        dot = float(np.clip(np.dot(previous, current), -1.0, 1.0))
        angle = math.degrees(math.acos(dot))
        axis = np.cross(previous, current)
        if float(np.dot(axis, axis)) > _MIN_AXIS_LENGTH_SQUARED:
            step = Quaternion.from_axis_and_angle(axis / np.linalg.norm(axis), angle)
            self.rotation = (step * self.rotation).normalized()
        self.last_pos = (x, y)

    def wheel(self, delta: float) -> None:
        """Zoom by a wheel movement of ``delta`` units."""
        distance = self.distance * _WHEEL_BASE ** (-delta)
        self.distance = min(max(distance, MIN_DISTANCE), MAX_DISTANCE)

    def view_matrix(self) -> np.ndarray:
        """Return the view matrix looking at the origin."""
        eye = self.rotation.rotate_vector((0.0, 0.0, -self.distance))
        up = self.rotation.rotate_vector((0.0, 1.0, 0.0))
        return look_at(eye, (0.0, 0.0, 0.0), up)

    def projection_matrix(self, width: float, height: float) -> np.ndarray:
        """Return the perspective projection for a viewport of the given size."""
        if height <= 0:
            raise ValueError(f"viewport height must be positive, got {height}")
        return perspective(FIELD_OF_VIEW, width / height, NEAR_PLANE, FAR_PLANE)