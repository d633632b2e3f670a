"""Matrix, quaternion and mesh helpers for rendering volume scenes.

Matrices are 4x4 numpy arrays acting on column vectors (``m @ v``).
Angles are given in degrees.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

_EPSILON = 1e-12


def identity() -> np.ndarray:
    """Return the 4x4 identity matrix."""
    return np.eye(4)


def scale_matrix(x: float, y: float, z: float) -> np.ndarray:
    """Return a matrix scaling by ``x``, ``y`` and ``z``."""
    return np.diag([float(x), float(y), float(z), 1.0])


def translation_matrix(x: float, y: float, z: float) -> np.ndarray:
    """Return a matrix translating by ``(x, y, z)``."""
    matrix = np.eye(4)
    matrix[:3, 3] = (x, y, z)
    return matrix


def rotation_matrix(angle: float, x: float, y: float, z: float) -> np.ndarray:
    """Return a counter-clockwise rotation of ``angle`` degrees about an axis.

    The axis is normalised unless it has zero length.
    """
    axis = np.array([x, y, z], dtype=float)
    length = float(np.linalg.norm(axis))
    if length > _EPSILON:
        axis /= length
    radians = math.radians(angle)
    c = math.cos(radians)
    s = math.sin(radians)
    ax, ay, az = axis
    cross = np.array([[0.0, -az, ay], [az, 0.0, -ax], [-ay, ax, 0.0]])
    matrix = np.eye(4)
    matrix[:3, :3] = c * np.eye(3) + s * cross + (1.0 - c) * np.outer(axis, axis)
    return matrix


def perspective(fovy: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Return a perspective projection; degenerate arguments give identity."""
    if near == far or aspect == 0:
        return identity()
    radians = math.radians(fovy / 2.0)
    sine = math.sin(radians)
    if sine == 0:
        return identity()
    cotan = math.cos(radians) / sine
    clip = far - near
    matrix = np.zeros((4, 4))
    matrix[0, 0] = cotan / aspect
    matrix[1, 1] = cotan
    matrix[2, 2] = -(near + far) / clip
    matrix[2, 3] = -(2.0 * near * far) / clip
    matrix[3, 2] = -1.0
    return matrix


def look_at(
    eye: Sequence[float], center: Sequence[float], up: Sequence[float]
) -> np.ndarray:
    """Return a view matrix looking from ``eye`` towards ``center``.

    If ``eye`` and ``center`` coincide the identity is returned.
    """
    eye_v = np.asarray(eye, dtype=float)
    forward = np.asarray(center, dtype=float) - eye_v
    length = float(np.linalg.norm(forward))
    if length <= _EPSILON:
        return identity()
    forward /= length
    side = np.cross(forward, np.asarray(up, dtype=float))
    side_length = float(np.linalg.norm(side))
    if side_length > _EPSILON:
        side /= side_length
    up_vector = np.cross(side, forward)
    rotation = np.eye(4)
    rotation[0, :3] = side
    rotation[1, :3] = up_vector
    rotation[2, :3] = -forward
    return rotation @ translation_matrix(*(-eye_v))


@dataclass(frozen=True)
class Quaternion:
    """A rotation quaternion with scalar part ``w``."""

    w: float = 1.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_axis_and_angle(cls, axis: Sequence[float], angle: float) -> "Quaternion":
        """Return the rotation of ``angle`` degrees about ``axis``."""
        vector = np.asarray(axis, dtype=float)
        length = float(np.linalg.norm(vector))
        if length > _EPSILON:
            vector = vector / length
        half = math.radians(angle) / 2.0
        s = math.sin(half)
        return cls(math.cos(half), *(float(v) * s for v in vector)).normalized()

    @property
    def length(self) -> float:
        return math.sqrt(self.w**2 + self.x**2 + self.y**2 + self.z**2)

    def conjugated(self) -> "Quaternion":
        return Quaternion(self.w, -self.x, -self.y, -self.z)

    def normalized(self) -> "Quaternion":
        """Return this quaternion scaled to unit length (zero stays zero)."""
        length = self.length
        if length <= _EPSILON:
            return Quaternion(0.0, 0.0, 0.0, 0.0)
        return Quaternion(self.w / length, self.x / length, self.y / length, self.z / length)

    def rotate_vector(self, vector: Sequence[float]) -> np.ndarray:
        """Return ``vector`` rotated by this quaternion."""
        vx, vy, vz = (float(v) for v in vector)
        result = self * Quaternion(0.0, vx, vy, vz) * self.conjugated()
        return np.array([result.x, result.y, result.z])

    def __mul__(self, other: "Quaternion") -> "Quaternion":
        if not isinstance(other, Quaternion):
            return NotImplemented
        w1, x1, y1, z1 = self.w, self.x, self.y, self.z
        w2, x2, y2, z2 = other.w, other.x, other.y, other.z
        return Quaternion(
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
            w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        )


def cube_vertices() -> np.ndarray:
    """Return the 36 vertices (12 triangles) of the cube [-1, 1]^3."""
    b = 1.0
    faces = [
        # front
        (-b, -b, b), (b, -b, b), (b, b, b),
        (-b, -b, b), (b, b, b), (-b, b, b),
        # back
        (-b, -b, -b), (-b, b, -b), (b, b, -b),
        (-b, -b, -b), (b, b, -b), (b, -b, -b),
        # left
        (-b, -b, -b), (-b, -b, b), (-b, b, b),
        (-b, -b, -b), (-b, b, b), (-b, b, -b),
        # right
        (b, -b, -b), (b, b, -b), (b, b, b),
        (b, -b, -b), (b, b, b), (b, -b, b),
        # bottom
        (-b, -b, -b), (b, -b, -b), (b, -b, b),
        (-b, -b, -b), (b, -b, b), (-b, -b, b),
        # top
        (-b, b, -b), (-b, b, b), (b, b, b),
        (-b, b, -b), (b, b, b), (b, b, -b),
    ]
    return np.array(faces, dtype=np.float32)


def bound_line_vertices() -> np.ndarray:
    """Return the 24 vertices (12 line segments) outlining the cube [-1, 1]^3."""
    b = 1.0
    lines = [
        # bottom square
        (-b, -b, -b), (b, -b, -b),
        (b, -b, -b), (b, -b, b),
        (b, -b, b), (-b, -b, b),
        (-b, -b, b), (-b, -b, -b),
        # top square
        (-b, b, -b), (b, b, -b),
        (b, b, -b), (b, b, b),
        (b, b, b), (-b, b, b),
        (-b, b, b), (-b, b, -b),
        # vertical edges
        (-b, -b, -b), (-b, b, -b),
        (b, -b, -b), (b, b, -b),
        (b, -b, b), (b, b, b),
        (-b, -b, b), (-b, b, b),
    ]
    return np.array(lines, dtype=np.float32)