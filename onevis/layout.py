"""Per-frame render state for volume scenes: which volumes are drawn,
their model transforms and the shader uniforms that go with them."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, Union

import numpy as np

from onevis.camera import Camera
from onevis.geometry import identity, rotation_matrix, scale_matrix, translation_matrix
from onevis.reader import OneFile

MAX_TEXTURES = 10
DEFAULT_BACKGROUND = (0.5, 0.5, 0.5)
DEFAULT_EMISSION = "1.0"
DEFAULT_OPACITY = "600.0"
_INTEGER = re.compile(r"\s*[+-]?\d+\s*")
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


def _to_float(text: str) -> float:
    """Convert text to a float, giving 0.0 where it is not a number."""
    if "_" in text:
        return 0.0
    try:
        return float(text)
    except ValueError:
        return 0.0


def _to_int(text: str) -> int:
    """Convert text to a 32-bit integer, giving 0 where it is not one."""
    if not _INTEGER.fullmatch(text):
        return 0
    value = int(text)
    return value if _INT32_MIN <= value <= _INT32_MAX else 0


def _short_float(value: float) -> float:
    """Round a value to six significant digits."""
    return float(f"{value:.6g}")


def _inverted(matrix: np.ndarray) -> np.ndarray:
    """Return the inverse of ``matrix``, or identity if it is singular."""
    try:
        return np.linalg.inv(matrix)
    except np.linalg.LinAlgError:
        return identity()


def param_float(
    params: Mapping[str, str], key: str, default: Union[str, float]
) -> float:
    """Read ``key`` from ``params`` as a float; unparsable text gives 0.0."""
    return _to_float(str(params.get(key, default)))


def volume_model(params: Mapping[str, str]) -> np.ndarray:
    """Return the model matrix described by a volume's parameters.

    The matrix scales by the reciprocal of SCALE_*, rotates by ROT_X, ROT_Y
    and ROT_Z degrees and translates by minus half of OFFSET_*.
    """
    scales = np.array(
        [param_float(params, f"SCALE_{axis}", "1.0") for axis in "XYZ"], dtype=float
    )
    with np.errstate(divide="ignore"):
        inverse_scales = 1.0 / scales
    offsets = [-0.5 * param_float(params, f"OFFSET_{axis}", "0.0") for axis in "XYZ"]
    rx, ry, rz = (param_float(params, f"ROT_{axis}", "0.0") for axis in "XYZ")
    return (
        scale_matrix(*inverse_scales)
        @ rotation_matrix(rx, 1.0, 0.0, 0.0)
        @ rotation_matrix(ry, 0.0, 1.0, 0.0)
        @ rotation_matrix(rz, 0.0, 0.0, 1.0)
        @ translation_matrix(*offsets)
    )


def select_volumes(one: Optional[OneFile], nested: bool) -> list[int]:
    """Return the indices of the volumes drawn, in drawing order.

    In nested mode volumes are sorted by their ORDER parameter (ties by
    position), at most ten are considered and those without a texture are
    dropped. Otherwise only the first volume is drawn, if it has a texture.
    """
    if one is None or not one.volumes:
        return []
    if nested:
        ordered = sorted(
            (_to_int(volume.params.get("ORDER", "0")), index)
            for index, volume in enumerate(one.volumes)
        )[:MAX_TEXTURES]
        return [
            index
            for _, index in ordered
            if one.texture_for_volume(one.volumes[index]) is not None
        ]
    return [0] if one.texture_for_volume(one.volumes[0]) is not None else []


@dataclass
class RenderState:
    """What the volume renderer draws and how."""

    file: Optional[OneFile] = None
    nested_mode: bool = False
    draw_bounds: bool = False
    background_color: tuple[float, float, float] = DEFAULT_BACKGROUND
    volume_indices: list[int] = field(default_factory=list)
    texture_count: int = 0

    def _has_volumes(self) -> bool:
        return self.file is not None and bool(self.file.volumes)

    def _rebuild(self) -> None:
        if not self._has_volumes():
            self.volume_indices = []
            self.texture_count = 0
            return
        self.volume_indices = select_volumes(self.file, self.nested_mode)
        self.texture_count = len(self.volume_indices) if self.nested_mode else 1

    def set_file(self, one: Optional[OneFile]) -> None:
        """Show the scene of ``one``."""
        self.file = one
        self._rebuild()

    def set_nested_mode(self, enable: bool) -> None:
        """Switch between drawing all nested volumes and only the first."""
        self.nested_mode = bool(enable)
        if self.file is not None:
            self._rebuild()

    def toggle_bounds(self, enable: bool) -> None:
        """Turn drawing of volume outlines on or off."""
        self.draw_bounds = bool(enable)

    def set_background_color(self, color: Sequence[float]) -> None:
        """Set the background colour as red, green and blue in [0, 1]."""
        values = tuple(float(c) for c in color)
        if len(values) != 3:
            raise ValueError(f"background colour needs 3 components, got {len(values)}")
        self.background_color = values  # type: ignore[assignment]

    def _drawn_volumes(self):
        assert self.file is not None
        return [self.file.volumes[i] for i in self.volume_indices[: self.texture_count]]

    def _nested_uniforms(self, j_scale: float, k_scale: float) -> dict[str, Any]:
        transforms = [identity() for _ in range(MAX_TEXTURES)]
        inverses = [identity() for _ in range(MAX_TEXTURES)]
        j_scales = [1.0] * MAX_TEXTURES
        k_scales = [1.0] * MAX_TEXTURES
        blends = [0.0] * MAX_TEXTURES
        replaces = [0] * MAX_TEXTURES
        for slot, volume in enumerate(self._drawn_volumes()):
            model = volume_model(volume.params)
            transforms[slot] = model
            inverses[slot] = _inverted(model)
            j_scales[slot] = _short_float(j_scale)
            k_scales[slot] = _short_float(k_scale)
            blends[slot] = param_float(volume.params, "BLEND", "0.0")
            replace = volume.params.get("REPLACE", "false").lower() == "true"
            replaces[slot] = 1 if replace else 0
        return {
            "numValidTextures": self.texture_count,
            "textures": list(range(MAX_TEXTURES)),
            "texture_transform": transforms,
            "texture_iTransform": inverses,
            "texture_jscale": j_scales,
            "texture_kscale": k_scales,
            "texture_blend": blends,
            "texture_replace": replaces,
            "texture_normalize": 0,
            "texture_norm_grey": 1.0,
            "texture_norm_alpha": 1.0,
            "texture_norm_exp": 1.0,
            "numEmitters": 0,
            "star_brightness": 0.0,
            "backgroundColor": self.background_color,
        }

    def _single_uniforms(self, j_scale: float, k_scale: float) -> dict[str, Any]:
        assert self.file is not None
        params = self.file.volumes[0].params
        return {
            "tex": 0,
            "jScale": param_float(params, "EMISSION", repr(_short_float(j_scale))),
            "kScale": param_float(params, "OPACITY", repr(_short_float(k_scale))),
        }

    def uniforms(self, camera: Camera, width: float, height: float) -> Optional[dict[str, Any]]:
        """Return the shader uniforms for a frame, or None if nothing is drawn."""
        if not self._has_volumes():
            return None
        assert self.file is not None
        view = camera.view_matrix()
        j_scale = param_float(self.file.scene.params, "EMISSION", DEFAULT_EMISSION)
        k_scale = param_float(self.file.scene.params, "OPACITY", DEFAULT_OPACITY)
        result: dict[str, Any] = {
            "program": "nested" if self.nested_mode else "single",
            "viewProjectionMatrix": camera.projection_matrix(width, height) @ view,
            "inverseViewMatrix": _inverted(view),
            "jScale": j_scale,
            "kScale": k_scale,
        }
        if self.nested_mode:
            result.update(self._nested_uniforms(j_scale, k_scale))
        else:
            result.update(self._single_uniforms(j_scale, k_scale))
        return result

    def bound_models(self) -> list[np.ndarray]:
        """Return the model matrices of the outlines drawn this frame."""
        if not self.draw_bounds or not self._has_volumes():
            return []
        assert self.file is not None
        if self.nested_mode:
            return [_inverted(volume_model(v.params)) for v in self._drawn_volumes()]
        outer = volume_model(self.file.volumes[0].params)
        return [outer.copy() for _ in range(self.texture_count)]