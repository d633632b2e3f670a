"""Reading of .ONE volume scene files.

A .ONE file stores voxel texture data from the start of the file and a
header near its end. The last eight bytes give the header's length. All
numbers are big-endian.
"""

from __future__ import annotations

import re
import struct
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Optional, Union

import numpy as np

FILE_ID = 102380
FLOAT_TYPE = "RGBA_FLOAT"
_CHANNEL_ORDER = [1, 2, 0, 3]  # stored as g, b, r, a
_INTEGER = re.compile(r"\s*[+-]?\d+\s*")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class OneFormatError(ValueError):
    """Raised when data is not a valid .ONE file."""


def _empty_grid(dtype) -> np.ndarray:
    return np.zeros((0, 0, 0, 4), dtype=dtype)


@dataclass
class Texture:
    """A 3D RGBA texture; ``data`` has shape (size_z, size_y, size_x, 4)."""

    id: int
    name: str
    params: dict[str, str]
    size_x: int = 0
    size_y: int = 0
    size_z: int = 0
    is_float: bool = False
    data: np.ndarray = field(default_factory=lambda: _empty_grid(np.uint8))


@dataclass
class Volume:
    """A volume of the scene, referring to a texture through its params."""

    id: int
    name: str
    params: dict[str, str]


@dataclass
class Scene:
    """The scene described by the file header."""

    id: int
    name: str
    params: dict[str, str]


@dataclass
class OneFile:
    """The decoded contents of a .ONE file."""

    scene: Scene
    version: int
    volumes: list[Volume] = field(default_factory=list)
    textures: list[Texture] = field(default_factory=list)

    def texture_for_volume(self, volume: Volume) -> Optional[Texture]:
        """Return the texture named by the volume's TEXTURE_ID_0, or None."""
        text = volume.params.get("TEXTURE_ID_0", "")
        if not _INTEGER.fullmatch(text):
            return None
        texture_id = int(text)
        if not _INT64_MIN <= texture_id <= _INT64_MAX:
            return None
        return next((tex for tex in self.textures if tex.id == texture_id), None)


def parse_params(text: str) -> dict[str, str]:
    """Parse ``key:value`` pairs separated by ``!@``.

    Empty parts are skipped; parts that do not split into exactly two
    fields on ``:`` are ignored. Keys and values are stripped.
    """
    params: dict[str, str] = {}
    for part in text.split("!@"):
        if not part:
            continue
        fields = part.split(":")
        if len(fields) == 2:
            params[fields[0].strip()] = fields[1].strip()
    return params


class _Cursor:
    def __init__(self, data: bytes, pos: int = 0) -> None:
        self.data = data
        self.pos = pos

    def take(self, size: int) -> bytes:
        end = self.pos + size
        if self.pos < 0 or end > len(self.data):
            raise OneFormatError(f"unexpected end of data at offset {self.pos}")
        chunk = self.data[self.pos:end]
        self.pos = end
        return chunk

    def unpack(self, fmt: str) -> int:
        (value,) = struct.unpack(fmt, self.take(struct.calcsize(fmt)))
        return value

    def int32(self) -> int:
        return self.unpack(">i")

    def int64(self) -> int:
        return self.unpack(">q")

    def string(self) -> str:
        length = self.unpack(">H")
        return self.take(length).decode("utf-8", errors="replace")


def _read_entry(cursor: _Cursor) -> tuple[int, str, dict[str, str]]:
    entry_id = cursor.int64()
    name = cursor.string()
    params = parse_params(cursor.string())
    return entry_id, name, params


def _read_voxels(cursor: _Cursor, texture: Texture) -> None:
    count = max(cursor.int32(), 0)
    colour = ">f4" if texture.is_float else "u1"
    dtype = np.dtype([("pos", ">i4", (3,)), ("rgba", colour, (4,))])
    raw = cursor.take(count * dtype.itemsize)
    target = np.float32 if texture.is_float else np.uint8
    if count == 0:
        texture.data = _empty_grid(target)
        return

    voxels = np.frombuffer(raw, dtype=dtype, count=count)
    positions = voxels["pos"].astype(np.int64)
    low = positions.min(axis=0)
    high = positions.max(axis=0)
    texture.size_x, texture.size_y, texture.size_z = (int(v) for v in high - low + 1)

    if texture.is_float:
        values = voxels["rgba"].astype(np.float32)
    else:
        scale = np.float32(255.0)
        normalised = voxels["rgba"].astype(np.float32) / scale
        values = (normalised * scale).astype(np.uint8)
    values = values[:, _CHANNEL_ORDER]

    grid = np.zeros((texture.size_z, texture.size_y, texture.size_x, 4), dtype=target)
    shifted = positions - low
    grid[shifted[:, 2], shifted[:, 1], shifted[:, 0]] = values
    texture.data = grid


def parse(data: bytes) -> OneFile:
    """Decode the bytes of a .ONE file."""
    data = bytes(data)
    if len(data) < 8:
        raise OneFormatError("data too short to hold a header length")
    header_length = struct.unpack(">q", data[-8:])[0]
    header_pos = len(data) - header_length - 8
    if header_pos < 0:
        raise OneFormatError(f"invalid header position: {header_pos}")

    cursor = _Cursor(data, header_pos)
    file_id = cursor.int32()
    if file_id != FILE_ID:
        raise OneFormatError(f"invalid file id: {file_id}")
    version = cursor.int32()

    scene = Scene(*_read_entry(cursor))
    volumes = [Volume(*_read_entry(cursor)) for _ in range(max(cursor.int32(), 0))]
    textures = [Texture(*_read_entry(cursor)) for _ in range(max(cursor.int32(), 0))]

    cursor.pos = 0
    for texture in textures:
        read_id = cursor.int64()
        if read_id != texture.id:
            raise OneFormatError(
                f"texture id mismatch: read {read_id}, expected {texture.id}"
            )
        texture.is_float = texture.params.get("TYPE", "") == FLOAT_TYPE
        _read_voxels(cursor, texture)

    return OneFile(scene=scene, version=version, volumes=volumes, textures=textures)


def load(path: Union[str, PathLike]) -> OneFile:
    """Read and decode a .ONE file from disk."""
    return parse(Path(path).read_bytes())