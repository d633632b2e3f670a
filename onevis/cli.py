"""Command line entry point: load a .ONE file and describe how it is drawn."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Iterator, Optional, Sequence

from onevis.layout import RenderState
from onevis.reader import OneFormatError, load


def _unit_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}") from None
    if not 0.0 <= value <= 1.0:
        raise argparse.ArgumentTypeError(f"colour component out of [0, 1]: {text}")
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="onevis", description="Load a .ONE volume scene and describe it."
    )
    parser.add_argument("file", type=Path, help="the .ONE file to load")
    parser.add_argument(
        "--single", action="store_true", help="draw only the first volume"
    )
    parser.add_argument(
        "--bounds", action="store_true", help="draw the outlines of the volumes"
    )
    parser.add_argument(
        "--background",
        nargs=3,
        type=_unit_float,
        metavar=("R", "G", "B"),
        help="background colour components in [0, 1]",
    )
    return parser


def _describe(state: RenderState) -> Iterator[str]:
    one = state.file
    assert one is not None
    yield f"scene: {one.scene.name} (id {one.scene.id})"
    yield f"version: {one.version}"
    yield f"mode: {'nested' if state.nested_mode else 'single'}"
    yield f"volumes: {len(one.volumes)}"
    for index, volume in enumerate(one.volumes):
        texture = one.texture_for_volume(volume)
        if texture is None:
            detail = "texture=none"
        else:
            kind = "float" if texture.is_float else "byte"
            size = f"{texture.size_x}x{texture.size_y}x{texture.size_z}"
            detail = f"texture={texture.id} size={size} type={kind}"
        yield f"  [{index}] {volume.name} id={volume.id} {detail}"
    yield f"textures: {len(one.textures)}"
    order = ", ".join(str(i) for i in state.volume_indices) or "none"
    yield f"draw order: {order}"
    red, green, blue = state.background_color
    yield f"background: {red:g} {green:g} {blue:g}"
    if state.draw_bounds:
        yield f"bounds: {len(state.bound_models())}"


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command; return the exit status."""
    args = _build_parser().parse_args(argv)
    try:
        one = load(args.file)
    except MemoryError:
        print("error: out of memory; the file may be too large to load", file=sys.stderr)
        return 1
    except (OSError, OneFormatError) as exc:
        print(f"error: cannot load {args.file}: {exc}", file=sys.stderr)
        return 1

    state = RenderState()
    state.set_nested_mode(not args.single)
    state.toggle_bounds(args.bounds)
    if args.background is not None:
        state.set_background_color(args.background)
    state.set_file(one)

    for line in _describe(state):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())