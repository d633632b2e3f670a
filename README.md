# onevis

`onevis` reads `.ONE` volumetric scene files and works out what is needed to
draw them: the voxel textures, the per-volume model matrices, an orbiting
camera and the values a volume-rendering shader expects for each frame.

A `.ONE` file carries a scene, a list of volumes and a list of voxel textures.
The voxel data sits at the start of the file and the header near its end; the
last eight bytes give the header's length. All numbers are big-endian.

## Installation

```
pip install .
```

The only runtime dependency is `numpy`. To run the tests:

```
pip install ".[test]"
pytest
```

## Command line

```
onevis scene.one
onevis scene.one --single --bounds --background 0.2 0.2 0.3
onevis --help
```

The `onevis` command loads a `.ONE` file and prints a report: the scene name
and id, the file version, the drawing mode, every volume with its texture
(id, size and whether it is byte or float), the number of textures, the order
in which volumes are drawn, the background colour and, with `--bounds`, the
number of outlines drawn.

Options:

- `--single` — draw only the first volume (the default is nested mode).
- `--bounds` — draw the outlines of the volumes.
- `--background R G B` — background colour, each component in `[0, 1]`.

The command exits with status 1 and a message on standard error if the file
cannot be read or is not a valid `.ONE` file.

## Reading files

```python
from onevis.reader import load, parse, parse_params, OneFormatError

one = load("scene.one")          # from a path
# one = parse(raw_bytes)         # or from bytes already in memory

print(one.scene.name, one.version)
for volume in one.volumes:
    texture = one.texture_for_volume(volume)
    if texture is not None:
        print(volume.name, texture.size_x, texture.size_y, texture.size_z)
```

`parse` and `load` return a `OneFile` with `scene`, `version`, `volumes` and
`textures`. They raise `OneFormatError` (a `ValueError`) when the data is too
short, the file id is wrong, the header points before the start of the data,
the data ends early, or a texture's id in the data block does not match the
header. `load` also lets `OSError` through when the file cannot be read.

Each `Texture` has `id`, `name`, `params`, `size_x`, `size_y`, `size_z`,
`is_float` and `data`. A texture is float when its `TYPE` parameter is
`RGBA_FLOAT`; otherwise its voxels are 8-bit. `data` is a dense numpy array of
shape `(size_z, size_y, size_x, 4)` (`float32` or `uint8`) covering the
bounding box of the voxels, with empty cells zero. The channels are stored in
the order green, blue, red, alpha.

`OneFile.texture_for_volume` looks up the texture named by a volume's
`TEXTURE_ID_0` parameter and returns `None` if there is none.

Parameter strings look like `KEY:value!@OTHER:value`. `parse_params` turns
one into a dictionary; empty parts and parts that do not split into exactly
two fields on `:` are dropped, and keys and values are stripped.

## Geometry and camera

`onevis.geometry` provides 4×4 matrix helpers acting on column vectors
(`identity`, `scale_matrix`, `translation_matrix`, `rotation_matrix`,
`perspective`, `look_at`; angles in degrees), a `Quaternion` type
(`from_axis_and_angle`, `rotate_vector`, `normalized`, multiplication with
`*`), and the vertices of the cube `[-1, 1]^3` as 36 triangle vertices
(`cube_vertices`) and as 24 line vertices of its outline
(`bound_line_vertices`).

`onevis.camera.Camera` is a trackball camera orbiting the origin:

```python
from onevis.camera import Camera

camera = Camera()
camera.press(400, 300)
camera.drag(420, 310, 800, 600)   # rotate by dragging across an 800x600 view
camera.wheel(120)                 # zoom; distance stays between 0.1 and 10
view = camera.view_matrix()
proj = camera.projection_matrix(800, 600)
```

`projection_matrix` uses a 45° field of view with planes at 0.1 and 100 and
raises `ValueError` for a height that is not positive. `project_to_sphere`
maps a widget position onto the unit trackball sphere.

## Render state

`onevis.layout.RenderState` holds what is shown and produces the shader
inputs for one frame:

```python
from onevis.camera import Camera
from onevis.layout import RenderState
from onevis.reader import load

state = RenderState()
state.set_file(load("scene.one"))
state.set_nested_mode(True)
state.toggle_bounds(True)
state.set_background_color((0.2, 0.2, 0.3))

uniforms = state.uniforms(Camera(), 800, 600)   # None if there are no volumes
outlines = state.bound_models()
```

In nested mode the volumes are sorted by their `ORDER` parameter (lowest
first, ties by position), the first ten are considered and those without a
texture are dropped (`select_volumes`). In single mode only the first volume
is drawn. `volume_model` builds a volume's model matrix from its `SCALE_*`,
`ROT_*` and `OFFSET_*` parameters; the scene's `EMISSION` and `OPACITY`
parameters (defaults 1.0 and 600.0) give the emission and opacity scales, and
`param_float` reads a parameter as a float, giving 0.0 for text that is not a
number. `set_background_color` raises `ValueError` unless given three
components.

## What the package does not do

`onevis` has no window and does no drawing: it opens no display, creates no
GPU textures or shaders and ships no shader programs. It computes the textures,
matrices and uniform values a renderer would use, and the `onevis` command
reports them as text.