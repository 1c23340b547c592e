# planetsim

A small layered rendering engine. An `Application` owns a window, a `Renderer`
and a `LayerStack`. Every frame it updates each layer from the bottom of the
stack to the top. It passes each event from the top layer down until a layer
marks the event as handled.

## Modules

- `planetsim.codes`: the `KeyCode` and `MouseCode` enums, which use GLFW
  numbering.
- `planetsim.events`: window, application, key and mouse events. Events are
  grouped by `EventType` and `EventCategory`. An `EventDispatcher` calls a
  handler only when the event has the handler's event class, and the value
  the handler returns becomes `event.handled`.
- `planetsim.layers`: `Layer`, which has the hooks `on_attach`, `on_detach`,
  `on_update`, `on_imgui_render` and `on_event`, and `LayerStack`. Layers
  added with `push_layer` always stay below overlays added with
  `push_overlay`.
- `planetsim.input`: module-level queries (`is_key_pressed`,
  `is_mouse_button_pressed`, `get_mouse_position`, `get_mouse_x`,
  `get_mouse_y`). The answers come from a backend that can be swapped.
  `InputState` is an in-memory backend that you drive yourself with `press`,
  `release`, `press_button`, `release_button` and `move_mouse`. Install it
  with `set_backend`.
- `planetsim.log`: the `System` and `App` loggers. `init()` attaches stdout
  handlers, enables every level including a `TRACE` level, and `shutdown()`
  removes them again.
- `planetsim.buffer`: `ShaderDataType`, `BufferElement` and `BufferLayout`.
  A layout computes the offset of each element and the stride. The module
  also has `VertexBuffer` (float32), `IndexBuffer` (uint32) and
  `VertexArray`.
- `planetsim.renderer`: the abstract `RendererAPI`,
  `RecordingRendererAPI`, and `Renderer`. `RecordingRendererAPI` keeps the
  matrices, viewport and clear colour it is given and logs every call in
  `calls`. `Renderer` provides `begin_scene`, `submit` and `end_scene`.
- `planetsim.model`: `parse_obj` reads Wavefront OBJ text and splits
  polygons into triangle fans. `build_mesh` and `load_mesh` build
  interleaved meshes. Identical vertices are merged. The V texture
  coordinate is flipped. `unify` centres the mesh and scales it into the
  unit cube. Tangents and bitangents can be generated when normals and
  texture coordinates are loaded. The module also has `ModelLibrary`.
- `planetsim.texture`: `Texture2D` is an RGBA image. `Texture2D.from_file`
  reads it with Pillow. `TextureLibrary` stores textures by name and keeps
  a list of bound texture names. It logs a warning on a duplicate add and
  when asked to remove a name it does not hold.
- `planetsim.assets`: `get_asset_libraries()` returns the single shared
  `AssetLibraries`, which holds one model library and one texture library.
- `planetsim.camera`: `perspective` and `look_at` matrices, a perspective
  `Camera`, and a `CameraController`. The controller moves the camera with
  W/A/S/D, space and left shift. The mouse turns it. Scrolling changes the
  zoom level, which sets the movement speed on the next update.
- `planetsim.window`: `WindowProps`, the abstract `Window`, and
  `HeadlessWindow`. Code posts events to a `HeadlessWindow` with `post`. They
  are delivered on the next `on_update`.
- `planetsim.application`: `Application`, the main loop. Only one can exist
  at a time, and `Application.get()` returns it. Use it as a context manager
  so that leaving the block detaches its layers and frees the slot. A
  `WindowCloseEvent` stops the loop. A resize to zero width or height
  pauses layer updates.
- `planetsim.app_layer`: `PlanetSimLayer`, `create_application` and the
  `planetsim` command.

## Installing

```
pip install .
```

## Running

```
planetsim path/to/model.obj path/to/texture.jpg --frames 100
```

The command loads the model (with texture coordinates) and the texture into
the shared asset libraries. It then runs the application in a
`HeadlessWindow`. Each frame it clears, sets the camera matrices and submits
the model to the recording back-end.

- `--frames N` stops the command after N frames. Without it, the loop runs
  until it is interrupted with Ctrl-C.
- If you leave out the paths, the command uses `assets/models/chalet.obj`
  and `assets/textures/chalet.jpg`, relative to the current directory.
- A file that cannot be read or parsed makes the command print the error
  and exit with status 1.

## Using the pieces

```python
from planetsim.model import parse_obj, build_mesh, ModelLibrary

text = """
v 0 0 0
v 1 0 0
v 0 1 0
vt 0 0
vt 1 0
vt 0 1
f 1/1 2/2 3/3
"""
mesh = build_mesh("tri", parse_obj(text), False, True, False, True)
print(mesh.stride, mesh.vertex_count, list(mesh.indices))

library = ModelLibrary()
library.add(mesh)
assert "tri" in library
```

```python
from planetsim.events import EventDispatcher, WindowResizeEvent

event = WindowResizeEvent(800, 600)
EventDispatcher(event).dispatch(WindowResizeEvent, lambda e: True)
assert event.handled
```

```python
from planetsim import input
from planetsim.codes import KeyCode

state = input.InputState()
state.press(KeyCode.W)
input.set_backend(state)
assert input.is_key_pressed(KeyCode.W)
```

## What it does not do

The package does not open an on-screen window and does not draw pixels on a
GPU. The only window is `HeadlessWindow`, and the only back-end is
`RecordingRendererAPI`, which records commands and does nothing else. There
are no shaders and no debug user interface. With `debug=True`, the
application calls each layer's `on_imgui_render`.
`PlanetSimLayer.on_imgui_render` only stores its settings in `settings`.
To show anything on screen, provide your own `Window` and `RendererAPI`
subclasses.

## Tests

```
pip install .[test]
pytest
```