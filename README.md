# phoenixengine

This package is the engine-independent core of a small 2D game engine. It
provides:

- input codes
- an event system
- frame timing
- a profiler that writes Chrome trace files
- scene cameras
- an entity/component scene
- shader-source preprocessing
- YAML scene files

## Installation

```
pip install phoenixengine
```

To install the test dependencies as well:

```
pip install "phoenixengine[test]"
```

## Modules

| Module | Contents |
| --- | --- |
| `phoenixengine.keycodes` | The `Key` and `MouseCode` enumerations, which use GLFW key and button values |
| `phoenixengine.events` | `Event` and its keyboard, mouse, window and app subclasses, plus `EventType`, `EventCategory` and `EventDispatcher` |
| `phoenixengine.timing` | `DeltaTime`, a float of seconds with `seconds` and `milliseconds`, and the stopwatch `Timer` |
| `phoenixengine.instrumentor` | `Instrumentor`, `InstrumentationTimer`, `ProfileResult` and `cleanup_output_string` |
| `phoenixengine.camera` | `SceneCamera`, `ProjectionType` and the `ortho` and `perspective` matrix builders |
| `phoenixengine.components` | Components: ID, tag, transform, sprite, circle, camera, script, native script, rigid body and colliders. Also `BodyType` and `generate_uuid` |
| `phoenixengine.shader` | `preprocess` for shader sources split by `#type` lines, `ShaderStage`, `shader_type_from_string`, `shader_name_from_path`, `read_file` and `cached_file_extension` |
| `phoenixengine.scene` | `Scene`, `Entity`, `ScriptableEntity` and `SceneType` |
| `phoenixengine.serializer` | `SceneSerializer`, plus the conversions between body types or scene types and their names |

## Scenes and serialization

`Scene.create_entity(name)` gives each new entity three components:

- an `IDComponent` holding a random 64-bit identifier
- a `TransformComponent`
- a `TagComponent`, named `"Entity"` when no name is given

`create_entity_with_uuid(uuid, name)` does the same with a fixed identifier, and that entity can later be found with `entity_by_uuid`.

Other `Scene` methods:

- `duplicate_entity` adds a copy of an entity.
- `Scene.copy` copies the whole scene.
- `entities_with(*types)` and `entities()` iterate over entities.
- `primary_camera_entity()` returns the first entity whose camera is primary.

```python
import numpy as np

from phoenixengine.scene import Scene
from phoenixengine.components import SpriteRendererComponent, TransformComponent
from phoenixengine.serializer import SceneSerializer

scene = Scene()
player = scene.create_entity("Player")
player.get_component(TransformComponent).translation = np.array([1.0, 2.0, 0.0])
player.add_component(SpriteRendererComponent)

SceneSerializer(scene).serialize("level.phoenix")

loaded = Scene()
SceneSerializer(loaded).deserialize("level.phoenix")
```

`SceneSerializer` can also work on strings, through `to_yaml()` and `from_yaml(text)`.

`from_yaml` returns `False` in two cases:

- the text is not YAML
- the text has no `Scene` key

If you pass an optional `texture_loader`, it is called with each textured sprite's path during loading. Its result is stored as the sprite's `texture`.

## Events

```python
from phoenixengine.events import EventDispatcher, KeyPressedEvent
from phoenixengine.keycodes import Key

event = KeyPressedEvent(Key.SPACE, 0)
EventDispatcher(event).dispatch(KeyPressedEvent, lambda e: True)
assert event.handled
```

## Profiling

```python
from phoenixengine.instrumentor import Instrumentor, InstrumentationTimer

profiler = Instrumentor.get()
profiler.begin_session("startup", "results.json")
with InstrumentationTimer("load assets"):
    ...
profiler.end_session()
```

The file `results.json` uses the Chrome trace event format. It can be opened in any trace viewer that reads that format.

## Shaders

`preprocess` splits a combined shader source into per-stage sources at its `#type vertex` and `#type fragment` (or `#type pixel`) lines.

`cached_file_extension(stage, "opengl")` names a cached binary, for example `.cached_opengl.vert`. `"vulkan"` is also accepted as the target.

## What this package does not do

- There is no window, no renderer and no graphics context.
- Shaders are preprocessed and named, but they are not compiled, linked or uploaded anywhere.
- There is no physics simulation. `Rigidbody2DComponent` and the collider components only hold settings and queued forces.
- There is no scripting runtime. `ScriptComponent` only stores a class name. `NativeScriptComponent` and `ScriptableEntity` only create and hold Python script objects.
- Nothing here reads whole files as raw bytes, and nothing opens paths in the system file manager.
- The package has no command-line program.