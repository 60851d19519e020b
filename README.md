# snakecore

Core building blocks for a real-time renderer, and a command-line tool that
compiles GLSL shader permutations with `glslc`.

## Installation

```
pip install .
pip install ".[test]"   # with the test dependencies
```

## Shader permutations

A shader can declare compile-time switches on its second line:

```glsl
#version 460
#define SNAKE_PERMUTATIONS(USE_NORMAL_MAP,EMISSIVE)
...
```

Each combination of defines is compiled to its own `.spv` file under a `spv/`
directory inside the shader directory. To name the output file, the tool takes
the shader's file name, removes its last dot, and adds an 8-character bit
string. Bit `i` of that string is set when define `i` is active. With the line
above, `mesh.frag` gives `spv/meshfrag_00000000.spv` to
`spv/meshfrag_11000000.spv`, and `meshfrag_10000000.spv` is the one built with
`USE_NORMAL_MAP` only. A shader with more than 255 permutations raises
`TooManyPermutationsError`.

The tool searches a directory recursively for shaders (`.vert`, `.frag`,
`.rgen`, `.rchit`, `.rmiss`, `.comp`) and compiles them all concurrently. It can
then copy the `spv/` directory to any number of output directories. Run it with:

```
snake-shader-permutations [shader_dir] [-o OUTPUT_DIR ...] [--compiler PATH] [--once]
```

- `shader_dir`: the directory to search. It defaults to `Core/res/shaders`.
- `-o/--output-dir`: a directory to copy the compiled files into. You can give this option more than once.
- `--compiler`: the path of `glslc`. It defaults to `$VULKAN_SDK/Bin/glslc.exe`.
- `--once`: compile a single time and exit. Without it, the tool waits for Enter and then compiles again.

Each pass prints every command it runs. It then prints either the compiler
output of the failed shaders or a message that all shaders compiled.

You can also call the tool from Python:

```python
from snakecore.shader_permutations import read_shader_file, build_command

shader = read_shader_file("shaders/mesh.frag")
print(shader.defines)
print(build_command(shader, 0b01, "shaders/spv/meshfrag", "glslc"))
```

## Library modules

- `snakecore.events`: `EventManager` and `EventListener`. Events are delivered to the listeners registered for their exact type.
- `snakecore.assets`: `AssetManager`, the reference-counted `AssetRef`, and the `MaterialAsset`, `Texture2DAsset`, `MeshDataAsset` and `StaticMeshAsset` assets.
- `snakecore.scene`: `Scene`, `Entity` and `System`. Entities hold one component of each type and can be looked up by UUID. Direct children are found through their `RelationshipComponent`.
- `snakecore.components`: tag, relationship, light, camera and static mesh components, plus `ComponentEvent[T]` events.
- `snakecore.jobs`: `JobSystem`, a thread pool in which a job waits for the jobs it spawns.
- `snakecore.byte_serializer`: `ByteSerializer` and `ByteDeserializer`. Values are little-endian, and blobs and arrays carry a length prefix.
- `snakecore.render_common`: `halton` and `frame_jitter`, which give the sub-pixel jitter used for temporal anti-aliasing.
- `snakecore.transform_buffer`: `TransformBufferSystem`. It keeps per-frame-in-flight transform buffers as byte arrays, together with copies of the previous frame.
- `snakecore.input`: key and mouse state tracking.
- `snakecore.layers`: `Layer` and `LayerManager`.
- `snakecore.frame_timing`: frame count, time step and elapsed time.
- `snakecore.pipelines`: builders that collect pipeline layout, vertex input and ray-tracing shader data.
- `snakecore.gpu_structs`: packed layouts of structures shared with shaders.
- `snakecore.vk_common`: vertex layouts, format helpers and validation-message logging.
- `snakecore.extra_math`: `Plane` and `Frustum`.
- `snakecore.debug_render`: `DebugRenderQueue`, a queue of debug lines and spheres.
- `snakecore.scene_snapshot`: the per-frame render snapshot data.
- `snakecore.tsqueue`: `ThreadSafeQueue`.
- `snakecore.util`: `UUID`, `new_uuid` and `type_id`.

Example:

```python
from snakecore.events import EventManager, EventListener, FrameStartEvent

events = EventManager()
listener = EventListener(lambda event: print("frame started"))
events.register_listener(FrameStartEvent, listener)
events.dispatch_event(FrameStartEvent())
listener.close()
```

## What this package does not do

It does not render anything. It has no GPU device, no window, no swapchain and
no pipeline creation. The pipeline and GPU-structure modules only describe data.
It does not load models or images, and it does not read or write asset or scene
files. Assets and scenes exist only in memory.

## Running the tests

```
pytest
```