"""
Canvas - scene model, selection/transform, and compositing.

## Usage

```python
from canvas import SceneState, ImageHandle, TransformController, render

scene = SceneState()
scene.set_background(ImageHandle.from_path("beach.jpg"))
layer_id = scene.add_layer(ImageHandle.from_path("person.png"))

controller = TransformController(scene)
controller.select(layer_id)
controller.end_drag(layer_id, 200, 150)

png = render(scene)  # never includes the selection handle
```
"""

from .state import ImageHandle, Layer, SceneState
from .selection import (
    BoundingBox,
    SelectionState,
    TransformController,
    TransformGesture,
    layer_box,
)
from .compositor import (
    render,
    render_image,
    render_preview,
    to_data_url,
    base64_to_data_url,
    data_url_to_bytes,
    save_png,
)
from .loader import load_scene, scene_from_dict

__all__ = [
    "ImageHandle",
    "Layer",
    "SceneState",
    "BoundingBox",
    "SelectionState",
    "TransformController",
    "TransformGesture",
    "layer_box",
    "render",
    "render_image",
    "render_preview",
    "to_data_url",
    "base64_to_data_url",
    "data_url_to_bytes",
    "save_png",
    "load_scene",
    "scene_from_dict",
]
