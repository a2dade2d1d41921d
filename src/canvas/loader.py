"""
Scene loader for headless runs.

Scene file format (JSON):
    {
        "background": "beach.jpg",
        "layers": [
            {"path": "person.png", "x": 120, "y": 200, "rotation": -8, "scale": 0.6},
            {"path": "dog.png"}
        ]
    }

Paths are resolved relative to the scene file. Omitted placement fields keep
the default placement of a freshly added layer.
"""
import json
from pathlib import Path

from .state import ImageHandle, SceneState, LAYER_FIELDS


def scene_from_dict(data: dict, base_dir: Path | None = None) -> SceneState:
    """
    Build a SceneState from a scene description.

    Layers referencing the same file share one ImageHandle.

    Raises:
        ValueError: If the description is malformed
        FileNotFoundError: If a referenced image is missing
    """
    if not isinstance(data, dict):
        raise ValueError("Scene description must be a JSON object")

    base_dir = base_dir or Path.cwd()
    handles: dict[Path, ImageHandle] = {}

    def load(ref: str) -> ImageHandle:
        path = Path(ref)
        if not path.is_absolute():
            path = base_dir / path
        path = path.resolve()
        if path not in handles:
            handles[path] = ImageHandle.from_path(path)
        return handles[path]

    scene = SceneState()

    background = data.get("background")
    if background:
        scene.set_background(load(background))

    layers = data.get("layers", [])
    if not isinstance(layers, list):
        raise ValueError("'layers' must be a list")

    for i, entry in enumerate(layers):
        if not isinstance(entry, dict) or not entry.get("path"):
            raise ValueError(f"Layer {i} needs a 'path'")
        layer_id = scene.add_layer(load(entry["path"]))
        placement = {name: entry[name] for name in LAYER_FIELDS if name in entry}
        if placement:
            scene.update_layer(layer_id, **placement)

    return scene


def load_scene(scene_path: str | Path) -> SceneState:
    """Load a SceneState from a JSON scene file."""
    scene_path = Path(scene_path)
    if not scene_path.exists():
        raise FileNotFoundError(f"Scene file not found: {scene_path}")

    try:
        data = json.loads(scene_path.read_text())
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid scene file {scene_path}: {e}") from e

    scene = scene_from_dict(data, base_dir=scene_path.parent)
    print(f"📂 Loaded scene: {len(scene.layers)} layers"
          f"{' + background' if scene.background else ''}")
    return scene
