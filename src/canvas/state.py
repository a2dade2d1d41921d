"""
Scene Model

Pure data for the collage canvas: one optional background and an ordered
list of layers. Insertion order is paint order, background always first.

## Key Concept: Shared Image Handles

An ImageHandle is an already-decoded raster. Several layers may point at the
same handle (e.g. the same upload added twice), so handles are never mutated
after decoding.
"""
import base64
import io
import itertools
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from PIL import Image

from config import Config


# ─────────────────────────────────────────────────────────────
# Image Handle
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True, eq=False)
class ImageHandle:
    """An opaque decoded image (RGBA)."""
    image: Image.Image
    source: str = ""  # Provenance for logs: file path, "generated", ...

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @classmethod
    def from_bytes(cls, data: bytes, source: str = "") -> "ImageHandle":
        """
        Decode encoded image bytes (PNG, JPEG, ...).

        Raises:
            ValueError: If the bytes are not a decodable image
        """
        try:
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                decoded = img.convert("RGBA")
        except (OSError, Image.DecompressionBombError) as e:
            raise ValueError(f"Could not decode image{f' from {source}' if source else ''}: {e}") from e
        return cls(image=decoded, source=source)

    @classmethod
    def from_base64(cls, data: str, source: str = "generated") -> "ImageHandle":
        """Decode a base64 payload, with or without a data-URL prefix."""
        if data.startswith("data:"):
            data = data.split(",", 1)[1]
        try:
            raw = base64.b64decode(data, validate=True)
        except ValueError as e:
            raise ValueError(f"Invalid base64 image data: {e}") from e
        return cls.from_bytes(raw, source=source)

    @classmethod
    def from_path(cls, path: str | Path) -> "ImageHandle":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Image not found: {path}")
        return cls.from_bytes(path.read_bytes(), source=str(path))


# ─────────────────────────────────────────────────────────────
# Layer + Scene
# ─────────────────────────────────────────────────────────────

LAYER_FIELDS = ("x", "y", "rotation", "scale")


@dataclass
class Layer:
    """A positioned image above the background. `rotation` is in degrees."""
    id: int
    image: ImageHandle
    x: float = Config.LAYER_DEFAULT_X
    y: float = Config.LAYER_DEFAULT_Y
    rotation: float = 0.0
    scale: float = 1.0


@dataclass
class SceneState:
    """Background + ordered layers."""
    background: Optional[ImageHandle] = None
    layers: list[Layer] = field(default_factory=list)
    _ids: itertools.count = field(default_factory=lambda: itertools.count(1), repr=False)

    def set_background(self, image: ImageHandle) -> None:
        """Replace the background unconditionally."""
        self.background = image

    def add_layer(self, image: ImageHandle) -> int:
        """Append a layer at the default placement. Returns its id."""
        layer_id = next(self._ids)
        self.layers.append(Layer(id=layer_id, image=image))
        return layer_id

    def get_layer(self, layer_id: int) -> Optional[Layer]:
        for layer in self.layers:
            if layer.id == layer_id:
                return layer
        return None

    def update_layer(self, layer_id: int, **changes: float) -> bool:
        """
        Apply a partial placement update to one layer.

        Unknown ids are a no-op (returns False). Only x, y, rotation and
        scale can be changed.

        Raises:
            ValueError: If a field other than x/y/rotation/scale is given
        """
        unknown = set(changes) - set(LAYER_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update layer fields: {sorted(unknown)}")

        layer = self.get_layer(layer_id)
        if layer is None:
            return False

        for name, value in changes.items():
            setattr(layer, name, float(value))
        return True

    def remove_layer(self, layer_id: int) -> bool:
        """Remove a layer by id, keeping the order of the rest."""
        remaining = [layer for layer in self.layers if layer.id != layer_id]
        removed = len(remaining) != len(self.layers)
        self.layers = remaining
        return removed

    def clear(self) -> None:
        """Discard the whole scene. Ids keep increasing."""
        self.background = None
        self.layers = []

    @property
    def is_empty(self) -> bool:
        return self.background is None and not self.layers
