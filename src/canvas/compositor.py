"""
Compositor

Flattens a SceneState into one PNG. The export path never draws selection
decoration, so no "hide the handle, wait, capture" dance is needed: callers
get a decoration-free raster synchronously.

Paint order:
    1. background, stretched to the full canvas
    2. layers in insertion order, each scaled and rotated (clockwise)
       about its own top-left origin placed at (x, y)
"""
import base64
import io
import math
from pathlib import Path
from typing import Optional

from PIL import Image, ImageDraw

from config import Config

from .selection import BoundingBox, box_corners
from .state import Layer, SceneState


PNG_MIME = "image/png"
HANDLE_COLOR = (0, 161, 255, 255)


# ─────────────────────────────────────────────────────────────
# Rendering
# ─────────────────────────────────────────────────────────────

def _layer_affine(layer: Layer) -> tuple[float, float, float, float, float, float]:
    """
    Inverse affine (canvas -> layer image) for Image.transform.

    Forward mapping is u = x + s*(px*cos - py*sin), v = y + s*(px*sin + py*cos).
    """
    theta = math.radians(layer.rotation)
    cos_t, sin_t = math.cos(theta), math.sin(theta)
    s = layer.scale
    return (
        cos_t / s,
        sin_t / s,
        -(layer.x * cos_t + layer.y * sin_t) / s,
        -sin_t / s,
        cos_t / s,
        (layer.x * sin_t - layer.y * cos_t) / s,
    )


def render_image(
    scene: SceneState,
    width: int = Config.CANVAS_WIDTH,
    height: int = Config.CANVAS_HEIGHT,
) -> Image.Image:
    """Render the scene to an RGBA canvas."""
    canvas = Image.new("RGBA", (width, height), (0, 0, 0, 0))

    if scene.background is not None:
        background = scene.background.image.resize(
            (width, height), Image.Resampling.LANCZOS
        )
        canvas.alpha_composite(background)

    for layer in scene.layers:
        if layer.scale == 0:
            continue
        placed = layer.image.image.transform(
            (width, height),
            Image.Transform.AFFINE,
            _layer_affine(layer),
            resample=Image.Resampling.BICUBIC,
        )
        canvas.alpha_composite(placed)

    return canvas


def encode_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def render(
    scene: SceneState,
    width: int = Config.CANVAS_WIDTH,
    height: int = Config.CANVAS_HEIGHT,
) -> bytes:
    """
    Render the scene to PNG bytes.

    Deterministic: the same scene always produces the same bytes.
    Selection state is not an input, so it cannot leak into the output.
    """
    return encode_png(render_image(scene, width, height))


def render_preview(
    scene: SceneState,
    handle: Optional[BoundingBox] = None,
    width: int = Config.CANVAS_WIDTH,
    height: int = Config.CANVAS_HEIGHT,
) -> Image.Image:
    """On-screen view: the export render plus the transform handle outline."""
    canvas = render_image(scene, width, height)
    if handle is not None:
        draw = ImageDraw.Draw(canvas)
        corners = box_corners(handle)
        draw.line(corners + [corners[0]], fill=HANDLE_COLOR, width=2)
        for cx, cy in corners:
            draw.rectangle((cx - 4, cy - 4, cx + 4, cy + 4), outline=HANDLE_COLOR, fill=(255, 255, 255, 255))
    return canvas


# ─────────────────────────────────────────────────────────────
# Encoding helpers
# ─────────────────────────────────────────────────────────────

def to_data_url(png: bytes, mime: str = PNG_MIME) -> str:
    """Inline-displayable data URL for encoded image bytes."""
    return f"data:{mime};base64,{base64.b64encode(png).decode('ascii')}"


def base64_to_data_url(b64: str, mime: str = PNG_MIME) -> str:
    return f"data:{mime};base64,{b64}"


def data_url_to_bytes(data_url: str) -> bytes:
    """
    Decode a base64 data URL back to raw bytes.

    Raises:
        ValueError: If the string is not a base64 data URL
    """
    header, sep, payload = data_url.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("Not a base64 data URL")
    return base64.b64decode(payload)


def save_png(data: bytes | str, path: str | Path) -> Path:
    """Write PNG bytes (or a PNG data URL) to disk. Returns the path."""
    if isinstance(data, str):
        data = data_url_to_bytes(data)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path
