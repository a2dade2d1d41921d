"""
Selection & Transform Controller

Tracks the single selected layer and turns finished drag / transform
gestures into Scene Model updates.

Gestures only touch the scene when they END. While a drag or resize is in
flight the scene still holds the last completed placement, so a render
always sees a consistent layer.
"""
import math
from dataclasses import dataclass
from typing import Optional

from config import Config

from .state import Layer, SceneState


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box of the transform handle, in canvas units."""
    x: float
    y: float
    width: float
    height: float
    rotation: float = 0.0

    def is_below(self, floor: float) -> bool:
        return self.width < floor or self.height < floor


@dataclass(frozen=True)
class TransformGesture:
    """Node attributes read at the end of a resize/rotate gesture."""
    x: float
    y: float
    rotation: float
    scale_x: float
    scale_y: Optional[float] = None  # Ignored: scaling is uniform


@dataclass
class SelectionState:
    selected_layer_id: Optional[int] = None


def layer_box(layer: Layer, scale: Optional[float] = None) -> BoundingBox:
    """Handle box for a layer at its current (or a proposed) scale."""
    scale = layer.scale if scale is None else scale
    return BoundingBox(
        x=layer.x,
        y=layer.y,
        width=layer.image.width * abs(scale),
        height=layer.image.height * abs(scale),
        rotation=layer.rotation,
    )


def box_corners(box: BoundingBox) -> list[tuple[float, float]]:
    """Corners of a box rotated clockwise about its top-left origin."""
    theta = math.radians(box.rotation)
    cos_t, sin_t = math.cos(theta), math.sin(theta)
    corners = []
    for px, py in ((0, 0), (box.width, 0), (box.width, box.height), (0, box.height)):
        corners.append((
            box.x + px * cos_t - py * sin_t,
            box.y + px * sin_t + py * cos_t,
        ))
    return corners


class TransformController:
    """
    Mediates selection and gestures for one scene.

    Usage:
        controller = TransformController(scene)
        controller.select(layer_id)
        controller.end_drag(layer_id, 120, 80)
        controller.end_transform(layer_id, TransformGesture(120, 80, 15, 1.5))
    """

    def __init__(self, scene: SceneState, min_size: float = Config.MIN_TRANSFORM_SIZE):
        self.scene = scene
        self.selection = SelectionState()
        self.min_size = min_size
        self.active_gesture_layer_id: Optional[int] = None

    # ─────────────────────────────────────────────────────────
    # Selection
    # ─────────────────────────────────────────────────────────

    @property
    def selected_layer_id(self) -> Optional[int]:
        return self.selection.selected_layer_id

    def select(self, layer_id: Optional[int]) -> None:
        """Select one layer, or clear the selection with None."""
        if layer_id is not None and self.scene.get_layer(layer_id) is None:
            layer_id = None
        self.selection.selected_layer_id = layer_id

    def clear_selection(self) -> Optional[int]:
        """Clear the selection and return what was selected."""
        previous = self.selection.selected_layer_id
        self.selection.selected_layer_id = None
        return previous

    def handle_box(self) -> Optional[BoundingBox]:
        """Box for the selection decoration, None when nothing is selected."""
        layer_id = self.selection.selected_layer_id
        if layer_id is None:
            return None
        layer = self.scene.get_layer(layer_id)
        if layer is None:
            self.selection.selected_layer_id = None
            return None
        return layer_box(layer)

    # ─────────────────────────────────────────────────────────
    # Gestures
    # ─────────────────────────────────────────────────────────

    def begin_gesture(self, layer_id: int) -> None:
        self.active_gesture_layer_id = layer_id

    @property
    def gesture_in_progress(self) -> bool:
        return self.active_gesture_layer_id is not None

    def bound_box(self, old_box: BoundingBox, new_box: BoundingBox) -> BoundingBox:
        """Reject any proposed box smaller than the floor on either axis."""
        if new_box.is_below(self.min_size):
            return old_box
        return new_box

    def end_drag(self, layer_id: int, x: float, y: float) -> bool:
        """Commit the position a drag ended at."""
        self.active_gesture_layer_id = None
        return self.scene.update_layer(layer_id, x=x, y=y)

    def end_transform(self, layer_id: int, gesture: TransformGesture) -> bool:
        """
        Commit the result of a resize/rotate gesture.

        Uses scale_x as the uniform scale. A gesture whose box would drop
        below the minimum size leaves the layer untouched.

        Returns:
            True if the layer was updated
        """
        self.active_gesture_layer_id = None
        layer = self.scene.get_layer(layer_id)
        if layer is None:
            return False

        old_box = layer_box(layer)
        proposed = BoundingBox(
            x=gesture.x,
            y=gesture.y,
            width=layer.image.width * abs(gesture.scale_x),
            height=layer.image.height * abs(gesture.scale_x),
            rotation=gesture.rotation,
        )
        if self.bound_box(old_box, proposed) is old_box:
            return False

        return self.scene.update_layer(
            layer_id,
            x=gesture.x,
            y=gesture.y,
            rotation=gesture.rotation,
            scale=gesture.scale_x,
        )
