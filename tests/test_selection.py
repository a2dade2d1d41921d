"""
Selection and transform controller tests.
"""
from canvas import SceneState, TransformController, TransformGesture, BoundingBox


def make(handle):
    scene = SceneState()
    layer_id = scene.add_layer(handle)
    return scene, TransformController(scene), layer_id


def placement(scene, layer_id):
    layer = scene.get_layer(layer_id)
    return (layer.x, layer.y, layer.rotation, layer.scale)


def test_single_selection(blue):
    scene, controller, first = make(blue)
    second = scene.add_layer(blue)

    controller.select(first)
    controller.select(second)
    assert controller.selected_layer_id == second

    controller.select(None)
    assert controller.selected_layer_id is None
    assert controller.handle_box() is None


def test_select_unknown_layer_clears(blue):
    scene, controller, layer_id = make(blue)
    controller.select(layer_id)
    controller.select(layer_id + 1)
    assert controller.selected_layer_id is None


def test_handle_box_follows_layer(blue):
    scene, controller, layer_id = make(blue)
    scene.update_layer(layer_id, scale=2)
    controller.select(layer_id)

    box = controller.handle_box()
    assert (box.x, box.y, box.width, box.height) == (50, 50, 200, 100)


def test_end_drag_updates_position(blue):
    scene, controller, layer_id = make(blue)
    controller.begin_gesture(layer_id)
    assert controller.gesture_in_progress

    assert controller.end_drag(layer_id, 300, 120)
    assert placement(scene, layer_id) == (300, 120, 0, 1)
    assert not controller.gesture_in_progress


def test_end_transform_uses_uniform_scale(blue):
    scene, controller, layer_id = make(blue)

    assert controller.end_transform(layer_id, TransformGesture(x=60, y=70, rotation=15, scale_x=1.5, scale_y=3))
    assert placement(scene, layer_id) == (60, 70, 15, 1.5)


def test_transform_below_min_size_rejected(blue):
    # blue is 100x50: scale 0.3 gives a 15 unit tall box
    scene, controller, layer_id = make(blue)
    scene.update_layer(layer_id, x=10, y=10, rotation=5, scale=1.2)
    before = placement(scene, layer_id)

    assert controller.end_transform(layer_id, TransformGesture(x=0, y=0, rotation=40, scale_x=0.3)) is False
    assert placement(scene, layer_id) == before


def test_transform_at_min_size_accepted(blue):
    scene, controller, layer_id = make(blue)
    assert controller.end_transform(layer_id, TransformGesture(x=0, y=0, rotation=0, scale_x=0.4))
    assert placement(scene, layer_id) == (0, 0, 0, 0.4)


def test_bound_box_keeps_old_box():
    controller = TransformController(SceneState())
    old = BoundingBox(0, 0, 100, 100)

    assert controller.bound_box(old, BoundingBox(0, 0, 19, 100)) is old
    assert controller.bound_box(old, BoundingBox(0, 0, 100, 19.9)) is old
    new = BoundingBox(0, 0, 20, 20)
    assert controller.bound_box(old, new) is new


def test_gesture_on_unknown_layer_is_noop(blue):
    scene, controller, layer_id = make(blue)
    assert controller.end_drag(layer_id + 5, 1, 1) is False
    assert controller.end_transform(layer_id + 5, TransformGesture(1, 1, 0, 1)) is False
    assert placement(scene, layer_id) == (50, 50, 0, 1)
