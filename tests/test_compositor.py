"""
Compositor tests. Pixels are sampled well inside shapes to stay clear of
resampling at the edges.
"""
import io

from PIL import Image

from canvas import (
    SceneState,
    TransformController,
    render,
    render_image,
    render_preview,
    to_data_url,
    data_url_to_bytes,
    save_png,
)
from conftest import solid_handle


RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)
GREEN = (0, 255, 0, 255)


def decode(png: bytes) -> Image.Image:
    return Image.open(io.BytesIO(png)).convert("RGBA")


def test_empty_scene_is_transparent_canvas():
    image = decode(render(SceneState()))
    assert image.size == (800, 600)
    assert image.getpixel((400, 300))[3] == 0


def test_background_stretched_to_canvas(red):
    scene = SceneState()
    scene.set_background(red)
    image = render_image(scene)

    assert image.getpixel((5, 5)) == RED
    assert image.getpixel((795, 595)) == RED


def test_layer_at_default_offset(red, blue):
    scene = SceneState()
    scene.set_background(red)
    scene.add_layer(blue)  # 100x50 at (50, 50)
    image = render_image(scene)

    assert image.getpixel((100, 75)) == BLUE
    assert image.getpixel((40, 40)) == RED
    assert image.getpixel((170, 75)) == RED


def test_later_layers_paint_on_top(blue):
    scene = SceneState()
    scene.add_layer(blue)
    scene.add_layer(solid_handle(GREEN, size=(100, 50)))
    assert render_image(scene).getpixel((100, 75)) == GREEN


def test_rotation_is_clockwise_about_origin(blue):
    scene = SceneState()
    layer_id = scene.add_layer(blue)
    scene.update_layer(layer_id, x=200, y=200, rotation=90)
    image = render_image(scene)

    # 100x50 rotated 90° clockwise about (200, 200) covers x 150..200, y 200..300
    assert image.getpixel((175, 250)) == BLUE
    assert image.getpixel((250, 225))[3] == 0


def test_scale_about_origin():
    scene = SceneState()
    layer_id = scene.add_layer(solid_handle(GREEN, size=(20, 20)))
    scene.update_layer(layer_id, x=0, y=0, scale=2)
    image = render_image(scene)

    assert image.getpixel((30, 30)) == GREEN
    assert image.getpixel((50, 50))[3] == 0


def test_render_is_deterministic(red, blue):
    scene = SceneState()
    scene.set_background(red)
    layer_id = scene.add_layer(blue)
    scene.update_layer(layer_id, rotation=33, scale=0.8)

    assert render(scene) == render(scene)


def test_selection_never_reaches_export(red, blue):
    scene = SceneState()
    scene.set_background(red)
    layer_id = scene.add_layer(blue)
    controller = TransformController(scene)

    controller.select(layer_id)
    with_selection = render(scene)
    preview = render_preview(scene, controller.handle_box())
    controller.select(None)
    without_selection = render(scene)

    assert with_selection == without_selection
    assert decode(with_selection).tobytes() != preview.tobytes()


def test_data_url_round_trip(tmp_path, red):
    scene = SceneState()
    scene.set_background(red)
    png = render(scene)

    data_url = to_data_url(png)
    assert data_url.startswith("data:image/png;base64,")
    assert data_url_to_bytes(data_url) == png

    path = save_png(data_url, tmp_path / "out" / "collage.png")
    assert path.read_bytes() == png
