"""
Provider adapter tests. No real provider is contacted.
"""
import pytest

from config import Config
from tools import animator, image_gen
from tools.harmonizer import (
    HARMONIZATION_DIRECTIVE,
    build_harmonize_prompt,
    closest_aspect_ratio,
)


class FakeHTTPResponse:
    def __init__(self, status_code=200, body=None, text=""):
        self.status_code = status_code
        self._body = body
        self.text = text

    def json(self):
        return self._body

    def raise_for_status(self):
        if self.status_code >= 400:
            raise animator.requests.HTTPError(f"{self.status_code}")


def test_harmonize_prompt_with_instructions():
    prompt = build_harmonize_prompt("make it snowy")
    assert prompt.startswith(HARMONIZATION_DIRECTIVE)
    assert prompt.endswith(
        "make sure you do the following: make it snowy \n Make sure all objects have proper shadows and depth"
    )


@pytest.mark.parametrize("instructions", [None, "", "   "])
def test_harmonize_prompt_fallback(instructions):
    prompt = build_harmonize_prompt(instructions)
    assert prompt.endswith(
        "make sure you use the following style: Make sure all objects have proper shadows and depth"
    )


def test_closest_aspect_ratio():
    assert closest_aspect_ratio(800, 600) == "4:3"
    assert closest_aspect_ratio(1024, 1024) == "1:1"
    assert closest_aspect_ratio(1920, 1080) == "16:9"
    assert closest_aspect_ratio(0, 10) == "1:1"


def test_image_gen_payload_is_fixed():
    payload = image_gen.build_payload("a boat")
    assert payload == {"prompt": "a boat", "width": 1024, "height": 1024, "seed": 0, "steps": 4}


def test_image_gen_success(monkeypatch):
    monkeypatch.setattr(Config, "NVIDIA_NIM_KEY", "key")
    sent = {}

    def fake_post(url, headers, json, timeout):
        sent.update(url=url, headers=headers, json=json)
        return FakeHTTPResponse(body={"artifacts": [{"base64": "AAAA"}]})

    monkeypatch.setattr(image_gen.requests, "post", fake_post)

    assert image_gen.generate_image("a boat") == "AAAA"
    assert sent["headers"]["Authorization"] == "Bearer key"
    assert sent["url"] == Config.IMAGEGEN_URL


def test_image_gen_http_error(monkeypatch):
    monkeypatch.setattr(Config, "NVIDIA_NIM_KEY", "key")
    monkeypatch.setattr(image_gen.requests, "post", lambda *a, **k: FakeHTTPResponse(503, text="busy"))

    with pytest.raises(image_gen.ImageGenerationError, match="Image generation failed: 503"):
        image_gen.generate_image("a boat")


def test_image_gen_bad_body(monkeypatch):
    monkeypatch.setattr(Config, "NVIDIA_NIM_KEY", "key")
    monkeypatch.setattr(image_gen.requests, "post", lambda *a, **k: FakeHTTPResponse(body={"artifacts": []}))

    with pytest.raises(image_gen.ImageGenerationError, match="Invalid response format"):
        image_gen.generate_image("a boat")


def test_missing_key_raises(monkeypatch):
    monkeypatch.setattr(Config, "NVIDIA_NIM_KEY", None)
    with pytest.raises(ValueError, match="NVIDIA_NIM_KEY"):
        image_gen.generate_image("a boat")


def test_start_animation_sends_first_frame(monkeypatch):
    monkeypatch.setattr(Config, "REPLICATE_API_TOKEN", "token")
    sent = {}

    def fake_post(url, headers, json, timeout):
        sent.update(url=url, json=json)
        return FakeHTTPResponse(201, body={"id": "p1", "status": "starting"})

    monkeypatch.setattr(animator.requests, "post", fake_post)

    prediction = animator.start_animation(b"\x89PNG", "waves")

    assert prediction["id"] == "p1"
    assert sent["url"].endswith("/models/minimax/video-01/predictions")
    assert sent["json"]["input"]["prompt"] == "waves"
    assert sent["json"]["input"]["first_frame_image"].startswith("data:image/png;base64,")


def test_output_url_shapes():
    assert animator.output_url({"output": "https://x/v.mp4"}) == "https://x/v.mp4"
    assert animator.output_url({"output": ["https://x/a.mp4"]}) == "https://x/a.mp4"
    assert animator.output_url({"output": []}) is None
