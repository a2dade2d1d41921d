"""
Shared fixtures: tiny solid-color images and a scripted fake API client.
"""
import base64
import io

import pytest
from PIL import Image

from canvas import ImageHandle


def solid_png(color, size=(10, 10)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGBA", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def solid_handle(color, size=(10, 10)) -> ImageHandle:
    return ImageHandle.from_bytes(solid_png(color, size), source="test")


class FakeClient:
    """
    Stands in for CollageApiClient.

    Responses are scripted per endpoint; an Exception instance is raised
    instead of returned. Poll responses are consumed in order and the last
    one repeats.
    """

    def __init__(self, harmonize=None, submit=None, polls=None, imagegen=None):
        self.harmonize_response = harmonize or {"success": True, "image": "AAAA", "instructions": ""}
        self.submit_response = submit or {"success": True, "predictionId": "p1", "status": "processing"}
        self.poll_responses = list(polls or [{"success": True, "status": "processing"}])
        self.imagegen_response = imagegen
        self.calls = []

    def _answer(self, response):
        if isinstance(response, Exception):
            raise response
        return response

    def harmonize(self, image, instructions=""):
        self.calls.append(("harmonize", instructions))
        return self._answer(self.harmonize_response)

    def submit_animation(self, image, text):
        self.calls.append(("submit_animation", text))
        return self._answer(self.submit_response)

    def animation_status(self, prediction_id):
        self.calls.append(("animation_status", prediction_id))
        response = self.poll_responses[0]
        if len(self.poll_responses) > 1:
            self.poll_responses.pop(0)
        return self._answer(response)

    def generate_image(self, prompt):
        self.calls.append(("generate_image", prompt))
        return self._answer(self.imagegen_response)

    def count(self, name):
        return sum(1 for call in self.calls if call[0] == name)


@pytest.fixture
def red():
    return solid_handle((255, 0, 0, 255))


@pytest.fixture
def blue():
    return solid_handle((0, 0, 255, 255), size=(100, 50))


@pytest.fixture
def png_b64():
    return base64.b64encode(solid_png((0, 255, 0, 255), size=(32, 32))).decode("ascii")


@pytest.fixture
def fake_client():
    return FakeClient()
