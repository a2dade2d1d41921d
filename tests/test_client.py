"""
CollageApiClient tests with a fake requests session.
"""
import pytest
import requests

from orchestrator.client import ApiError, CollageApiClient


class FakeResponse:
    def __init__(self, status_code=200, body=None, raw=None):
        self.status_code = status_code
        self._body = body
        self._raw = raw

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._raw is not None:
            raise ValueError("not json")
        return self._body


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def request(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        if self.error:
            raise self.error
        return self.response


def client_for(response=None, error=None):
    session = FakeSession(response, error)
    return CollageApiClient("http://api.test/", timeout=5, session=session), session


def test_harmonize_sends_multipart():
    client, session = client_for(FakeResponse(body={"success": True, "image": "AAAA"}))

    data = client.harmonize(b"png", "sunset")

    method, url, kwargs = session.requests[0]
    assert (method, url) == ("POST", "http://api.test/api/gen/harmonize")
    assert kwargs["files"]["image"][0] == "collage.png"
    assert kwargs["data"] == {"instructions": "sunset"}
    assert kwargs["timeout"] == 5
    assert data["image"] == "AAAA"


def test_poll_passes_prediction_id():
    client, session = client_for(FakeResponse(body={"success": True, "status": "processing"}))
    client.animation_status("p1")
    method, url, kwargs = session.requests[0]
    assert method == "GET"
    assert kwargs["params"] == {"id": "p1"}


def test_error_body_message_used():
    client, _ = client_for(FakeResponse(500, {"success": False, "status": "failed", "error": "boom"}))
    with pytest.raises(ApiError) as exc:
        client.animation_status("p1")
    assert exc.value.message == "boom"
    assert exc.value.status_code == 500


def test_error_without_body_uses_default():
    client, _ = client_for(FakeResponse(502, raw="<html>bad gateway</html>"))
    with pytest.raises(ApiError) as exc:
        client.generate_image("cat")
    assert exc.value.message == "Failed to generate image"


def test_malformed_success_body():
    client, _ = client_for(FakeResponse(200, body=["not", "a", "dict"]))
    with pytest.raises(ApiError):
        client.submit_animation(b"png", "go")


def test_transport_error_wrapped():
    client, _ = client_for(error=requests.ConnectionError("refused"))
    with pytest.raises(ApiError) as exc:
        client.harmonize(b"png")
    assert "refused" in exc.value.message
