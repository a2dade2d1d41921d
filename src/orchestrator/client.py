"""
HTTP client for the collage proxy endpoints.

Every failure (transport error, non-2xx status, body that is not a JSON
object) comes out as ApiError, with the service's own `error` message when
the body carries one.

Usage:
    client = CollageApiClient("http://localhost:8000")
    data = client.harmonize(png_bytes, "golden hour lighting")
    image_b64 = data["image"]
"""
from typing import Optional

import requests

from config import Config


class ApiError(Exception):
    """A proxy call failed."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


class CollageApiClient:
    HARMONIZE_PATH = "/api/gen/harmonize"
    ANIMATE_PATH = "/api/gen/animate"
    IMAGEGEN_PATH = "/api/gen/imagegen"

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or Config.COLLAGE_API_URL).rstrip("/")
        self.timeout = timeout or Config.REQUEST_TIMEOUT
        self.session = session or requests.Session()

    # ─────────────────────────────────────────────────────────
    # Endpoints
    # ─────────────────────────────────────────────────────────

    def harmonize(self, image: bytes, instructions: str = "") -> dict:
        """POST the rendered collage. Returns {success, image, instructions}."""
        return self._request(
            "POST",
            self.HARMONIZE_PATH,
            "Failed to generate harmonized image",
            files={"image": ("collage.png", image, "image/png")},
            data={"instructions": instructions},
        )

    def submit_animation(self, image: bytes, text: str) -> dict:
        """Start an animation. Returns {success, predictionId, status}."""
        return self._request(
            "POST",
            self.ANIMATE_PATH,
            "Animation failed",
            files={"image": ("harmonized.png", image, "image/png")},
            data={"text": text},
        )

    def animation_status(self, prediction_id: str) -> dict:
        """Poll an animation. Returns {success, status[, videoUrl]}."""
        return self._request(
            "GET",
            self.ANIMATE_PATH,
            "Failed to check animation status",
            params={"id": prediction_id},
        )

    def generate_image(self, prompt: str) -> dict:
        """Text-to-image. Returns {success, image}."""
        return self._request(
            "POST",
            self.IMAGEGEN_PATH,
            "Failed to generate image",
            json={"prompt": prompt},
        )

    # ─────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────

    def _request(self, method: str, path: str, default_error: str, **kwargs) -> dict:
        url = f"{self.base_url}{path}"
        if Config.DEBUG:
            print(f"   🌐 {method} {url}")
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise ApiError(f"{default_error}: {e}") from e
        return self._parse(response, default_error)

    @staticmethod
    def _parse(response: requests.Response, default_error: str) -> dict:
        try:
            data = response.json()
        except ValueError:
            data = None

        if not response.ok:
            message = data.get("error") if isinstance(data, dict) else None
            details = data.get("details") if isinstance(data, dict) else None
            raise ApiError(message or default_error, response.status_code, details)

        if not isinstance(data, dict):
            raise ApiError(f"{default_error}: malformed response", response.status_code)

        return data
