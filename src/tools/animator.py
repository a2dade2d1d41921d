"""
Image-to-video via Replicate predictions.

Generation takes minutes, so it is split in two calls: start_animation()
returns a prediction id straight away and get_animation() is polled with it.
"""
import base64
from typing import Optional

import requests

from config import Config


def _headers() -> dict:
    return {
        "Authorization": f"Bearer {Config.require('REPLICATE_API_TOKEN')}",
        "Content-Type": "application/json",
    }


def start_animation(image_bytes: bytes, prompt: str, mime_type: str = "image/png") -> dict:
    """
    Start a prediction with the image as first frame.

    Returns:
        Replicate prediction dict ({"id", "status", ...})

    Raises:
        requests.HTTPError: On a non-2xx Replicate response
        ValueError: If the response has no prediction id
    """
    data_url = f"data:{mime_type};base64,{base64.b64encode(image_bytes).decode('ascii')}"
    response = requests.post(
        f"{Config.REPLICATE_API_URL}/models/{Config.ANIMATION_MODEL}/predictions",
        headers=_headers(),
        json={"input": {"prompt": prompt, "first_frame_image": data_url}},
        timeout=60,
    )
    response.raise_for_status()
    prediction = response.json()
    if not prediction.get("id"):
        raise ValueError(f"Replicate returned no prediction id: {prediction}")
    return prediction


def get_animation(prediction_id: str) -> dict:
    """
    Fetch the current state of a prediction.

    Raises:
        requests.HTTPError: On a non-2xx Replicate response
    """
    response = requests.get(
        f"{Config.REPLICATE_API_URL}/predictions/{prediction_id}",
        headers=_headers(),
        timeout=60,
    )
    response.raise_for_status()
    return response.json()


def output_url(prediction: dict) -> Optional[str]:
    """Video URL of a finished prediction (output may be a string or a list)."""
    output = prediction.get("output")
    if isinstance(output, list):
        return output[0] if output else None
    return output
