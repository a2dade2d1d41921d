"""
Text-to-image via the NVIDIA NIM flux.1-schnell endpoint.

Resolution, step count and seed are fixed so the same prompt always gives
the same picture.

Usage:
    from tools.image_gen import generate_image

    image_b64 = generate_image("A red vintage bicycle, studio lighting")
"""
import requests

from config import Config


class ImageGenerationError(Exception):
    """The generation service answered, but not with an image."""


def build_payload(prompt: str) -> dict:
    return {
        "prompt": prompt,
        "width": Config.IMAGEGEN_SIZE,
        "height": Config.IMAGEGEN_SIZE,
        "seed": Config.IMAGEGEN_SEED,
        "steps": Config.IMAGEGEN_STEPS,
    }


def generate_image(prompt: str) -> str:
    """
    Generate an image from a text prompt.

    Returns:
        Base64-encoded image

    Raises:
        ImageGenerationError: On a non-200 status or an unexpected body
        requests.RequestException: On transport failure
    """
    response = requests.post(
        Config.IMAGEGEN_URL,
        headers={
            "Authorization": f"Bearer {Config.require('NVIDIA_NIM_KEY')}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        },
        json=build_payload(prompt),
        timeout=120,
    )

    if response.status_code != 200:
        print(f"❌ NVIDIA API error: {response.status_code} {response.text[:200]}")
        raise ImageGenerationError(f"Image generation failed: {response.status_code}")

    body = response.json()
    artifacts = body.get("artifacts") if isinstance(body, dict) else None
    if not artifacts or not artifacts[0].get("base64"):
        print(f"⚠️  Unexpected response format: {str(body)[:200]}")
        raise ImageGenerationError("Invalid response format from image generation service")

    return artifacts[0]["base64"]
