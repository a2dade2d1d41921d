"""
Harmonization via Gemini image editing.

Takes a flattened collage and asks the model to re-render it as one coherent
photo. The directive is fixed; the caller can only append an instruction.

Usage:
    from tools.harmonizer import harmonize_image

    image_b64 = harmonize_image(png_bytes, "make it golden hour")
"""
import base64
import io
from typing import Optional

from PIL import Image
from google import genai
from google.genai import types

from config import Config


HARMONIZATION_DIRECTIVE = """Task:
The provided image contains multiple elements combined from various sources, each with potentially different lighting, color temperature, perspective, scale, shadows, or artistic styles. Your task is to harmonize and seamlessly blend these elements into a single, coherent image.

Instructions:

Consistency:
Ensure all elements appear as if they were naturally photographed or created together at the same moment, in the same environment, sharing unified lighting, shadows, reflections, color temperature, saturation, contrast, perspective, and spatial coherence.

Accuracy and Similarity:
Closely match the structure, layout, positioning, and proportions from the provided input image. Your harmonized output should appear as a perfected, coherent version of the original layout.

Naturalness:
Adjust elements minimally yet effectively to ensure the final composition looks natural, believable, and visually consistent. Pay particular attention to shadows, highlights, reflections, edges, and transitions between elements, correcting inconsistencies without compromising the original content. Do not let any object look like a 2D cut-out.

Identity:
Make sure to preserve the identity of people, objects, etc. This means that in the output image, faces of people should be completely recognizable without alteration of their distinctive features or expressions, and objects should maintain their original details, proportions, textures, and recognizable characteristics. While they will be blended and harmonized into a single coherent image with correct lighting, shadows, color temperature, perspective, reflections, etc., they should retain their inherent visual identity and original attributes, because the primary goal is visual coherence and realism without compromising recognizability.

Goal:
Deliver a high-quality, harmonized image that convincingly appears as a single coherent composition, while maintaining fidelity to the original image content and arrangement. The goal is for the output image to look as an image that was photographed / created at once, naturally."""

SHADOW_CLAUSE = "Make sure all objects have proper shadows and depth"

VALID_ASPECT_RATIOS = ["1:1", "2:3", "3:2", "3:4", "4:3", "4:5", "5:4", "9:16", "16:9", "21:9"]


def get_genai_client() -> genai.Client:
    """Get configured Gemini client."""
    return genai.Client(api_key=Config.require("GEMINI_API_KEY"))


def build_harmonize_prompt(instructions: Optional[str] = None) -> str:
    """Fixed directive plus the user's instruction (or the fallback clause)."""
    if instructions and instructions.strip():
        return (
            f"{HARMONIZATION_DIRECTIVE}\n\n When generating the image make sure you do the following: "
            f"{instructions} \n {SHADOW_CLAUSE}"
        )
    return (
        f"{HARMONIZATION_DIRECTIVE}\n\n When generating the image make sure you use the following style: "
        f"{SHADOW_CLAUSE}"
    )


def closest_aspect_ratio(width: int, height: int) -> str:
    """Nearest aspect ratio the image API accepts, e.g. 800x600 → "4:3"."""
    if width <= 0 or height <= 0:
        return "1:1"
    target = width / height

    def distance(ratio: str) -> float:
        w, h = ratio.split(":")
        return abs(int(w) / int(h) - target)

    return min(VALID_ASPECT_RATIOS, key=distance)


def harmonize_image(image_bytes: bytes, instructions: Optional[str] = None) -> str:
    """
    Harmonize a collage.

    Args:
        image_bytes: Encoded collage (PNG)
        instructions: Optional extra style/content constraint

    Returns:
        Base64-encoded harmonized image

    Raises:
        ValueError: If the input is not an image or the model returns none
    """
    try:
        reference = Image.open(io.BytesIO(image_bytes))
        reference.load()
    except OSError as e:
        raise ValueError(f"Uploaded file is not an image: {e}") from e

    client = get_genai_client()
    response = client.models.generate_content(
        model=Config.HARMONIZE_MODEL,
        contents=[build_harmonize_prompt(instructions), reference],
        config=types.GenerateContentConfig(
            response_modalities=["TEXT", "IMAGE"],
            image_config=types.ImageConfig(
                aspect_ratio=closest_aspect_ratio(*reference.size),
                image_size=Config.HARMONIZE_IMAGE_SIZE.upper(),
            ),
        ),
    )
    return _extract_image_b64(response)


def _extract_image_b64(response) -> str:
    """
    Pull the first inline image out of a Gemini response.

    Raises:
        ValueError: If no image in response
    """
    parts = response.parts or []
    for part in parts:
        inline = getattr(part, "inline_data", None)
        if inline is not None and inline.data:
            return base64.b64encode(inline.data).decode("ascii")

    text_parts = [p.text for p in parts if getattr(p, "text", None)]
    if text_parts:
        raise ValueError(f"Harmonization failed. Model response: {' '.join(text_parts)}")

    raise ValueError("No image in response and no error message")
