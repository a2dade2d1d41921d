"""
Provider adapters used by the proxy endpoints.

- harmonizer: Gemini image editing (collage → coherent photo)
- animator:   Replicate predictions (still → short video)
- image_gen:  NVIDIA NIM flux (prompt → still)
"""
from .harmonizer import harmonize_image, build_harmonize_prompt
from .animator import start_animation, get_animation, output_url
from .image_gen import generate_image, ImageGenerationError

__all__ = [
    "harmonize_image",
    "build_harmonize_prompt",
    "start_animation",
    "get_animation",
    "output_url",
    "generate_image",
    "ImageGenerationError",
]
