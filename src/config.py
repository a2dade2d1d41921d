"""
Centralized configuration. Load once, use everywhere.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()


class Config:
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
    REPLICATE_API_TOKEN = os.getenv("REPLICATE_API_TOKEN")
    NVIDIA_NIM_KEY = os.getenv("NVIDIA_NIM_KEY")

    # ─────────────────────────────────────────────────────────────
    # Proxy server / client
    # ─────────────────────────────────────────────────────────────
    COLLAGE_API_URL = os.getenv("COLLAGE_API_URL", "http://localhost:8000")
    REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "180"))
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.getenv(
            "CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
        ).split(",")
        if origin.strip()
    ]

    # ─────────────────────────────────────────────────────────────
    # Providers
    # ─────────────────────────────────────────────────────────────
    HARMONIZE_MODEL = os.getenv("HARMONIZE_MODEL", "gemini-3-pro-image-preview")
    # Fixed output quality, not exposed to callers
    HARMONIZE_IMAGE_SIZE = os.getenv("HARMONIZE_IMAGE_SIZE", "1K")

    ANIMATION_MODEL = os.getenv("ANIMATION_MODEL", "minimax/video-01")
    REPLICATE_API_URL = "https://api.replicate.com/v1"

    IMAGEGEN_URL = "https://ai.api.nvidia.com/v1/genai/black-forest-labs/flux.1-schnell"
    IMAGEGEN_SIZE = 1024
    IMAGEGEN_STEPS = 4
    IMAGEGEN_SEED = 0

    # ─────────────────────────────────────────────────────────────
    # Canvas
    # ─────────────────────────────────────────────────────────────
    CANVAS_WIDTH = 800
    CANVAS_HEIGHT = 600
    LAYER_DEFAULT_X = 50
    LAYER_DEFAULT_Y = 50
    MIN_TRANSFORM_SIZE = 20

    # ─────────────────────────────────────────────────────────────
    # Jobs
    # ─────────────────────────────────────────────────────────────
    ANIMATION_POLL_INTERVAL = float(os.getenv("ANIMATION_POLL_INTERVAL", "5"))

    OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", "/tmp/collage_outputs"))

    # Debug mode - set DEBUG=1 in env to enable verbose logging
    DEBUG = os.getenv("DEBUG", "").lower() in ("1", "true", "yes")

    @classmethod
    def require(cls, name: str) -> str:
        """
        Get a required API key, failing loudly when it is not set.

        Raises:
            ValueError: If the setting is empty or missing
        """
        value = getattr(cls, name, None)
        if not value:
            raise ValueError(
                f"{name} is not set. Add it to your .env file. "
                "See .env.example for the full list."
            )
        return value
