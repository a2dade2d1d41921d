"""
Proxy API for the collage editor.

Usage:
    # Start server
    cd src
    python -m uvicorn backend.server:app --reload --port 8000

    # Or through the CLI
    python main.py --phase serve
"""

from .server import app

__all__ = [
    "app",
]
