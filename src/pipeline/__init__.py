"""
Headless Collage Pipeline

A LangGraph run of the editor flow without a UI:
scene file → render → harmonize → animate (optional).
"""

from .graph import build_collage_graph, run_collage_pipeline
from .state import CollagePipelineState, create_initial_state

__all__ = [
    "build_collage_graph",
    "run_collage_pipeline",
    "CollagePipelineState",
    "create_initial_state",
]
