"""
Headless Collage Pipeline State

One run: load scene → render → harmonize → (optionally) animate.
"""
from typing import Literal, Optional
from typing_extensions import TypedDict


class CollagePipelineState(TypedDict):
    # ─────────────────────────────────────────────────────────
    # Input
    # ─────────────────────────────────────────────────────────
    scene_path: str
    instructions: str
    animation_text: Optional[str]   # None/empty = stop after harmonize
    output_dir: str

    # ─────────────────────────────────────────────────────────
    # Progress
    # ─────────────────────────────────────────────────────────
    status: Literal["running", "completed", "failed"]
    current_stage: Optional[str]
    stage_message: Optional[str]
    error: Optional[str]

    # ─────────────────────────────────────────────────────────
    # Outputs
    # ─────────────────────────────────────────────────────────
    composite_path: Optional[str]
    harmonized_path: Optional[str]
    prediction_id: Optional[str]
    video_url: Optional[str]


def create_initial_state(
    scene_path: str,
    output_dir: str,
    instructions: str = "",
    animation_text: Optional[str] = None,
) -> CollagePipelineState:
    """Create initial state for pipeline invocation."""
    return CollagePipelineState(
        scene_path=scene_path,
        instructions=instructions,
        animation_text=animation_text,
        output_dir=output_dir,
        status="running",
        current_stage="initializing",
        stage_message="Starting pipeline...",
        error=None,
        composite_path=None,
        harmonized_path=None,
        prediction_id=None,
        video_url=None,
    )
