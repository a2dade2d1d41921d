"""
Headless Collage Pipeline Graph

    START → render → harmonize ─┬→ animate → END
                                └→ END   (no animation text, or failure)

Nodes drive the same JobOrchestrator the interactive editor uses, so the
harmonize/animate state machine and its polling live in one place.
"""
import asyncio
from pathlib import Path
from typing import Literal, Optional

from langgraph.graph import StateGraph, START, END

from canvas import load_scene, render, save_png
from config import Config
from orchestrator.client import CollageApiClient
from orchestrator.jobs import JobOrchestrator

from .state import CollagePipelineState, create_initial_state


def build_collage_graph(
    client: Optional[CollageApiClient] = None,
    poll_interval: Optional[float] = None,
):
    """
    Build the pipeline graph.

    Each compiled graph owns one JobOrchestrator, so build a fresh graph per
    run.
    """
    jobs = JobOrchestrator(client or CollageApiClient(), poll_interval=poll_interval)

    # ─────────────────────────────────────────────────────────
    # Nodes
    # ─────────────────────────────────────────────────────────

    def render_node(state: CollagePipelineState) -> dict:
        try:
            scene = load_scene(state["scene_path"])
        except (OSError, ValueError) as e:
            print(f"❌ Could not load scene: {e}")
            return {"status": "failed", "error": str(e), "current_stage": "render"}

        png = render(scene)
        path = save_png(png, Path(state["output_dir"]) / "collage.png")
        jobs.open_compose(png)
        print(f"✓ Collage rendered: {path}")
        return {
            "composite_path": str(path),
            "current_stage": "harmonize",
            "stage_message": "Collage rendered",
        }

    def harmonize_node(state: CollagePipelineState) -> dict:
        job = asyncio.run(jobs.harmonize(state.get("instructions") or ""))
        if job.status != "succeeded":
            return {"status": "failed", "error": job.error_message, "current_stage": "harmonize"}

        path = save_png(job.result_ref, Path(state["output_dir"]) / "harmonized-collage.png")
        return {
            "harmonized_path": str(path),
            "current_stage": "animate",
            "stage_message": "Image harmonized",
        }

    def animate_node(state: CollagePipelineState) -> dict:
        async def run() -> None:
            await jobs.animate(state["animation_text"])
            await jobs.wait_for_animation()

        try:
            asyncio.run(run())
        finally:
            jobs.teardown()

        job = jobs.animate_job
        if job.status != "succeeded":
            return {
                "status": "failed",
                "error": job.error_message or "Animation did not finish",
                "prediction_id": job.external_id,
            }
        return {
            "status": "completed",
            "prediction_id": job.external_id,
            "video_url": job.result_ref,
            "current_stage": "done",
            "stage_message": job.status_message,
        }

    def finish_node(state: CollagePipelineState) -> dict:
        return {"status": "completed", "current_stage": "done", "stage_message": "Harmonized image ready"}

    # ─────────────────────────────────────────────────────────
    # Routing
    # ─────────────────────────────────────────────────────────

    def route_after_render(state: CollagePipelineState) -> Literal["harmonize", "end"]:
        return "end" if state.get("status") == "failed" else "harmonize"

    def route_after_harmonize(state: CollagePipelineState) -> Literal["animate", "finish", "end"]:
        if state.get("status") == "failed":
            return "end"
        if (state.get("animation_text") or "").strip():
            return "animate"
        return "finish"

    builder = StateGraph(CollagePipelineState)
    builder.add_node("render", render_node)
    builder.add_node("harmonize", harmonize_node)
    builder.add_node("animate", animate_node)
    builder.add_node("finish", finish_node)

    builder.add_edge(START, "render")
    builder.add_conditional_edges("render", route_after_render, {"harmonize": "harmonize", "end": END})
    builder.add_conditional_edges(
        "harmonize",
        route_after_harmonize,
        {"animate": "animate", "finish": "finish", "end": END},
    )
    builder.add_edge("animate", END)
    builder.add_edge("finish", END)

    return builder.compile()


def run_collage_pipeline(
    scene_path: str,
    instructions: str = "",
    animation_text: Optional[str] = None,
    output_dir: Optional[str] = None,
    client: Optional[CollageApiClient] = None,
    poll_interval: Optional[float] = None,
) -> CollagePipelineState:
    """
    Run the full headless pipeline against the proxy API.

    Returns:
        Final pipeline state
    """
    output_dir = output_dir or str(Config.OUTPUT_DIR)
    graph = build_collage_graph(client=client, poll_interval=poll_interval)

    print(f"\n🎬 Starting collage pipeline: {scene_path}")
    final_state = graph.invoke(create_initial_state(
        scene_path=scene_path,
        output_dir=output_dir,
        instructions=instructions,
        animation_text=animation_text,
    ))

    if final_state.get("status") == "failed":
        print(f"\n❌ Pipeline failed: {final_state.get('error')}")
    else:
        print(f"\n✅ Pipeline complete")
    return final_state
