"""
Collage Studio - Main Entry Point

Usage:
    # Start the proxy API
    python main.py --phase serve

    # Render a scene file to PNG (no network)
    python main.py --phase compose --scene scene.json --output collage.png

    # Generate an image from a prompt (needs the API running)
    python main.py --phase imagegen --prompt "a red bicycle" --output bike.png

    # Full headless pipeline: render → harmonize → animate
    python main.py --phase pipeline --scene scene.json \\
        --instructions "golden hour" --animation "the bicycle rolls forward"
"""
import sys
import argparse
from pathlib import Path

from config import Config


BANNER = """
╔══════════════════════════════════════════════════════════════╗
║           COLLAGE STUDIO                                     ║
║                                                              ║
║   Compose, harmonize and animate image collages.             ║
╚══════════════════════════════════════════════════════════════╝
"""


# ─────────────────────────────────────────────────────────────
# Phase Runners
# ─────────────────────────────────────────────────────────────

def run_serve_phase(host: str, port: int) -> None:
    import uvicorn

    print(BANNER)
    print(f"🚀 Serving API on http://{host}:{port}")
    uvicorn.run("backend.server:app", host=host, port=port)


def run_compose_phase(scene_path: str, output: str) -> Path:
    from canvas import load_scene, render, save_png

    scene = load_scene(scene_path)
    path = save_png(render(scene), output)
    print(f"✓ Collage saved: {path}")
    return path


def run_imagegen_phase(prompt: str, output: str) -> Path:
    from orchestrator.client import CollageApiClient
    from canvas import save_png, base64_to_data_url

    data = CollageApiClient().generate_image(prompt)
    path = save_png(base64_to_data_url(data["image"]), output)
    print(f"✓ Generated image saved: {path}")
    return path


def run_pipeline_phase(
    scene_path: str,
    instructions: str,
    animation_text: str,
    output_dir: str,
) -> dict:
    from pipeline import run_collage_pipeline

    print(BANNER)
    state = run_collage_pipeline(
        scene_path,
        instructions=instructions,
        animation_text=animation_text,
        output_dir=output_dir,
    )

    print("\n" + "=" * 60)
    print(f"Status:     {state.get('status')}")
    if state.get("composite_path"):
        print(f"Collage:    {state['composite_path']}")
    if state.get("harmonized_path"):
        print(f"Harmonized: {state['harmonized_path']}")
    if state.get("video_url"):
        print(f"Video:      {state['video_url']}")
    if state.get("error"):
        print(f"Error:      {state['error']}")
    print("=" * 60 + "\n")
    return state


def main():
    """Main entry point with CLI argument parsing."""
    parser = argparse.ArgumentParser(
        description="Collage Studio",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --phase serve --port 8000
  python main.py --phase compose --scene scene.json --output collage.png
  python main.py --phase imagegen --prompt "a lighthouse at dusk"
  python main.py --phase pipeline --scene scene.json --animation "waves crash"
        """
    )

    parser.add_argument(
        "--phase",
        choices=["serve", "compose", "imagegen", "pipeline"],
        default="serve",
        help="What to run (default: serve)"
    )

    parser.add_argument("--scene", help="Scene JSON file (compose/pipeline)")
    parser.add_argument("--output", help="Output PNG path (compose/imagegen)")
    parser.add_argument("--output-dir", default=str(Config.OUTPUT_DIR), help="Pipeline output directory")
    parser.add_argument("--prompt", help="Prompt for image generation")
    parser.add_argument("--instructions", default="", help="Extra harmonization instructions")
    parser.add_argument("--animation", default="", help="Animation description (omit to skip animation)")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args()

    try:
        if args.phase == "compose":
            if not args.scene:
                parser.error("--scene is required for compose")
            run_compose_phase(args.scene, args.output or "collage.png")

        elif args.phase == "imagegen":
            if not args.prompt or not args.prompt.strip():
                parser.error("--prompt is required for imagegen")
            run_imagegen_phase(args.prompt.strip(), args.output or "generated.png")

        elif args.phase == "pipeline":
            if not args.scene:
                parser.error("--scene is required for pipeline")
            state = run_pipeline_phase(args.scene, args.instructions, args.animation, args.output_dir)
            if state.get("status") == "failed":
                sys.exit(1)

        else:
            run_serve_phase(args.host, args.port)

    except KeyboardInterrupt:
        print("\n🛑 Interrupted")
        sys.exit(130)
    except Exception as e:
        print(f"\n❌ Error: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
