"""
Editor session: the controller boundary for one open editor.

Owns the scene, the selection/transform controller and the job orchestrator,
and implements the image-acquisition paths (file upload or text-to-image)
that feed either the background or a new layer.
"""
import asyncio
from pathlib import Path
from typing import Callable, Literal, Optional

from PIL import Image

from canvas import (
    ImageHandle,
    SceneState,
    TransformController,
    render,
    render_preview,
    save_png,
)

from .client import ApiError, CollageApiClient
from .jobs import JobOrchestrator
from .state import Job, JobInProgressError


ImageTarget = Literal["background", "layer"]

GENERATE_FAILED = "Failed to generate image. Please try again."
NO_BACKGROUND = "Add a background image before generating"
GESTURE_ACTIVE = "Finish moving the layer before generating"


class EditorSession:
    """
    One editor view.

    Usage:
        session = EditorSession(CollageApiClient())
        session.open_image_dialog("background")
        session.load_image_file("beach.jpg")
        session.open_image_dialog("layer")
        await session.generate_image("a golden retriever, studio photo")
        session.generate()                  # render + open compose context
        await session.harmonize("sunset")
        await session.animate("the dog wags its tail")
        session.close()
    """

    def __init__(
        self,
        client: Optional[CollageApiClient] = None,
        poll_interval: Optional[float] = None,
        on_change: Optional[Callable[[JobOrchestrator], None]] = None,
    ):
        self.client = client or CollageApiClient()
        self.scene = SceneState()
        self.controller = TransformController(self.scene)
        self.jobs = JobOrchestrator(self.client, poll_interval=poll_interval, on_change=on_change)

        self.image_target: ImageTarget = "background"
        self.image_dialog_open = False
        self.generate_prompt = ""
        self.is_generating = False
        self.error: Optional[str] = None

    # ─────────────────────────────────────────────────────────
    # Image acquisition
    # ─────────────────────────────────────────────────────────

    def open_image_dialog(self, target: ImageTarget) -> None:
        """Pick where the next supplied image goes."""
        if target not in ("background", "layer"):
            raise ValueError(f"Unknown image target: {target}")
        self.image_target = target
        self.generate_prompt = ""
        self.image_dialog_open = True

    def close_image_dialog(self) -> None:
        self.image_dialog_open = False
        self.generate_prompt = ""
        self.error = None

    def add_image(self, image: ImageHandle) -> Optional[int]:
        """
        Deliver an image to the current target.

        Returns:
            The new layer id, or None when the background was replaced
        """
        self.image_dialog_open = False
        if self.image_target == "background":
            self.scene.set_background(image)
            return None
        return self.scene.add_layer(image)

    def load_image_file(self, path: str | Path) -> Optional[int]:
        return self.add_image(ImageHandle.from_path(path))

    async def generate_image(self, prompt: Optional[str] = None) -> Optional[int]:
        """
        Text-to-image into the current target.

        Empty prompts are ignored without a request. Failures set `error`.

        Raises:
            JobInProgressError: If a generation is already pending
        """
        if prompt is not None:
            self.generate_prompt = prompt
        prompt = self.generate_prompt.strip()
        if not prompt:
            return None
        if self.is_generating:
            raise JobInProgressError("Image generation already in progress")

        self.is_generating = True
        self.error = None
        print(f"🖼️  Generating image: {prompt[:60]}{'...' if len(prompt) > 60 else ''}")
        try:
            data = await asyncio.to_thread(self.client.generate_image, prompt)
            if not (data.get("success") and data.get("image")):
                raise ApiError(data.get("error") or "Failed to generate image")
            image = ImageHandle.from_base64(data["image"])
        except ApiError as e:
            print(f"❌ Image generation failed: {e}")
            self.error = e.message
            return None
        except Exception as e:
            print(f"❌ Image generation failed unexpectedly: {e}")
            self.error = GENERATE_FAILED
            return None
        finally:
            self.is_generating = False

        self.generate_prompt = ""
        return self.add_image(image)

    # ─────────────────────────────────────────────────────────
    # Compose
    # ─────────────────────────────────────────────────────────

    def preview(self) -> Image.Image:
        """What the canvas shows, selection handle included."""
        return render_preview(self.scene, self.controller.handle_box())

    def generate(self) -> Optional[bytes]:
        """
        Render the collage and open the compose context.

        Needs a background and no gesture in progress; otherwise sets
        `error` and returns None. The export render takes no selection
        input, so the handle never reaches the output and the selection is
        left as it was.
        """
        if self.scene.background is None:
            self.error = NO_BACKGROUND
            return None
        if self.controller.gesture_in_progress:
            self.error = GESTURE_ACTIVE
            return None

        self.error = None
        png = render(self.scene)
        self.jobs.open_compose(png)
        return png

    async def harmonize(self, instructions: Optional[str] = None) -> Job:
        return await self.jobs.harmonize(instructions)

    async def animate(self, text: Optional[str] = None) -> Job:
        return await self.jobs.animate(text)

    # ─────────────────────────────────────────────────────────
    # Downloads
    # ─────────────────────────────────────────────────────────

    def download_composite(self, path: str | Path = "collage.png") -> Optional[Path]:
        if not self.jobs.rendered_image:
            return None
        return save_png(self.jobs.rendered_image, path)

    def download_harmonized(self, path: str | Path = "harmonized-collage.png") -> Optional[Path]:
        harmonized = self.jobs.harmonized_image
        if not harmonized:
            return None
        return save_png(harmonized, path)

    def close(self) -> None:
        """Tear down the view. Stops any polling."""
        self.jobs.teardown()
