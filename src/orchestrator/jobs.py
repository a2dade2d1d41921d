"""
Job Orchestrator

Drives the two remote stages for one editor view:

    harmonize   one request/response, rendered collage → harmonized still
    animate     submit (returns a prediction id) → poll every N seconds
                until completed / failed

Each stage has a single catch boundary. Whatever goes wrong ends up as a
`failed` job with an error message and the pending state released, so the
user can always resubmit. Nothing is retried automatically.

At most one poll loop exists at a time. It is cancelled when a new animation
starts, when the result view closes, and on teardown(). A request still in
flight when its view closes is discarded on return.
"""
import asyncio
from typing import Callable, Optional

from canvas.compositor import base64_to_data_url, data_url_to_bytes
from config import Config

from .client import ApiError, CollageApiClient
from .state import Job, JobInProgressError, ViewContext, format_status
from .tasks import PollingTask


HARMONIZE_FAILED = "Failed to generate image. Please try again."
ANIMATE_FAILED = "Failed to create animation. Please try again."
POLL_FAILED = "Failed to check animation status"


class JobOrchestrator:
    """
    Harmonize / animate state machine.

    Usage:
        jobs = JobOrchestrator(client)
        jobs.open_compose(png_bytes)
        await jobs.harmonize("warm sunset light")
        await jobs.animate("the dog runs toward the camera")
        await jobs.wait_for_animation()
        print(jobs.animate_job.result_ref)
    """

    def __init__(
        self,
        client: Optional[CollageApiClient] = None,
        poll_interval: Optional[float] = None,
        on_change: Optional[Callable[["JobOrchestrator"], None]] = None,
    ):
        self.client = client or CollageApiClient()
        self.poll_interval = Config.ANIMATION_POLL_INTERVAL if poll_interval is None else poll_interval
        self.on_change = on_change

        self.context: ViewContext = "editor"
        self.rendered_image: Optional[bytes] = None
        self.instructions = ""
        self.animation_text = ""

        self.harmonize_job = Job("harmonize")
        self.animate_job = Job("animate")
        self._poller: Optional[PollingTask] = None
        # Bumped whenever a view closes; a request that returns under an
        # older generation is discarded.
        self._generation = 0

    # ─────────────────────────────────────────────────────────
    # View contexts
    # ─────────────────────────────────────────────────────────

    def open_compose(self, rendered_image: bytes) -> None:
        """Show the rendered collage with the instructions field."""
        self._generation += 1
        self.rendered_image = rendered_image
        self.harmonize_job = Job("harmonize")
        self.context = "compose"
        self._notify()

    def close_compose(self) -> None:
        self._generation += 1
        self.context = "editor"
        self.instructions = ""
        if not self.harmonize_job.is_pending:
            self.harmonize_job = Job("harmonize")
        self._notify()

    def close_result(self) -> None:
        """Drop the harmonized image and animation, stopping any polling."""
        self._generation += 1
        self.stop_polling()
        self.context = "editor"
        self.harmonize_job = Job("harmonize")
        self.animate_job = Job("animate")
        self.animation_text = ""
        self._notify()

    def teardown(self) -> None:
        """Owning view is gone: no poll may run after this."""
        self._generation += 1
        self.stop_polling()

    def _discard_stale(self, job: Job) -> None:
        """Release a job whose view closed while its request was in flight."""
        print(f"   Discarding {job.kind} result: view closed while pending")
        if job.kind == "harmonize" and self.harmonize_job is job:
            self._set_harmonize(Job("harmonize"))
        elif job.kind == "animate" and self.animate_job is job:
            self._set_animate(Job("animate"))

    # ─────────────────────────────────────────────────────────
    # Harmonize
    # ─────────────────────────────────────────────────────────

    @property
    def harmonized_image(self) -> Optional[str]:
        if self.harmonize_job.status == "succeeded":
            return self.harmonize_job.result_ref
        return None

    async def harmonize(self, instructions: Optional[str] = None) -> Job:
        """
        Send the rendered collage for harmonization.

        On success the result context opens with the harmonized image.

        Raises:
            JobInProgressError: If a harmonize job is still pending
        """
        if self.harmonize_job.is_pending:
            raise JobInProgressError("Harmonization already in progress")
        if instructions is not None:
            self.instructions = instructions

        if not self.rendered_image:
            self._set_harmonize(Job("harmonize", error_message="Render the collage before harmonizing"))
            return self.harmonize_job

        submitted = Job("harmonize").advance("submitted")
        self._set_harmonize(submitted)
        generation = self._generation
        print(f"🎨 Harmonizing collage ({len(self.rendered_image)} bytes)...")

        try:
            data = await asyncio.to_thread(self.client.harmonize, self.rendered_image, self.instructions)
            if not (data.get("success") and data.get("image")):
                raise ApiError(data.get("error") or "Failed to generate image")
            job = submitted.advance("succeeded", result_ref=base64_to_data_url(data["image"]))
        except ApiError as e:
            print(f"❌ Harmonize failed: {e}")
            job = submitted.advance("failed", error_message=e.message)
        except Exception as e:
            print(f"❌ Harmonize failed unexpectedly: {e}")
            job = submitted.advance("failed", error_message=HARMONIZE_FAILED)

        if generation != self._generation or self.harmonize_job is not submitted:
            self._discard_stale(submitted)
            return self.harmonize_job

        if job.status == "succeeded":
            print("✓ Harmonized image ready")
            self.context = "result"
        self._set_harmonize(job)
        return job

    # ─────────────────────────────────────────────────────────
    # Animate
    # ─────────────────────────────────────────────────────────

    async def animate(self, text: Optional[str] = None) -> Job:
        """
        Submit the harmonized image for animation and start polling.

        An empty description is rejected without any request and leaves the
        job idle.

        Raises:
            JobInProgressError: If an animate job is still pending
        """
        if self.animate_job.is_pending:
            raise JobInProgressError("Animation already in progress")
        if text is not None:
            self.animation_text = text

        harmonized = self.harmonized_image
        if not harmonized:
            self._set_animate(Job("animate", error_message="Harmonize the collage before animating"))
            return self.animate_job
        if not self.animation_text.strip():
            self._set_animate(Job("animate", error_message="Animation text is required"))
            return self.animate_job

        self.stop_polling()
        job = Job("animate").advance("submitted", status_message="Starting prediction...")
        self._set_animate(job)
        generation = self._generation
        print("🎬 Submitting animation...")

        error_message = None
        try:
            image = data_url_to_bytes(harmonized)
            data = await asyncio.to_thread(self.client.submit_animation, image, self.animation_text)
            prediction_id = data.get("predictionId")
            if not (data.get("success") and prediction_id):
                raise ApiError(data.get("error") or "Animation failed")
        except ApiError as e:
            print(f"❌ Animation submit failed: {e}")
            error_message = e.message
        except Exception as e:
            print(f"❌ Animation submit failed unexpectedly: {e}")
            error_message = ANIMATE_FAILED

        if generation != self._generation or self.animate_job is not job:
            self._discard_stale(job)
            return self.animate_job
        if error_message is not None:
            self._set_animate(job.advance("failed", error_message=error_message, status_message=""))
            return self.animate_job

        print(f"   Prediction started: {prediction_id}")
        self._set_animate(job.advance(
            "processing",
            external_id=prediction_id,
            status_message="Processing animation...",
        ))
        self._poller = PollingTask(self.poll_interval, lambda: self._poll_once(prediction_id))
        self._poller.start()
        return self.animate_job

    async def _poll_once(self, prediction_id: str) -> bool:
        """One status check. Returns True to keep polling."""
        if self.animate_job.external_id != prediction_id or self.animate_job.is_terminal:
            return False

        try:
            data = await asyncio.to_thread(self.client.animation_status, prediction_id)
        except ApiError as e:
            return self._fail_poll(prediction_id, e.message)
        except Exception as e:
            print(f"❌ Poll failed unexpectedly: {e}")
            return self._fail_poll(prediction_id, POLL_FAILED)

        job = self.animate_job
        if job.external_id != prediction_id or job.is_terminal:
            return False

        status = data.get("status") or "processing"
        if Config.DEBUG:
            print(f"   ⏳ {prediction_id}: {status}")

        if status == "completed" and data.get("videoUrl"):
            print(f"✓ Animation ready: {data['videoUrl']}")
            self._set_animate(job.advance(
                "succeeded",
                result_ref=data["videoUrl"],
                status_message=format_status("succeeded"),
            ))
            return False

        if status == "failed":
            return self._fail_poll(prediction_id, data.get("error") or "Animation generation failed")

        self._set_animate(job.advance("processing", status_message=format_status(status)))
        return True

    def _fail_poll(self, prediction_id: str, message: str) -> bool:
        job = self.animate_job
        if job.external_id == prediction_id and not job.is_terminal:
            print(f"❌ Animation failed: {message}")
            self._set_animate(job.advance("failed", error_message=message, status_message=format_status("failed")))
        return False

    @property
    def is_polling(self) -> bool:
        return self._poller is not None and self._poller.active

    def stop_polling(self) -> None:
        if self._poller is not None:
            self._poller.cancel()
            self._poller = None

    async def wait_for_animation(self) -> Job:
        """Block until the current poll loop ends (or was stopped)."""
        if self._poller is not None:
            await self._poller.wait()
        return self.animate_job

    # ─────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────

    def _set_harmonize(self, job: Job) -> None:
        self.harmonize_job = job
        self._notify()

    def _set_animate(self, job: Job) -> None:
        self.animate_job = job
        self._notify()

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self)
