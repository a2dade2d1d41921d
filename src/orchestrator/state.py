"""
Job state for the harmonize / animate pipeline.

Jobs are immutable. Every transition returns a new Job, and a finished job
is replaced (never edited) by the next submission of the same kind.

    harmonize:  idle → submitted → succeeded | failed
    animate:    idle → submitted → processing ⟲ → succeeded | failed
"""
from dataclasses import dataclass, replace
from typing import Literal, Optional


JobKind = Literal["harmonize", "animate"]
JobStatus = Literal["idle", "submitted", "processing", "succeeded", "failed"]

# Which UI context is showing: the canvas, the compose dialog (rendered
# collage + instructions), or the result dialog (harmonized image + animation)
ViewContext = Literal["editor", "compose", "result"]

TERMINAL_STATUSES = ("succeeded", "failed")
PENDING_STATUSES = ("submitted", "processing")

_TRANSITIONS: dict[str, dict[str, tuple[str, ...]]] = {
    "harmonize": {
        "idle": ("submitted",),
        "submitted": ("succeeded", "failed"),
    },
    "animate": {
        "idle": ("submitted",),
        "submitted": ("processing", "failed"),
        "processing": ("processing", "succeeded", "failed"),
    },
}

STATUS_MESSAGES = {
    "starting": "Starting animation process...",
    "processing": "Processing your animation...",
    "succeeded": "Animation completed!",
    "failed": "Animation failed",
}


def format_status(status: str) -> str:
    """Human-readable text for a provider status string."""
    return STATUS_MESSAGES.get(status, f"Status: {status}")


class JobInProgressError(RuntimeError):
    """A job of the same kind is still pending."""


@dataclass(frozen=True)
class Job:
    """One harmonize or animate run."""
    kind: JobKind
    status: JobStatus = "idle"
    result_ref: Optional[str] = None      # data URL (harmonize) or video URL (animate)
    error_message: Optional[str] = None
    external_id: Optional[str] = None     # provider prediction id
    status_message: str = ""

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def is_pending(self) -> bool:
        return self.status in PENDING_STATUSES

    def advance(self, status: JobStatus, **changes) -> "Job":
        """
        Move to the next status.

        Raises:
            ValueError: If the transition is not allowed for this job kind
        """
        allowed = _TRANSITIONS[self.kind].get(self.status, ())
        if status not in allowed:
            raise ValueError(f"{self.kind} job cannot go from {self.status} to {status}")
        return replace(self, status=status, **changes)
