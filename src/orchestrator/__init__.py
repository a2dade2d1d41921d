"""
Orchestrator package.

Architecture:
    EditorSession
      ├── SceneState + TransformController   (canvas)
      └── JobOrchestrator
            harmonize → result context
            animate → PollingTask ⟲ → succeeded | failed

All remote calls go through CollageApiClient to the proxy endpoints.
"""
from .client import ApiError, CollageApiClient
from .jobs import JobOrchestrator
from .session import EditorSession
from .state import Job, JobInProgressError, format_status
from .tasks import PollingTask

__all__ = [
    "ApiError",
    "CollageApiClient",
    "JobOrchestrator",
    "EditorSession",
    "Job",
    "JobInProgressError",
    "format_status",
    "PollingTask",
]
