"""Job models - render jobs and background automation runs."""

import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class JobStatus(str, Enum):
    """Status of a tracked background job."""

    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    COMPLETED_WITH_ERRORS = "completed_with_errors"
    FAILED = "failed"


TERMINAL_STATUSES = frozenset(
    {JobStatus.COMPLETED, JobStatus.COMPLETED_WITH_ERRORS, JobStatus.FAILED}
)


@dataclass
class RenderAssets:
    """Output assets of a completed render."""

    video1080p: str
    video720p: str
    audio: str
    subtitles: str

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "video1080p": self.video1080p,
            "video720p": self.video720p,
            "audio": self.audio,
            "subtitles": self.subtitles,
        }


@dataclass
class RenderJob:
    """A render job record, mutated only by the render engine.

    ``progress`` never decreases; ``assets`` is only set once the job has
    completed.
    """

    id: str
    project_id: str
    status: JobStatus = JobStatus.QUEUED
    progress: int = 0
    current_step: str = "Initializing backend engine..."
    logs: list[str] = field(default_factory=list)
    output_url: Optional[str] = None
    assets: Optional[RenderAssets] = None
    error: Optional[str] = None
    created_at: float = field(default_factory=time.time)
    finished_at: Optional[float] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def log(self, message: str, timestamp: Optional[datetime] = None) -> None:
        """Append a ``[HH:MM:SS]``-prefixed log line."""
        stamp = (timestamp or datetime.now()).strftime("%H:%M:%S")
        self.logs.append(f"[{stamp}] {message}")

    def snapshot(self) -> "RenderJob":
        """Return a detached copy safe to hand to pollers."""
        return RenderJob(
            id=self.id,
            project_id=self.project_id,
            status=self.status,
            progress=self.progress,
            current_step=self.current_step,
            logs=list(self.logs),
            output_url=self.output_url,
            assets=RenderAssets(**self.assets.to_dict()) if self.assets else None,
            error=self.error,
            created_at=self.created_at,
            finished_at=self.finished_at,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        result = {
            "id": self.id,
            "projectId": self.project_id,
            "status": self.status.value,
            "progress": self.progress,
            "currentStep": self.current_step,
            "logs": list(self.logs),
        }
        if self.output_url:
            result["outputUrl"] = self.output_url
        if self.assets and self.status == JobStatus.COMPLETED:
            result["assets"] = self.assets.to_dict()
        if self.error:
            result["error"] = self.error
        return result


@dataclass
class AutomationJob:
    """Polled record of a background full-automation run."""

    id: str
    project_id: str
    status: JobStatus = JobStatus.QUEUED
    message: str = "Queued"
    progress: int = 0
    scenes: list[dict] = field(default_factory=list)
    error_count: int = 0
    errors: list[str] = field(default_factory=list)
    error: Optional[str] = None
    created_at: float = field(default_factory=time.time)
    finished_at: Optional[float] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "id": self.id,
            "projectId": self.project_id,
            "status": self.status.value,
            "message": self.message,
            "progress": self.progress,
            "scenes": list(self.scenes),
            "errorCount": self.error_count,
            "errors": list(self.errors),
            "error": self.error,
        }
