"""In-memory job storage for render and automation jobs.

Jobs live only in process memory. The store is owned by the service that
creates it (one per job kind) and terminal jobs are evicted once their TTL
has passed; jobs still running are never evicted.
"""

import logging
import time
import uuid
from typing import Callable, Generic, Optional, Protocol, TypeVar

logger = logging.getLogger(__name__)


class TrackedJob(Protocol):
    id: str
    created_at: float
    finished_at: Optional[float]

    @property
    def is_terminal(self) -> bool: ...


J = TypeVar("J", bound=TrackedJob)


def new_job_id(prefix: str = "job") -> str:
    """Millisecond-timestamped id with a short random suffix against collisions."""
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:6]}"


class JobStore(Generic[J]):
    """Keyed job registry with TTL eviction of finished jobs."""

    def __init__(self, ttl_seconds: float = 3600, clock: Callable[[], float] = time.time):
        """Initialize the store.

        Args:
            ttl_seconds: How long a terminal job stays readable after it finished
            clock: Time source (seconds since epoch)
        """
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._jobs: dict[str, J] = {}

    def __len__(self) -> int:
        return len(self._jobs)

    def __contains__(self, job_id: str) -> bool:
        return job_id in self._jobs

    def create_job(self, job: J) -> J:
        """Register a new job.

        Raises:
            ValueError: If a job with the same id already exists
        """
        if job.id in self._jobs:
            raise ValueError(f"Job {job.id} already exists")
        self._jobs[job.id] = job
        logger.info(f"Created job {job.id}")
        return job

    def get_job(self, job_id: str) -> Optional[J]:
        return self._jobs.get(job_id)

    def list_jobs(self, limit: Optional[int] = None) -> list[J]:
        """List jobs, newest first."""
        jobs = sorted(self._jobs.values(), key=lambda job: job.created_at, reverse=True)
        return jobs[:limit] if limit is not None else jobs

    def delete_job(self, job_id: str) -> bool:
        return self._jobs.pop(job_id, None) is not None

    def cleanup_expired_jobs(self, now: Optional[float] = None) -> int:
        """Evict terminal jobs whose finish time plus TTL has passed.

        Returns:
            Number of jobs removed
        """
        now = self.clock() if now is None else now
        expired = [
            job_id
            for job_id, job in self._jobs.items()
            if job.is_terminal
            and job.finished_at is not None
            and job.finished_at + self.ttl_seconds <= now
        ]
        for job_id in expired:
            del self._jobs[job_id]

        if expired:
            logger.info(f"Cleaned up {len(expired)} expired jobs")
        return len(expired)
