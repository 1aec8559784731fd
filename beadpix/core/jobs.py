from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from threading import Lock
from typing import Dict, List, Optional

from ..models.api_schemas import JobState, JobStatus
from ..models.pattern import BeadPattern


@dataclass(frozen=True)
class BeadJob:
    """
    Snapshot of one image-to-beads run.

    A job starts ``processing`` and ends either ``done`` with its pattern or
    ``failed`` with an error and no pattern. Snapshots are never mutated; the store
    swaps in a new one on every transition.
    """

    job_id: str
    grid_size: int
    filename: Optional[str] = None
    stylized: bool = False
    state: JobState = "processing"
    pattern: Optional[BeadPattern] = None
    error: Optional[str] = None
    created_at: float = field(default_factory=lambda: time.time())
    finished_at: Optional[float] = None

    @property
    def ready(self) -> bool:
        return self.state == "done" and self.pattern is not None

    def to_status(self) -> JobStatus:
        pattern = self.pattern
        return JobStatus(
            job_id=self.job_id,
            status=self.state,
            filename=self.filename,
            grid_size=self.grid_size,
            stylized=self.stylized,
            total_beads=pattern.total_beads if pattern else None,
            colours=len(pattern.usage) if pattern else None,
            usage=dict(pattern.usage) if pattern else {},
            error=self.error,
        )


class JobStore:
    """Thread-safe in-memory registry of bead jobs, newest first when listed."""

    def __init__(self) -> None:
        self._jobs: Dict[str, BeadJob] = {}
        self._lock = Lock()

    def start(
        self,
        job_id: str,
        *,
        grid_size: int,
        filename: Optional[str] = None,
        stylized: bool = False,
    ) -> BeadJob:
        job = BeadJob(job_id=job_id, grid_size=grid_size, filename=filename, stylized=stylized)
        with self._lock:
            self._jobs[job_id] = job
        return job

    def _finish(self, job_id: str, **changes) -> Optional[BeadJob]:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                return None
            job = replace(job, finished_at=time.time(), **changes)
            self._jobs[job_id] = job
            return job

    def complete(self, job_id: str, pattern: BeadPattern) -> Optional[BeadJob]:
        """Attach the pattern and mark the job done in one step."""
        return self._finish(job_id, state="done", pattern=pattern, error=None)

    def fail(self, job_id: str, error: str) -> Optional[BeadJob]:
        """Mark a job failed and drop any pattern so a stale grid is never served."""
        return self._finish(job_id, state="failed", pattern=None, error=error)

    def get(self, job_id: str) -> Optional[BeadJob]:
        with self._lock:
            return self._jobs.get(job_id)

    def list(
        self,
        *,
        state: Optional[str] = None,
        query: Optional[str] = None,
    ) -> List[BeadJob]:
        with self._lock:
            jobs = list(self._jobs.values())
        if state:
            jobs = [j for j in jobs if j.state == state]
        if query:
            needle = query.lower()
            jobs = [
                j
                for j in jobs
                if needle in j.job_id.lower() or needle in (j.filename or "").lower()
            ]
        jobs.sort(key=lambda j: j.created_at, reverse=True)
        return jobs


store = JobStore()
