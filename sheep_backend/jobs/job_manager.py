import threading
import uuid
from datetime import datetime, timezone
from typing import List, Tuple

from sheep_backend.jobs.job_models import Job

_JOBS = {}
_LOCK = threading.Lock()


def create_job(filename: str) -> Job:
    job = Job(
        id=uuid.uuid4().hex,
        filename=filename,
        status="queued",
        created_at=datetime.now(timezone.utc),
    )
    with _LOCK:
        _JOBS[job.id] = job
    return job.model_copy()


def get_job(job_id: str) -> Job | None:
    with _LOCK:
        job = _JOBS.get(job_id)
        return job.model_copy() if job else None


def list_jobs(limit: int, offset: int) -> Tuple[List[Job], int]:
    with _LOCK:
        jobs = sorted(_JOBS.values(), key=lambda j: j.created_at, reverse=True)
        return [j.model_copy() for j in jobs[offset:offset + limit]], len(jobs)


def start_job(job_id: str):
    with _LOCK:
        _JOBS[job_id].status = "processing"


def complete_job(job_id: str, result: dict):
    with _LOCK:
        job = _JOBS[job_id]
        job.status = "done"
        job.result = result


def fail_job(job_id: str, error: str):
    with _LOCK:
        job = _JOBS[job_id]
        job.status = "error"
        job.result = {"error": error}
