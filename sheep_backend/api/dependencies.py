from fastapi import HTTPException, Query

from sheep_backend.jobs.job_manager import get_job


def get_valid_job(id: str = Query(...)):
    job = get_job(id)
    if not job:
        raise HTTPException(404, "Job not found")
    return job
