import logging

from fastapi import APIRouter, BackgroundTasks, Depends, File, HTTPException, Query, UploadFile

from sheep_backend.api.dependencies import get_valid_job
from sheep_backend.jobs.job_manager import create_job, list_jobs
from sheep_backend.jobs.job_models import Job
from sheep_backend.models.api_models import JobsPageResponse
from sheep_backend.pipeline import process_job

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/job", response_model=Job)
async def upload_image(bg: BackgroundTasks, file: UploadFile = File(...)):
    content = await file.read()
    if not content:
        raise HTTPException(422, "Uploaded file is empty")

    filename = file.filename or "upload"
    job = create_job(filename)
    logger.info("Created job %s for %s (%d bytes)", job.id, filename, len(content))

    bg.add_task(process_job, job.id, filename, content, file.content_type)
    return job


@router.get("/job", response_model=Job)
def job_status(job: Job = Depends(get_valid_job)):
    return job


@router.get("/jobs", response_model=JobsPageResponse)
def job_history(limit: int = Query(10, ge=1, le=100), offset: int = Query(0, ge=0)):
    items, total = list_jobs(limit, offset)
    return JobsPageResponse(items=items, total=total, limit=limit, offset=offset)
