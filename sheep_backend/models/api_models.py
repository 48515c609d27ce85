from pydantic import BaseModel
from typing import List

from sheep_backend.jobs.job_models import Job


# -------- Job History Page --------
class JobsPageResponse(BaseModel):
    items: List[Job]
    total: int
    limit: int
    offset: int
