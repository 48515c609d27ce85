import math
from datetime import datetime, timezone
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, Discriminator, Field, Tag, field_validator, model_validator

# =========================
# Job Status Constants
# =========================
JOB_QUEUED = "queued"
JOB_PROCESSING = "processing"
JOB_DONE = "done"
JOB_ERROR = "error"

JobStatus = Literal["queued", "processing", "done", "error"]

FINAL_STATUSES = frozenset({JOB_DONE, JOB_ERROR})


def normalize_job_status(status: Any) -> Any:
    """
    Normalize backend job status to lowercase string.
    Anything that is not a string is passed through for validation to reject.
    """
    if isinstance(status, str):
        return status.strip().lower()
    return status


# -------- Result Variants --------
class DetectionResult(BaseModel):
    sheep_count: int = Field(ge=0)
    image: str
    duration: float = Field(ge=0)
    report: str


class JobError(BaseModel):
    error: str


def _result_kind(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        keys = set(value)
    else:
        keys = {k for k in ("sheep_count", "error") if hasattr(value, k)}

    if "sheep_count" in keys and "error" not in keys:
        return "detection"
    if "error" in keys and "sheep_count" not in keys:
        return "error"
    return None


JobResult = Annotated[
    Union[
        Annotated[DetectionResult, Tag("detection")],
        Annotated[JobError, Tag("error")],
    ],
    Discriminator(_result_kind),
]


# -------- Job --------
class Job(BaseModel):
    id: str
    filename: str
    status: JobStatus
    created_at: datetime
    result: Optional[JobResult] = None

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value):
        return normalize_job_status(value)

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Naive and aware timestamps must stay comparable for sorting
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @model_validator(mode="after")
    def _check_result_matches_status(self):
        if self.status == JOB_DONE and not isinstance(self.result, DetectionResult):
            raise ValueError("a done job must carry a detection result")
        if self.status == JOB_ERROR and not isinstance(self.result, JobError):
            raise ValueError("a failed job must carry an error result")
        if self.status not in FINAL_STATUSES and self.result is not None:
            raise ValueError(f"a {self.status} job must not carry a result")
        return self

    @property
    def is_final(self) -> bool:
        return self.status in FINAL_STATUSES

    @property
    def detection(self) -> Optional[DetectionResult]:
        if isinstance(self.result, DetectionResult):
            return self.result
        return None

    @property
    def failure(self) -> Optional[JobError]:
        if isinstance(self.result, JobError):
            return self.result
        return None


def sort_jobs(jobs: List[Job]) -> List[Job]:
    """Newest first."""
    return sorted(jobs, key=lambda job: job.created_at, reverse=True)


# -------- Jobs Page --------
class JobsPage(BaseModel):
    items: List[Job] = Field(default_factory=list)
    total: int = Field(ge=0)
    limit: int = Field(ge=1)
    offset: int = Field(ge=0)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)

    @property
    def page_index(self) -> int:
        return self.offset // self.limit

    def sorted_items(self) -> List[Job]:
        return sort_jobs(self.items)
