from pydantic import BaseModel
from datetime import datetime
from typing import Any, Dict, Literal, Optional


class Job(BaseModel):
    id: str
    filename: str
    status: Literal["queued", "processing", "done", "error"]
    created_at: datetime
    result: Optional[Dict[str, Any]] = None
