# utils/constants.py

from sheep_dashboard.models.job_models import JOB_DONE, JOB_ERROR, JOB_PROCESSING, JOB_QUEUED

# ---------------------------
# Status display
# ---------------------------
STATUS_MESSAGES = {
    JOB_QUEUED: "Job is in queue",
    JOB_PROCESSING: "Processing image...",
    JOB_DONE: "Processing complete",
    JOB_ERROR: "An error occurred",
}

STATUS_BADGES = {
    JOB_QUEUED: "🕒 Queued",
    JOB_PROCESSING: "⏳ Processing",
    JOB_DONE: "🟢 Done",
    JOB_ERROR: "🔴 Error",
}

# ---------------------------
# Upload
# ---------------------------
# Extensions offered by the file picker; the MIME type is checked again on submit
IMAGE_EXTENSIONS = ["png", "jpg", "jpeg", "gif", "bmp", "webp", "tiff"]

# ---------------------------
# Routing
# ---------------------------
JOB_QUERY_PARAM = "job"

# ---------------------------
# Recent jobs table
# ---------------------------
RECENT_JOBS_COLUMNS = ["id", "Filename", "Status", "Created", "Sheep"]
