import hashlib
import logging
import time
from datetime import datetime, timezone

from sheep_backend import settings
from sheep_backend.export.exporter import export_outputs
from sheep_backend.jobs.job_manager import complete_job, fail_job, start_job


def count_sheep(raw_bytes: bytes) -> int:
    # Development stand-in for the detector: stable per image, 0..15
    return hashlib.sha256(raw_bytes).digest()[0] % 16


def run_pipeline(job_id: str, filename: str, raw_bytes: bytes, content_type: str | None) -> dict:
    if not (content_type or "").lower().startswith("image/"):
        raise ValueError(f"Unsupported file type: {content_type or 'unknown'}")

    t0 = time.time()
    sheep_count = count_sheep(raw_bytes)
    duration = round(time.time() - t0, 3)

    paths = export_outputs(
        job_id,
        filename,
        raw_bytes,
        {
            "job_id": job_id,
            "filename": filename,
            "sheep_count": sheep_count,
            "duration_s": duration,
            "processed_at": datetime.now(timezone.utc).isoformat(),
        }
    )

    return {
        "sheep_count": sheep_count,
        "image": paths["image"],
        "duration": duration,
        "report": paths["report"],
    }


def process_job(job_id: str, filename: str, raw_bytes: bytes, content_type: str | None):
    log = logging.getLogger(f"job.{job_id}")

    start_job(job_id)
    log.info("Job started: status -> processing")

    try:
        if settings.PROCESSING_DELAY_SECONDS > 0:
            time.sleep(settings.PROCESSING_DELAY_SECONDS)
        result = run_pipeline(job_id, filename, raw_bytes, content_type)
        complete_job(job_id, result)
        log.info("Job done: %d sheep", result["sheep_count"])
    except Exception as e:
        fail_job(job_id, str(e))
        log.exception("Job failed: %s", e)
