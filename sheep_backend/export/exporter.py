import os

import pandas as pd

from sheep_backend import settings

STATIC_PREFIX = "/static"


def export_outputs(job_id: str, filename: str, annotated_bytes: bytes, report_row: dict) -> dict:
    """
    Write the annotated image and the CSV report under OUTPUT_DIR/<job_id>/.

    Returns the paths the dashboard should request, relative to the backend URL.
    """
    job_dir = os.path.join(settings.OUTPUT_DIR, job_id)
    os.makedirs(job_dir, exist_ok=True)

    ext = os.path.splitext(filename)[1].lower() or ".img"
    image_name = f"annotated{ext}"
    report_name = "report.csv"

    with open(os.path.join(job_dir, image_name), "wb") as f:
        f.write(annotated_bytes)

    pd.DataFrame([report_row]).to_csv(os.path.join(job_dir, report_name), index=False)

    return {
        "image": f"{STATIC_PREFIX}/{job_id}/{image_name}",
        "report": f"{STATIC_PREFIX}/{job_id}/{report_name}",
    }
