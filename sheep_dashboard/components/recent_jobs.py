import pandas as pd
import streamlit as st

from sheep_dashboard.utils.constants import RECENT_JOBS_COLUMNS
from sheep_dashboard.utils.formatting import format_created_at, page_label, status_badge


def jobs_to_frame(jobs) -> pd.DataFrame:
    rows = [
        {
            "id": job.id,
            "Filename": job.filename,
            "Status": status_badge(job.status),
            "Created": format_created_at(job.created_at),
            "Sheep": job.detection.sheep_count if job.detection is not None else None,
        }
        for job in jobs
    ]
    df = pd.DataFrame(rows, columns=RECENT_JOBS_COLUMNS)
    df["Sheep"] = df["Sheep"].astype("Int64")
    return df


def render_recent_jobs(view):
    """
    Render the recent-jobs table and pager.

    Returns the id of a row the user picked, or None.
    """
    st.subheader("Recent Jobs")

    if not view.recent_jobs:
        st.info("No jobs yet.")
        return None

    df = jobs_to_frame(view.recent_jobs)

    event = st.dataframe(
        df.drop(columns=["id"]),
        use_container_width=True,
        hide_index=True,
        selection_mode="single-row",
        on_select="rerun",
        # New key per page/job so a stale selection does not navigate again
        key=f"recent_jobs_{view.page}_{view.job_id}",
    )

    prev_col, label_col, next_col = st.columns([1, 2, 1])
    prev_col.button(
        "◀ Prev",
        disabled=view.page <= 0,
        on_click=view.set_page,
        args=(view.page - 1,),
    )
    label_col.caption(page_label(view.page, view.total_pages))
    next_col.button(
        "Next ▶",
        disabled=view.page + 1 >= view.total_pages,
        on_click=view.set_page,
        args=(view.page + 1,),
    )

    rows = event.selection["rows"]
    if len(rows) > 0:
        return df.iloc[rows[0]]["id"]
    return None
