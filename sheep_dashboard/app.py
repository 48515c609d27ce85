import time

import streamlit as st

from sheep_dashboard.components.job_details import render_job_details, render_not_found
from sheep_dashboard.components.recent_jobs import render_recent_jobs
from sheep_dashboard.components.upload import render_upload
from sheep_dashboard.logging_config import setup_logging
from sheep_dashboard.services.job_service import get_client
from sheep_dashboard.services.job_view import Empty, JobViewController, NotFound, Viewing
from sheep_dashboard.utils.constants import JOB_QUERY_PARAM

setup_logging()

st.set_page_config(layout="wide", page_title="Sheep Counter", page_icon="🐑")


def go_to_job(job_id):
    if job_id:
        st.query_params[JOB_QUERY_PARAM] = job_id
    else:
        st.query_params.clear()


def go_home():
    go_to_job(None)


# =========================================================
# Session State Initialization
# =========================================================
if "job_view" not in st.session_state:
    st.session_state.job_view = JobViewController(get_client())

view = st.session_state.job_view
selected_id = st.query_params.get(JOB_QUERY_PARAM)

# =========================================================
# Load / Navigate / Poll
# =========================================================
if not view.mounted:
    with st.spinner("Loading..."):
        view.mount(selected_id)
elif selected_id != view.job_id:
    with st.spinner("Loading..."):
        view.select_job(selected_id)
else:
    view.run_pending()

state = view.state

# =========================================================
# Layout
# =========================================================
main_col, side_col = st.columns([2, 1])

with main_col:
    if isinstance(state, Empty):
        job = render_upload(view)
        if job is not None:
            go_to_job(job.id)
            st.rerun()

    elif isinstance(state, NotFound):
        render_not_found(on_back=go_home)

    elif isinstance(state, Viewing):
        render_job_details(state.job, view.client.asset_url)
        st.button("⬅ Upload another image", on_click=go_home)

    else:
        st.info("Loading...")

with side_col:
    picked = render_recent_jobs(view)
    if picked and picked != view.job_id:
        go_to_job(picked)
        st.rerun()

# =========================================================
# Job Running → Auto Refresh
# =========================================================
if view.polling:
    time.sleep(view.timer.remaining() or 0)
    st.rerun()
