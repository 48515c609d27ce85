import streamlit as st

from sheep_dashboard.utils.formatting import format_created_at, format_duration, status_message


def render_job_details(job, asset_url):
    with st.container(border=True):
        st.subheader("Job Details")
        st.write(f"**Filename:** {job.filename}")
        st.write(f"**Status:** {status_message(job.status)}")
        st.caption(f"Created {format_created_at(job.created_at)} · ID `{job.id}`")

        if not job.is_final:
            st.info("⏳ Counting sheep… this page refreshes automatically")

        detection = job.detection
        if detection is not None:
            st.subheader("Results")

            col1, col2 = st.columns(2)
            col1.metric("🐑 Sheep Count", detection.sheep_count)
            col2.metric("⏱️ Processing Time", format_duration(detection.duration))

            st.image(asset_url(detection.image), caption="Processed image", use_container_width=True)
            st.link_button("📄 Open report", asset_url(detection.report))

        failure = job.failure
        if failure is not None:
            st.error(f"Error: {failure.error}")


def render_not_found(on_back):
    st.error("Job not found")
    st.button("⬅ Upload a new image", on_click=on_back)
