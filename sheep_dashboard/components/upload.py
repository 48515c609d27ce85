import streamlit as st

from sheep_dashboard.utils.constants import IMAGE_EXTENSIONS


def render_upload(view):
    """
    Upload card. Returns the created job, or None when nothing was submitted
    or the submit failed.
    """
    with st.container(border=True):
        st.title("🐑 Sheep Counter")
        st.write("Upload an image to count the number of sheep")

        image_file = st.file_uploader(
            "Upload Image",
            type=IMAGE_EXTENSIONS,
            disabled=view.uploading,
            help="Drag and drop or browse for an image",
        )

        if not st.button("🚀 Count Sheep", disabled=view.uploading or image_file is None):
            return None

        with st.spinner("Uploading image..."):
            job = view.upload(image_file.name, image_file.getvalue(), image_file.type)

        if job is None:
            st.error("❌ Upload failed, please try again.")
        return job
