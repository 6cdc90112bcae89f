# ======================================================
# Floture Detector — upload an image, ask the detection service
# ======================================================

import sys
from pathlib import Path

import streamlit as st

# ======================================================
# PATHS
# ======================================================
ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from floture.models import SelectedFile
from floture.utils.api_client import check_health
from floture.utils.config import configure_logging, load_settings, make_client
from floture.workflow import ACCEPTED_TYPES, DetectionWorkflow

# ======================================================
# STREAMLIT CONFIG
# ======================================================
st.set_page_config(page_title="Floture Detector", page_icon="🌺", layout="wide")


@st.cache_resource
def get_settings():
    # URL of the detection backend (env var first, Streamlit secrets as fallback)
    settings = load_settings(secrets=st.secrets)
    configure_logging(settings)
    return settings


@st.cache_data(ttl=30, show_spinner=False)
def backend_is_up(base_url: str) -> bool:
    return check_health(base_url)


settings = get_settings()

# ======================================================
# SESSION SAFETY
# ======================================================
if "workflow" not in st.session_state:
    st.session_state.workflow = DetectionWorkflow(
        make_client(settings), preview_max_pixels=settings.preview_max_pixels
    )
if "uploader_key" not in st.session_state:
    st.session_state.uploader_key = 0

workflow: DetectionWorkflow = st.session_state.workflow
pending = workflow.controller.pending

# ======================================================
# SIDEBAR
# ======================================================
with st.sidebar:
    st.subheader("Backend")
    if settings.use_mock:
        st.info("Offline mock backend (FLOTURE_MOCK_BACKEND is set).")
    else:
        st.code(settings.backend_url, language=None)
        if backend_is_up(settings.backend_url):
            st.success("Detection service reachable")
        else:
            st.warning("Detection service not reachable")

# ======================================================
# HEADER
# ======================================================
st.title("🌺 Floture Detector")
st.subheader("Detect the red “floture” flower")
st.caption(
    "Upload an image and the vision service will estimate whether a floture "
    "is present, with a confidence score."
)

upload_col, result_col = st.columns(2)

# ======================================================
# IMAGE UPLOAD
# ======================================================
with upload_col:
    st.markdown("#### Upload")
    uploaded_file = st.file_uploader(
        "Drag and drop an image here, or click to choose a file.",
        type=ACCEPTED_TYPES,
        key=f"uploader_{st.session_state.uploader_key}",
        disabled=pending,
    )

    # The uploader keeps its value across reruns; only a different file is a new selection
    if uploaded_file is not None:
        candidate = SelectedFile.from_upload(uploaded_file)
        if workflow.file is None or workflow.file.digest != candidate.digest:
            workflow.select(candidate)
    elif workflow.file is not None and not pending:
        workflow.clear()

    preview = workflow.preview.current
    if preview is not None:
        st.image(preview.image, caption="Preview", width="content")
    elif workflow.file is not None:
        st.info(f"No preview available for {workflow.file.name}.")

    c1, c2 = st.columns([1, 1])
    if c1.button(
        "Analyzing…" if pending else "Detect floture",
        type="primary",
        key="detect",
        disabled=workflow.file is None or pending,
    ):
        workflow.detect()
        st.rerun()

    if workflow.file is not None and not pending:
        if c2.button("Clear"):
            workflow.clear()
            st.session_state.uploader_key += 1
            st.rerun()

    view = workflow.view()
    if view.kind == "failure":
        st.error(view.error)

# ======================================================
# RESULT
# ======================================================
with result_col:
    st.markdown("#### Result")

    if view.kind == "pending":
        with st.spinner(view.placeholder):
            workflow.wait()
        st.rerun()
    elif view.kind == "success":
        show = st.success if view.detected else st.warning
        show(f"**{view.headline}** · {view.confidence}")
        m1, m2 = st.columns(2)
        for i, (name, value) in enumerate(view.metrics):
            (m1 if i % 2 == 0 else m2).metric(name, value)
    else:
        st.info(view.placeholder)

st.caption("This demo uses a color-based heuristic inspired by red spider lily imagery.")
