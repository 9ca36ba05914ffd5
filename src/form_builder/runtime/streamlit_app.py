"""
Dynamic Form Client - Schema-Driven Architecture

This Streamlit application renders whatever form schema is active on the
backend:
- Fetch the active schema and render it field by field (no hardcoded fields)
- Validate on commit of each input and on submit
- Submit to the backend and show the submissions list
- Publish a new schema by pasting JSON or uploading a file

Usage:
    form-builder serve                      # backend on :8000
    streamlit run src/form_builder/runtime/streamlit_app.py
"""

import asyncio

import streamlit as st

from form_builder.gateways.http import HttpSchemaGateway, HttpSubmissionGateway
from form_builder.runtime.widget_factory import WidgetFactory, render_widget
from form_builder.session.controller import FormController
from form_builder.session.state import SubmitOutcome
from form_builder.startup import ensure_initialized


# Page configuration
st.set_page_config(page_title="Dynamic Form Builder", layout="wide")


def _run(coro):
    """Run a coroutine on this browser session's event loop."""
    return st.session_state.loop.run_until_complete(coro)


def _clear_widget_state() -> None:
    for key in [k for k in st.session_state.keys() if str(k).startswith("field__")]:
        del st.session_state[key]


# Initialize session state
if "controller" not in st.session_state:
    settings = ensure_initialized()
    st.session_state.loop = asyncio.new_event_loop()
    st.session_state.controller = FormController(
        HttpSchemaGateway(settings.api_url, timeout=settings.request_timeout),
        HttpSubmissionGateway(settings.api_url, timeout=settings.request_timeout),
        max_upload_bytes=settings.max_upload_bytes,
    )
    _run(st.session_state.controller.load())

controller: FormController = st.session_state.controller
session = controller.session


# Sidebar: Schema upload
st.sidebar.header("Form Schema")
paste_tab, file_tab = st.sidebar.tabs(["Paste JSON", "Upload File"])

with paste_tab:
    schema_text = st.text_area(
        "JSON Schema",
        height=240,
        help="Paste your JSON schema. It should have a title and fields array.",
    )
    if st.button("Upload Schema", use_container_width=True):
        if _run(controller.publish_schema_text(schema_text)):
            _clear_widget_state()

with file_tab:
    uploaded = st.file_uploader("Schema File", type=["json"])
    if st.button("Upload File", use_container_width=True):
        published = _run(
            controller.publish_schema_file(
                uploaded.getvalue() if uploaded else None,
                uploaded.type if uploaded else None,
                uploaded.name if uploaded else "schema.json",
            )
        )
        if published:
            _clear_widget_state()

if controller.upload_error:
    st.sidebar.error(controller.upload_error)
if controller.upload_message:
    st.sidebar.success(controller.upload_message)

if st.sidebar.button("Reload Active Schema"):
    _run(controller.refresh_schema())
    _clear_widget_state()


# Main content
if controller.page_error:
    st.error(controller.page_error)
    st.stop()

if session.schema is None:
    st.info("Loading form...")
    st.stop()

form_col, submissions_col = st.columns([3, 2])

with form_col:
    st.header(session.schema.title)
    st.markdown("Fields marked with * are required.")

    for field in session.schema.fields:
        spec = WidgetFactory.build(
            field,
            value=session.values.get(field.name, ""),
            error=session.error_for(field.name),
            touched=session.is_touched(field.name),
        )
        render_widget(
            spec,
            on_change=session.change,
            on_blur=lambda name: _run(session.blur(name)),
            disabled=session.is_submitting,
        )

    col1, col2 = st.columns(2)
    with col1:
        if st.button("Submit", type="primary", use_container_width=True, disabled=session.is_submitting):
            outcome = _run(session.submit())
            if outcome == SubmitOutcome.SUBMITTED:
                _clear_widget_state()
            st.rerun()
    with col2:
        if st.button("Reset", use_container_width=True):
            session.reset()
            _clear_widget_state()
            st.rerun()

    if session.success_message:
        st.success(session.success_message)
    if session.error_message:
        st.error(session.error_message)
    if session.success_message or session.error_message:
        if st.button("Dismiss"):
            session.dismiss_messages()
            st.rerun()

with submissions_col:
    st.subheader("Submissions")
    if controller.submissions_loading:
        st.caption("Loading submissions...")
    if not controller.submissions:
        st.caption("No submissions yet.")
    for submission in controller.submissions:
        with st.expander(f"#{submission.id} {submission.form_title} - {submission.created_at:%Y-%m-%d %H:%M}"):
            st.json(submission.data)
