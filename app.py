from dotenv import load_dotenv
load_dotenv()

import logging

import streamlit as st

from backend import TemplateSession
from transformer.docx_to_html import DOCX_MEDIA_TYPE
from transformer.errors import TemplateTransformerError, TransformError
from transformer.logging_config import setup_logging
from transformer.rendering import render_output

setup_logging()
logger = logging.getLogger(__name__)

# Custom CSS for cleaner UI
st.markdown("""
<style>
  .stApp { max-width: 1100px; margin: 0 auto; padding: 2rem 1.5rem; }
  .main-header { font-size: 1.75rem; font-weight: 600; color: #1a365d; margin-bottom: 0.25rem; }
  .main-desc { color: #5c5c5c; font-size: 0.9375rem; margin-bottom: 1.5rem; }
  .template-preview { color: #5c5c5c; font-size: 0.8125rem; }
  .stTextArea textarea { border-radius: 6px; border-color: #e2dfd9; }
  .stButton > button {
    background: #1a365d; color: white; border: none; border-radius: 6px;
    padding: 0.5rem 1rem; font-weight: 500; transition: background 0.15s;
  }
  .stButton > button:hover { background: #2c5282; color: white; }
  .stDownloadButton > button { background: #1a365d; color: white; border: none; border-radius: 6px; }
</style>
""", unsafe_allow_html=True)


def _session() -> TemplateSession:
    if "session" not in st.session_state:
        st.session_state["session"] = TemplateSession()
        st.session_state["processed_uploads"] = set()
    return st.session_state["session"]


def _handle_upload(session: TemplateSession, uploaded) -> None:
    # file_uploader keeps returning the same file on every rerun
    upload_key = getattr(uploaded, "file_id", None) or (uploaded.name, uploaded.size)
    processed = st.session_state["processed_uploads"]
    if upload_key in processed:
        return
    processed.add(upload_key)
    try:
        template = session.upload(uploaded.name, uploaded.getvalue(), uploaded.type)
    except TemplateTransformerError as e:
        logger.warning("Upload of %s rejected: %s", uploaded.name, e)
        st.error(f"Upload failed: {e}")
        return
    st.success(f"✓ {template.name} added successfully")


session = _session()

st.markdown('<p class="main-header">Template Transformer</p>', unsafe_allow_html=True)
st.markdown(
    '<p class="main-desc">Upload a .txt or .docx template, select it, and enter your text. '
    'The model rewrites your text in the template\'s structure and visual style.</p>',
    unsafe_allow_html=True,
)

left, right = st.columns(2)

with left:
    uploaded = st.file_uploader(
        "Upload template (.txt or .docx)",
        type=["txt", "docx"],
        help=f"Plain text or {DOCX_MEDIA_TYPE}",
    )
    if uploaded is not None:
        _handle_upload(session, uploaded)

    templates = session.templates
    st.markdown(f"**Templates ({len(templates)})**")
    if not templates:
        st.caption("No templates uploaded yet")
    selected = session.selected
    for template in templates:
        is_selected = selected is not None and selected.id == template.id
        name_col, select_col, delete_col = st.columns([6, 2, 2])
        with name_col:
            st.markdown(f"{'▶ ' if is_selected else ''}**{template.name}**")
            st.markdown(f'<span class="template-preview">{template.preview()}</span>', unsafe_allow_html=True)
        with select_col:
            if st.button("Use", key=f"select_{template.id}", disabled=is_selected):
                session.select(template.id)
                st.rerun()
        with delete_col:
            if st.button("Delete", key=f"delete_{template.id}"):
                session.delete(template.id)
                st.toast("Template removed successfully")
                st.rerun()

    if selected is not None and selected.styled_markup:
        with st.expander("Template preview (styled)"):
            st.html(selected.styled_markup)

with right:
    if session.selected is not None:
        st.caption(f"Using: {session.selected.name}")
    input_text = st.text_area(
        "Input text", height=240, placeholder="Enter your text to transform...", key="input_text"
    )
    can_transform = session.selected is not None and bool(input_text.strip()) and not session.in_flight
    if st.button("Transform with AI", type="primary", disabled=not can_transform):
        with st.spinner("Transforming..."):
            try:
                session.transform(input_text)
                st.success("Your text has been transformed successfully")
            except TransformError as e:
                st.error(f"Transformation failed: {e}")
            except TemplateTransformerError as e:
                st.error(str(e))
            except ValueError as e:
                # missing credentials when the model client is first built
                st.error(str(e))

    if session.last_result is not None:
        st.markdown("---")
        st.subheader("Transformed Output")
        rendered = render_output(session.last_result)
        if rendered.kind == "markup":
            st.html(rendered.body)
            with st.expander("HTML source"):
                st.code(rendered.body, language="html")
        else:
            st.code(rendered.body, language=None, wrap_lines=True)
        try:
            docx_bytes = session.export_docx()
        except ValueError as e:
            st.warning(f"Could not build the .docx download: {e}")
        else:
            st.download_button(
                "Download document (.docx)",
                data=docx_bytes,
                file_name="transformed_output.docx",
                mime=DOCX_MEDIA_TYPE,
                key="download_docx",
            )
