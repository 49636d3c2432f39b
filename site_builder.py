"""
HTML Site Builder with Streamlit UI

Fill in a title, body, styles and scripts (or upload a site.toml), preview
individual fragments, then build and download a complete HTML document.

Run with: streamlit run site_builder.py
"""
import streamlit as st

from html_builder import (
    HEADING_LEVELS,
    DocumentOptions,
    InvalidArgumentError,
    create_heading,
    create_link,
    create_paragraph,
    create_unordered_list,
    generate_website,
)
from html_converter import check_docx_dependencies, export_docx, sanitize_filename_for_format
from site_config import SiteConfigError, options_from_config, output_filename, parse_site_toml_text

# ---------- App config ----------
APP_TITLE = "HTML Site Builder"
DEFAULT_FILENAME = "document.html"


# ---------- Helpers ----------
def render_fragment(kind: str, text: str, extra: str = "", level: int = 1) -> str:
    """Render one fragment for the Fragments panel."""
    if kind == "Heading":
        return create_heading(text, level)
    if kind == "Paragraph":
        return create_paragraph(text)
    if kind == "List":
        return create_unordered_list([line for line in text.splitlines() if line.strip()])
    if kind == "Link":
        return create_link(text, extra)
    raise InvalidArgumentError(f"Unknown fragment type: {kind}")


def load_uploaded_config(uploaded) -> dict:
    """
    Read an uploaded site.toml into field defaults.

    *_file keys cannot be resolved for uploads and are reported as an error.
    """
    config = parse_site_toml_text(uploaded.read().decode("utf-8"))
    options = options_from_config(config)
    return {
        "title": options.title or "",
        "body": options.body_content or "",
        "styles": options.styles or "",
        "scripts": options.scripts or "",
        "filename": output_filename(config),
    }


# ---------- Streamlit UI ----------
st.set_page_config(page_title=APP_TITLE, layout="wide")
st.title(APP_TITLE)
st.caption("Build a single HTML page from a title, body, styles and scripts. All text is HTML-escaped.")

defaults = {"title": "", "body": "", "styles": "", "scripts": "", "filename": DEFAULT_FILENAME}

with st.container(border=True):
    st.subheader("Source")

    uploaded = st.file_uploader("Upload a site.toml", type=["toml"])
    if uploaded is not None:
        try:
            defaults = load_uploaded_config(uploaded)
        except (SiteConfigError, UnicodeDecodeError) as e:
            st.error(f"Failed to load configuration: {e}")

    title = st.text_input("Title", value=defaults["title"])
    body_content = st.text_area("Body content", value=defaults["body"], height=200)
    col1, col2 = st.columns([1, 1], gap="medium")
    with col1:
        styles = st.text_area("Styles (CSS)", value=defaults["styles"], height=140)
    with col2:
        scripts = st.text_area("Scripts (JavaScript)", value=defaults["scripts"], height=140)

st.divider()

with st.container(border=True):
    st.subheader("Fragments")

    kind = st.radio("Fragment type", ["Heading", "Paragraph", "List", "Link"], horizontal=True)
    level = 1
    href = ""
    if kind == "Heading":
        level = st.selectbox("Heading level", list(HEADING_LEVELS), index=0)
    fragment_text = st.text_area(
        "Text" if kind != "List" else "Items (one per line)",
        height=100,
        key="fragment_text",
    )
    if kind == "Link":
        href = st.text_input("Link target (href)", placeholder="https://example.com")

    if fragment_text or href:
        try:
            st.code(render_fragment(kind, fragment_text, href, level), language="html")
        except InvalidArgumentError as e:
            st.error(str(e))

st.divider()

build_col, preview_col = st.columns([1, 3], gap="large")
with build_col:
    st.subheader("Build")
    if st.button("Build HTML", type="primary", use_container_width=True):
        try:
            options = DocumentOptions(title=title, body_content=body_content, styles=styles, scripts=scripts)
            html = generate_website(options)
        except InvalidArgumentError as e:
            st.error(str(e))
        else:
            # Session state keeps the download button across re-renders
            st.session_state["generated_html"] = html
            st.session_state["generated_options"] = options
            st.session_state["generated_name"] = defaults["filename"] if uploaded is not None \
                else sanitize_filename_for_format(title, ".html")
            st.session_state.pop("generated_docx", None)
            st.success("HTML built successfully!")

    if "generated_html" in st.session_state:
        st.download_button(
            "Download HTML",
            data=st.session_state["generated_html"].encode("utf-8"),
            file_name=st.session_state.get("generated_name", DEFAULT_FILENAME),
            mime="text/html",
            use_container_width=True
        )

        docx_available, docx_error = check_docx_dependencies()
        if not docx_available:
            st.caption(docx_error)
        elif st.button("Convert to DOCX", use_container_width=True):
            try:
                st.session_state["generated_docx"] = export_docx(st.session_state["generated_options"])
            except (ImportError, RuntimeError) as e:
                st.error(f"DOCX export failed: {e}")

        if "generated_docx" in st.session_state:
            st.download_button(
                "Download DOCX",
                data=st.session_state["generated_docx"][1],
                file_name=st.session_state["generated_docx"][0],
                mime="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
                use_container_width=True
            )

with preview_col:
    st.subheader("Preview")
    if "generated_html" in st.session_state:
        st.components.v1.html(st.session_state["generated_html"], height=650, scrolling=True)
    else:
        st.info("Build to see a live preview here.")
