"""
Document Export

Turns a generated page into downloadable artifacts:
- filenames derived from the document title, safe on any filesystem
- a Word document rendered from the HTML by pandoc

The DOCX keeps the page title as document metadata, so Word shows the same
title the browser tab does.
"""
import logging
import os
import re
import shutil
import tempfile
from typing import Optional, Tuple

try:
    import pypandoc
    HAS_PYPANDOC = True
except ImportError:
    HAS_PYPANDOC = False
    pypandoc = None

from html_builder import DocumentOptions, generate_website

logger = logging.getLogger(__name__)

DEFAULT_STEM = "document"
MAX_FILENAME_BYTES = 255
# Extensions a user may already have typed for one of our outputs
OUTPUT_EXTENSIONS = ('.html', '.htm', '.docx', '.toml')

PANDOC_INSTALL_HINT = (
    "pandoc is not found on the system. Install with:\n"
    "  - macOS: brew install pandoc\n"
    "  - Ubuntu/Debian: apt-get install pandoc\n"
    "  - Windows: choco install pandoc"
)

_UNSAFE_FILENAME_CHARS = re.compile(r'[^\w\s.-]')


# ---------- Filenames ----------

def sanitize_filename_for_format(name: str, extension: str) -> str:
    """
    Turn a title or user-typed name into a filename ending in `extension`.

    Directory parts are discarded, punctuation dropped, whitespace runs become
    underscores and a trailing output extension is replaced. The result never
    exceeds 255 UTF-8 bytes.
    """
    stem = _UNSAFE_FILENAME_CHARS.sub('', os.path.basename(name or ''))
    stem = '_'.join(stem.split()).strip('._-')

    root, ext = os.path.splitext(stem)
    if ext.lower() in OUTPUT_EXTENSIONS:
        stem = root.rstrip('._-')

    budget = MAX_FILENAME_BYTES - len(extension.encode('utf-8'))
    # Cutting bytes may split a character; drop the partial tail
    stem = stem.encode('utf-8')[:budget].decode('utf-8', 'ignore')

    return (stem or DEFAULT_STEM) + extension


def document_filename(options: DocumentOptions, extension: str) -> str:
    """Filename for an export of `options`, named after its title."""
    return sanitize_filename_for_format(options.title or '', extension)


# ---------- DOCX ----------

def check_docx_dependencies() -> Tuple[bool, str]:
    """Report whether DOCX export can run, and why not when it can't."""
    if not HAS_PYPANDOC:
        return False, "pypandoc is not installed. Install with: pip install pypandoc"
    if not shutil.which("pandoc"):
        return False, PANDOC_INSTALL_HINT
    return True, ""


def convert_html_to_docx(
    html_content: str,
    title: Optional[str] = None,
    output_path: Optional[str] = None
) -> bytes:
    """
    Render an HTML page to DOCX bytes with pandoc.

    Args:
        html_content: A document produced by generate_website()
        title: Stored as the DOCX title metadata when given
        output_path: Also write the DOCX here when given

    Raises:
        ImportError: If pypandoc or pandoc is unavailable
        RuntimeError: If pandoc rejects the document
    """
    ready, reason = check_docx_dependencies()
    if not ready:
        raise ImportError(reason)

    extra_args = ["--standalone"]
    if title:
        extra_args.append(f"--metadata=title:{title}")

    with tempfile.TemporaryDirectory() as workdir:
        docx_path = os.path.join(workdir, "site.docx")
        try:
            pypandoc.convert_text(
                html_content,
                "docx",
                format="html",
                outputfile=docx_path,
                extra_args=extra_args,
            )
        except (OSError, RuntimeError) as e:
            raise RuntimeError(f"Pandoc could not convert the page: {e}") from e
        with open(docx_path, "rb") as f:
            docx_bytes = f.read()

    logger.info("Exported %r to DOCX (%d bytes)", title or DEFAULT_STEM, len(docx_bytes))

    if output_path:
        with open(output_path, "wb") as f:
            f.write(docx_bytes)
    return docx_bytes


def export_docx(options: DocumentOptions, output_dir: Optional[str] = None) -> Tuple[str, bytes]:
    """
    Build the page for `options` and export it as DOCX.

    Returns:
        (filename, docx_bytes); the file is also written into `output_dir`
        when one is given

    Raises:
        InvalidArgumentError: If the options cannot produce a page
    """
    filename = document_filename(options, ".docx")
    output_path = os.path.join(output_dir, filename) if output_dir else None
    html = generate_website(options)
    return filename, convert_html_to_docx(html, title=options.title, output_path=output_path)
