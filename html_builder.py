"""
HTML Fragment and Document Builder

Assembles small HTML fragments (headings, paragraphs, lists, links) and a
complete HTML document from a title, body, optional styles and scripts.

Security notes:
- Every interpolated value is escaped for &, <, > and " via escape_html()
- Links with javascript: or data: targets are rejected before escaping
- This is surface-level escaping, not an HTML sanitizer: markup structure
  is never parsed
"""
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Union

logger = logging.getLogger(__name__)

HEADING_LEVELS = range(1, 7)
UNSAFE_HREF_PREFIXES = ("javascript:", "data:")

_ESCAPE_TABLE = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
})


class InvalidArgumentError(ValueError):
    """Raised when a builder receives input it cannot render."""


@dataclass
class DocumentOptions:
    """Inputs for generate_website()."""
    title: Optional[str] = None
    body_content: Optional[str] = None
    styles: Optional[str] = None
    scripts: Optional[str] = None

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "DocumentOptions":
        """Build options from a dict, accepting bodyContent or body_content."""
        body = mapping.get("body_content")
        if body is None:
            body = mapping.get("bodyContent")
        return cls(
            title=mapping.get("title"),
            body_content=body,
            styles=mapping.get("styles"),
            scripts=mapping.get("scripts"),
        )


# ---------- Escaping ----------

def escape_html(text: str) -> str:
    """
    Escape &, <, > and " with their HTML entities.

    Single quotes are left alone. The input is scanned once, so a literal
    "&" never turns into "&amp;amp;". Escaping already-escaped text does
    double the entities.
    """
    if not text:
        return ""
    return text.translate(_ESCAPE_TABLE)


# ---------- Fragments ----------

def create_heading(text: str, level: int) -> str:
    """Create an <h1>..<h6> element."""
    if isinstance(level, bool) or not isinstance(level, int) or level not in HEADING_LEVELS:
        logger.debug("Rejected heading level %r", level)
        raise InvalidArgumentError("Heading level must be between 1 and 6")
    return f"<h{level}>{escape_html(text)}</h{level}>"


def create_paragraph(text: str) -> str:
    """Create a <p> element."""
    return f"<p>{escape_html(text)}</p>"


def create_unordered_list(items: Sequence[str]) -> str:
    """
    Create a <ul> element with one <li> per item, separated by newlines.

    An empty list still renders both newlines: "<ul>\\n\\n</ul>".
    """
    if not isinstance(items, (list, tuple)) or not all(isinstance(item, str) for item in items):
        logger.debug("Rejected list items of type %s", type(items).__name__)
        raise InvalidArgumentError("Items must be an array of strings")
    list_items = "\n".join(f"<li>{escape_html(item)}</li>" for item in items)
    return f"<ul>\n{list_items}\n</ul>"


def create_link(text: str, href: str) -> str:
    """
    Create an <a> element.

    The raw href is checked for javascript: and data: prefixes before any
    escaping. A link with both text and href empty renders as the bare
    opening tag '<a href="">'.
    """
    if href.startswith(UNSAFE_HREF_PREFIXES):
        logger.debug("Rejected unsafe href %r", href[:32])
        raise InvalidArgumentError("Invalid href: Potential XSS attack detected")
    if not text and not href:
        # Known quirk: the reference output for an empty link has no </a>.
        return '<a href="">'
    return f'<a href="{escape_html(href)}">{escape_html(text)}</a>'


# ---------- Document ----------

def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or value.strip() == ""


def generate_website(options: Union[DocumentOptions, Mapping[str, Any], None]) -> str:
    """
    Build a complete HTML document.

    Args:
        options: DocumentOptions or a mapping with title, bodyContent
            (or body_content), and optional styles and scripts

    Returns:
        The document as a string, without a trailing newline

    Raises:
        InvalidArgumentError: If title or body content is missing or blank
    """
    if isinstance(options, Mapping):
        options = DocumentOptions.from_mapping(options)
    elif not isinstance(options, DocumentOptions):
        options = DocumentOptions()

    if _is_blank(options.title):
        raise InvalidArgumentError("Title is required and must be a non-empty string")
    if _is_blank(options.body_content):
        raise InvalidArgumentError("Body content is required and must be a non-empty string")

    title = escape_html(options.title)
    body = escape_html(options.body_content)
    styles = escape_html(options.styles) if options.styles else ""
    scripts = escape_html(options.scripts) if options.scripts else ""

    style_block = f"<style>{styles}</style>" if styles else ""
    script_block = f"<script>{scripts}</script>" if scripts else ""

    return (
        "<!DOCTYPE html>\n"
        "<html lang=\"en\">\n"
        "<head>\n"
        "  <meta charset=\"UTF-8\">\n"
        "  <meta name=\"viewport\" content=\"width=device-width, initial-scale=1.0\">\n"
        f"  <title>{title}</title>\n"
        f"  {style_block}\n"
        "</head>\n"
        "<body>\n"
        f"  {body}\n"
        f"  {script_block}\n"
        "</body>\n"
        "</html>"
    )
