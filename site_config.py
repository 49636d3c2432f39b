"""
Site Configuration

Loads document options from a site.toml file:

    [site]
    title = "My Site"
    body = "Welcome"          # or body_file = "body.txt"
    styles_file = "style.css" # or styles = "..."
    scripts = "..."           # or scripts_file = "main.js"
    output = "my-site.html"

Security notes:
- *_file keys are resolved with safe_read_file() and must stay inside the
  directory holding site.toml
- Output filenames are sanitized before use
"""
import logging
import os
from typing import Dict, Optional

try:
    import tomli as toml  # Python < 3.11
except ImportError:
    try:
        import tomllib as toml  # Python >= 3.11
    except ImportError:
        toml = None

from html_builder import DocumentOptions
from html_converter import sanitize_filename_for_format

logger = logging.getLogger(__name__)

SITE_TABLE = "site"

# option field -> (inline key, file key)
_FIELD_KEYS = {
    "title": ("title", None),
    "body_content": ("body", "body_file"),
    "styles": ("styles", "styles_file"),
    "scripts": ("scripts", "scripts_file"),
}


class SiteConfigError(ValueError):
    """Raised when site.toml cannot be read or interpreted."""


def _require_toml():
    if toml is None:
        raise SiteConfigError(
            "TOML parser not available. Install 'tomli' for Python < 3.11 or use Python >= 3.11"
        )


def parse_site_toml(toml_path: str) -> Dict:
    """Parse a site.toml configuration file."""
    _require_toml()
    try:
        with open(toml_path, "rb") as f:
            config = toml.load(f)
    except OSError as e:
        raise SiteConfigError(f"Failed to read {toml_path}: {e}") from e
    except (toml.TOMLDecodeError, UnicodeDecodeError) as e:
        raise SiteConfigError(f"Failed to parse {toml_path}: {e}") from e
    logger.info("Loaded site configuration from %s", toml_path)
    return config


def parse_site_toml_text(text: str) -> Dict:
    """Parse site.toml content already held in memory (e.g. an upload)."""
    _require_toml()
    try:
        return toml.loads(text)
    except toml.TOMLDecodeError as e:
        raise SiteConfigError(f"Failed to parse site.toml: {e}") from e


def safe_read_file(base_dir: str, relative_path: str) -> str:
    """
    Safely read a file ensuring it is within the base directory.
    Prevents path traversal attacks (e.g., ../../../../etc/passwd).
    """
    base_abs = os.path.abspath(os.path.normpath(base_dir))
    target_abs = os.path.abspath(os.path.normpath(os.path.join(base_dir, relative_path)))

    # Compare full directory components, not string prefixes
    if not target_abs.startswith(base_abs + os.sep):
        raise ValueError(f"Security violation: Path '{relative_path}' resolves outside base directory.")

    with open(target_abs, "r", encoding="utf-8") as f:
        return f.read()


def _site_table(config: Dict) -> Dict:
    site = config.get(SITE_TABLE, {})
    if not isinstance(site, dict):
        raise SiteConfigError(f"[{SITE_TABLE}] must be a table")
    return site


def options_from_config(config: Dict, base_dir: Optional[str] = None) -> DocumentOptions:
    """
    Resolve the [site] table into DocumentOptions.

    Inline values take precedence over *_file keys. Missing values are left
    as None; generate_website() decides whether they are required.

    Raises:
        SiteConfigError: If a *_file key is used without a base directory,
            or a referenced file cannot be read
        ValueError: If a *_file path escapes the base directory
    """
    site = _site_table(config)
    values = {}
    for field, (inline_key, file_key) in _FIELD_KEYS.items():
        value = site.get(inline_key)
        if value is None and file_key and site.get(file_key):
            if base_dir is None:
                raise SiteConfigError(f"'{file_key}' needs a base directory to resolve against")
            try:
                value = safe_read_file(base_dir, site[file_key])
            except (OSError, UnicodeDecodeError) as e:
                raise SiteConfigError(f"Failed to read {site[file_key]}: {e}") from e
        values[field] = value
    return DocumentOptions(**values)


def load_site_options(toml_path: str) -> DocumentOptions:
    """Parse site.toml and resolve its file references next to it."""
    config = parse_site_toml(toml_path)
    return options_from_config(config, base_dir=os.path.dirname(os.path.abspath(toml_path)))


def output_filename(config: Dict) -> str:
    """Pick the download filename from [site].output, falling back to the title."""
    site = _site_table(config)
    name = site.get("output") or site.get("title") or ""
    return sanitize_filename_for_format(str(name), ".html")
