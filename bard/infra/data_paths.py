"""
Data path helpers for Bard.

Directory structure (relative to the working root):
<work_root>/
 ├── plots/            # <title-slug>.txt plots produced by `prepare`
 ├── md/               # <title-slug>.md drafts produced by `generate`
 ├── html/             # HTML documents produced by `convert`
 ├── logs/             # Daily log files
 ├── output.template   # HTML template with a single %s body placeholder
 └── .env              # API keys and endpoints

Environment Variables:
- BARD_WORKDIR: Override the working root (default: current directory)
"""

import logging
import os
import re
from pathlib import Path
from typing import Dict, Optional

from bard.config import (
    DEFAULT_ENV_FILE,
    DEFAULT_TEMPLATE,
    HTML_DIR,
    LOGS_DIR,
    MD_DIR,
    PLOTS_DIR,
)

logger = logging.getLogger("bard")


# =============================================================================
# Base Paths
# =============================================================================

def get_work_root(work_root: Optional[Path] = None) -> Path:
    """
    Get the working root directory.

    Args:
        work_root: Explicit root. When None, BARD_WORKDIR or the current
            directory is used.

    Returns:
        Path: Working root directory
    """
    if work_root is not None:
        return Path(work_root)
    env_root = os.getenv("BARD_WORKDIR")
    if env_root:
        return Path(env_root)
    return Path.cwd()


def get_md_dir(work_root: Optional[Path] = None) -> Path:
    """Get markdown draft directory."""
    return get_work_root(work_root) / MD_DIR


def get_plots_dir(work_root: Optional[Path] = None) -> Path:
    """Get plot directory."""
    return get_work_root(work_root) / PLOTS_DIR


def get_html_dir(work_root: Optional[Path] = None) -> Path:
    """Get HTML output directory."""
    return get_work_root(work_root) / HTML_DIR


def get_logs_dir(work_root: Optional[Path] = None) -> Path:
    """Get log directory."""
    return get_work_root(work_root) / LOGS_DIR


def get_env_file_path(env_file: Optional[str] = None, work_root: Optional[Path] = None) -> Path:
    """
    Resolve the environment file path.

    Absolute paths are returned unchanged; relative ones are resolved
    against the working root.
    """
    path = Path(env_file or DEFAULT_ENV_FILE)
    if path.is_absolute():
        return path
    return get_work_root(work_root) / path


def get_template_path(template: Optional[str] = None, work_root: Optional[Path] = None) -> Path:
    """Resolve the output template path (default: output.template)."""
    path = Path(template or DEFAULT_TEMPLATE)
    if path.is_absolute():
        return path
    return get_work_root(work_root) / path


# =============================================================================
# Output Files
# =============================================================================

def slugify_title(title: str) -> str:
    """
    Turn a story title into a file-name stem.

    "My AI Generated Story" -> "my-ai-generated-story"

    Returns:
        str: Slug, or "story" when nothing usable is left
    """
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")
    return slug or "story"


def get_plot_path(title: str, work_root: Optional[Path] = None) -> Path:
    """Get plots/<title-slug>.txt."""
    return get_plots_dir(work_root) / f"{slugify_title(title)}.txt"


def get_story_path(title: str, work_root: Optional[Path] = None) -> Path:
    """Get md/<title-slug>.md."""
    return get_md_dir(work_root) / f"{slugify_title(title)}.md"


def get_html_path(output_name: str, work_root: Optional[Path] = None) -> Path:
    """
    Get html/<output_name>.

    Only the file name of output_name is kept, so every HTML document
    lands in the html/ directory.
    """
    return get_html_dir(work_root) / Path(output_name).name


# =============================================================================
# Directory Setup
# =============================================================================

def ensure_work_directories(work_root: Optional[Path] = None) -> Dict[str, Path]:
    """
    Ensure md/, plots/ and html/ exist under the working root.

    Safe to call multiple times.

    Returns:
        dict: Directory name -> path

    Raises:
        OSError: If a directory cannot be created
    """
    directories = {
        "md": get_md_dir(work_root),
        "plots": get_plots_dir(work_root),
        "html": get_html_dir(work_root),
    }

    created = []
    for name, path in directories.items():
        if not path.exists():
            path.mkdir(parents=True, exist_ok=True)
            created.append(name)
            logger.debug(f"[DataPaths] Created directory: {path}")

    if created:
        logger.info(f"[DataPaths] Initialized directories: {', '.join(created)}")

    return directories


def get_all_paths(work_root: Optional[Path] = None) -> dict:
    """
    Get all paths as a dictionary.

    Useful for debugging and configuration display.
    """
    return {
        "work_root": get_work_root(work_root),
        "md": get_md_dir(work_root),
        "plots": get_plots_dir(work_root),
        "html": get_html_dir(work_root),
        "logs": get_logs_dir(work_root),
        "env_file": get_env_file_path(work_root=work_root),
        "template": get_template_path(work_root=work_root),
    }
