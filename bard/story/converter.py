"""
Markdown to HTML conversion.

Rendering follows GitHub-flavoured markdown (tables, strikethrough,
autolinks, task lists) with an id on every heading, hard line breaks and
XHTML-style void tags. The rendered body replaces the single %s placeholder
of the output template.
"""

import logging
import time
from pathlib import Path
from typing import Union

from markdown_it import MarkdownIt
from mdit_py_plugins.anchors import anchors_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

from bard.config import TEMPLATE_PLACEHOLDER
from bard.infra.errors import BardError, ConfigurationError, ConversionError
from bard.infra.storage import read_text, save_text

from .results import RunResult

logger = logging.getLogger("bard")


def create_renderer() -> MarkdownIt:
    """Build the markdown renderer used for story output."""
    md = MarkdownIt("gfm-like", {"breaks": True, "xhtmlOut": True})
    md.use(tasklists_plugin)
    md.use(anchors_plugin, min_level=1, max_level=6)
    return md


def render_markdown(text: str) -> str:
    """
    Render markdown text to an HTML fragment.

    Raises:
        ConversionError: If the renderer fails
    """
    try:
        return create_renderer().render(text)
    except Exception as e:
        logger.error(f"[Converter] Cannot convert markdown to HTML: {e}")
        raise ConversionError(f"Cannot convert markdown to HTML: {e}") from e


def load_template(template_path: Union[str, Path]) -> str:
    """
    Read the output template and check its placeholder.

    Raises:
        ConfigurationError: If the template is missing or does not contain
            exactly one placeholder
    """
    template_path = Path(template_path)
    if not template_path.is_file():
        raise ConfigurationError(f"Cannot read template file: {template_path} not found")

    template = read_text(template_path)
    count = template.count(TEMPLATE_PLACEHOLDER)
    if count != 1:
        raise ConfigurationError(
            f"Template {template_path} must contain exactly one '{TEMPLATE_PLACEHOLDER}' "
            f"placeholder, found {count}"
        )
    return template


def apply_template(template: str, body: str) -> str:
    """Put body in place of the template placeholder, leaving the rest untouched."""
    before, after = template.split(TEMPLATE_PLACEHOLDER, 1)
    return before + body + after


def convert(
    md_path: Union[str, Path],
    html_path: Union[str, Path],
    template_path: Union[str, Path]
) -> RunResult:
    """
    Convert a markdown draft into an HTML document.

    Nothing is written unless reading, rendering and templating all succeed.

    Args:
        md_path: Markdown draft
        html_path: Destination HTML file (overwritten)
        template_path: Output template with a single %s placeholder

    Returns:
        RunResult with the HTML text on success
    """
    t0 = time.monotonic()

    try:
        markdown = read_text(md_path)
        body = render_markdown(markdown)
        output = apply_template(load_template(template_path), body)
        save_text(html_path, output)
    except BardError as e:
        logger.error(f"[Converter] Conversion failed: {e}")
        return RunResult(error=e, elapsed_seconds=time.monotonic() - t0)

    logger.info(f"[Converter] {md_path} -> {html_path}")
    return RunResult(
        output_path=Path(html_path),
        elapsed_seconds=time.monotonic() - t0,
        text=output,
    )
