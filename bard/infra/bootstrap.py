"""
Startup checks for every Bard command.

initialize() loads the .env file, makes sure the working directories exist
and builds the console used for coloured progress output. It reports what
happened in a Readiness result instead of exiting, so callers decide how to
react.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.theme import Theme

from .data_paths import ensure_work_directories, get_env_file_path, get_work_root
from .errors import BardError, ConfigurationError, StorageError

logger = logging.getLogger("bard")

# Status lines are yellow, generated plot text is cyan
BARD_THEME = Theme({
    "status": "bright_yellow",
    "plot": "cyan",
    "error": "bold red",
})


@dataclass
class Readiness:
    """Outcome of initialize()."""
    work_root: Path
    console: Console
    env_file: Path
    directories: Dict[str, Path] = field(default_factory=dict)
    error: Optional[BardError] = None

    @property
    def ready(self) -> bool:
        return self.error is None


def make_console(**kwargs) -> Console:
    """Create a console with the Bard colour theme."""
    kwargs.setdefault("highlight", False)
    return Console(theme=BARD_THEME, **kwargs)


def initialize(
    work_root: Optional[Path] = None,
    env_file: Optional[str] = None,
    console: Optional[Console] = None
) -> Readiness:
    """
    Prepare the process for a Bard command.

    Args:
        work_root: Working root (default: BARD_WORKDIR or current directory)
        env_file: Environment file, relative to work_root unless absolute
            (default: .env)
        console: Console to use; a themed one is created when None

    Returns:
        Readiness: ready is False when the .env file is missing or the
            working directories cannot be created
    """
    root = get_work_root(work_root)
    env_path = get_env_file_path(env_file, root)
    readiness = Readiness(
        work_root=root,
        console=console or make_console(),
        env_file=env_path,
    )

    if not env_path.is_file():
        logger.error(f"[Bootstrap] Error loading .env file: {env_path} not found")
        readiness.error = ConfigurationError(f"Environment file not found: {env_path}")
        return readiness

    load_dotenv(env_path)
    logger.debug(f"[Bootstrap] Loaded environment from {env_path}")

    try:
        readiness.directories = ensure_work_directories(root)
    except OSError as e:
        logger.error(f"[Bootstrap] Cannot create working directories: {e}")
        readiness.error = StorageError(root, "create directories in", e)

    return readiness
