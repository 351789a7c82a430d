"""
Text file helpers.

Reads and writes are whole-file and UTF-8. Writes always truncate the
destination; there is no partial-write recovery.
"""

import logging
from pathlib import Path
from typing import Union

from .errors import StorageError

logger = logging.getLogger("bard")


def read_text(path: Union[str, Path]) -> str:
    """
    Read a whole text file.

    Raises:
        StorageError: If the file cannot be read
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"[Storage] Cannot read {path}: {e}")
        raise StorageError(path, "read", e) from e

    logger.debug(f"[Storage] Read {len(content)} chars from {path}")
    return content


def save_text(path: Union[str, Path], content: str) -> Path:
    """
    Write content to path, overwriting any previous content.

    Returns:
        Path: The written path

    Raises:
        StorageError: If the file cannot be written
    """
    path = Path(path)
    try:
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
    except OSError as e:
        logger.error(f"[Storage] Cannot save {path}: {e}")
        raise StorageError(path, "save", e) from e

    logger.info(f"[Storage] Saved {len(content)} chars to {path}")
    return path
