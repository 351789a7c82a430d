"""Typed result objects returned by the story pipeline."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from bard.infra.errors import BardError


@dataclass
class RunResult:
    """
    Outcome of one pipeline command.

    Either output_path is set (success) or error holds the first failure.
    sections counts the generated sections appended to the draft before
    the run finished or stopped.
    """
    output_path: Optional[Path] = None
    error: Optional[BardError] = None
    sections: int = 0
    elapsed_seconds: float = 0.0
    text: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
