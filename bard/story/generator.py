"""
Story generation pipeline.

Phase 1 (prepare_plot): seed file -> plot file.
Phase 2 (generate_story): plot file -> markdown draft, one completion per part.

Every completion of a phase shares one random seed. The first failure
stops the phase; the error is returned in the RunResult and nothing is
written for that phase.
"""

import logging
import random
import time
from pathlib import Path
from typing import List, Mapping, Optional, Union

from rich.console import Console

from bard.config import DEFAULT_MODEL, DEFAULT_PARTS, MAX_SEED, MIN_PARTS
from bard.infra.bootstrap import make_console
from bard.infra.errors import BardError, ConfigurationError
from bard.infra.storage import read_text, save_text

from .api_client import complete, generate
from .model_provider import ProviderFactory, ProviderKind, get_provider
from .prompt_template import SectionKind, build_plot_prompt, build_section_prompt
from .results import RunResult

logger = logging.getLogger("bard")

SECTION_SEPARATOR = "\n\n"


class Draft:
    """Story text accumulated section by section, in generation order."""

    def __init__(self):
        self._sections: List[str] = []

    def append(self, section: str) -> None:
        self._sections.append(section)

    @property
    def text(self) -> str:
        return "".join(SECTION_SEPARATOR + section for section in self._sections)

    def __len__(self) -> int:
        return len(self._sections)


def random_seed() -> int:
    """Sampling seed for one run."""
    return random.SystemRandom().randint(0, MAX_SEED)


def validate_num_parts(num_parts: int) -> None:
    """
    Raises:
        ConfigurationError: If fewer than MIN_PARTS parts are requested
    """
    if num_parts < MIN_PARTS:
        raise ConfigurationError(
            f"You have tried to set {num_parts} parts. "
            f"Each story must have at least {MIN_PARTS} parts"
        )


def section_plan(num_parts: int) -> List[SectionKind]:
    """
    Order of sections for a story of num_parts parts:
    OPENING, CONTINUATION x (num_parts - 2), CLOSING.
    """
    validate_num_parts(num_parts)
    return (
        [SectionKind.OPENING]
        + [SectionKind.CONTINUATION] * (num_parts - 2)
        + [SectionKind.CLOSING]
    )


def prepare_plot(
    seed_path: Union[str, Path],
    plot_path: Union[str, Path],
    model_spec: Optional[str] = DEFAULT_MODEL,
    console: Optional[Console] = None,
    seed: Optional[int] = None,
    factories: Optional[Mapping[ProviderKind, ProviderFactory]] = None,
    strict: bool = False
) -> RunResult:
    """
    Elaborate a seed idea into a plot and save it.

    Args:
        seed_path: Text file with the story idea
        plot_path: Destination plot file (overwritten)
        model_spec: Model name used for dispatch
        console: Console for progress output
        seed: Sampling seed; random when None
        factories: Provider construction overrides
        strict: Reject model names without a known prefix

    Returns:
        RunResult with the plot text on success
    """
    console = console or make_console()
    t0 = time.monotonic()

    console.print("Preparing the plot from the seed now.", style="status")
    try:
        outline = read_text(seed_path)
        run_seed = random_seed() if seed is None else seed
        logger.info(f"[Pipeline] Preparing plot from {seed_path} (model={model_spec}, seed={run_seed})")

        plot = generate(model_spec, build_plot_prompt(outline), run_seed, factories=factories, strict=strict)

        console.print("> This is the plot used in the story.", style="status")
        console.print()
        console.print(plot, style="plot", markup=False)
        console.print()

        save_text(plot_path, plot)
    except BardError as e:
        logger.error(f"[Pipeline] Cannot prepare plot: {e}")
        return RunResult(error=e, elapsed_seconds=time.monotonic() - t0)

    return RunResult(
        output_path=Path(plot_path),
        sections=1,
        elapsed_seconds=time.monotonic() - t0,
        text=plot,
    )


def generate_story(
    plot_path: Union[str, Path],
    md_path: Union[str, Path],
    model_spec: Optional[str] = DEFAULT_MODEL,
    num_parts: int = DEFAULT_PARTS,
    verbose: bool = False,
    console: Optional[Console] = None,
    seed: Optional[int] = None,
    factories: Optional[Mapping[ProviderKind, ProviderFactory]] = None,
    strict: bool = False
) -> RunResult:
    """
    Write a story of num_parts sections from a plot file.

    One opening section, num_parts - 2 continuation sections and one closing
    section are generated in that order, each conditioned on the plot and
    the draft so far. The draft is saved only when every section succeeded.

    Args:
        plot_path: Plot file produced by prepare_plot()
        md_path: Destination markdown file (overwritten)
        model_spec: Model name used for dispatch
        num_parts: Number of sections, at least MIN_PARTS
        verbose: Echo each section to the console
        console: Console for progress output
        seed: Sampling seed shared by all sections; random when None
        factories: Provider construction overrides
        strict: Reject model names without a known prefix

    Returns:
        RunResult with the draft text on success. On failure, sections is
        the number of sections generated before the error.
    """
    console = console or make_console()
    t0 = time.monotonic()
    draft = Draft()

    try:
        plan = section_plan(num_parts)

        console.print("Generating story from plot file now.", style="status")
        plot = read_text(plot_path)
        provider = get_provider(model_spec, factories=factories, strict=strict)
        run_seed = random_seed() if seed is None else seed
        logger.info(f"[Pipeline] Generating {num_parts} parts from {plot_path} (seed={run_seed})")

        for number, kind in enumerate(plan, start=1):
            if kind is SectionKind.CLOSING:
                console.print(f"> part {number} (final part)", style="status")
            else:
                console.print(f"> part {number}", style="status")

            section = complete(provider, build_section_prompt(kind, plot, draft.text), run_seed)
            if verbose:
                console.print()
                console.print(section, markup=False)
                console.print()

            draft.append(section)
            logger.debug(f"[Pipeline] Part {number}/{num_parts} ({kind.value}): {len(section)} chars")

        save_text(md_path, draft.text)
    except BardError as e:
        logger.error(f"[Pipeline] Story generation stopped after {len(draft)} of {num_parts} parts: {e}")
        return RunResult(error=e, sections=len(draft), elapsed_seconds=time.monotonic() - t0)

    return RunResult(
        output_path=Path(md_path),
        sections=len(draft),
        elapsed_seconds=time.monotonic() - t0,
        text=draft.text,
    )
