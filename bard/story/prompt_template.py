"""
Prompt templates for the story pipeline.

Four fixed blocks: plot elaboration, opening section, continuation section
and closing section. Section prompts always carry the overall plot; the
continuation and closing prompts also carry the story so far.
"""

from enum import Enum

PLOT_TEMPLATE = """Given the outline of the plot below, elaborating on the plot and
provide the characters in the story and locations of where the story plays out.
Give names to major characters and locations. Provide step by step progression
of the story.

Outline:
--
{outline}
"""

OPENING_INSTRUCTIONS = """Write the first section of the story in detail, given the overall plot,
setting the stage for the rest of the story. Keep the story open-ended
such that it can be easily continued in the next section. When possible, provide
the motivations of the various characters in the story.

Start with "# <title of section>"."""

CONTINUATION_INSTRUCTIONS = """Continue fleshing the story and create the next section, following the
overall plot and the story till now. Keep the section open-ended such that
it can be easily continued in the next section. When possible, provide
the motivations of the various characters in the story.

Start with "# <title of section>"."""

CLOSING_INSTRUCTIONS = """End the story with a twist and create the last section following the overall
plot and the story till now. When possible, provide the motivations of the various characters
in the story. Wrap up the entire story as this is the last section.

Start with "# <title of section>"."""

PLOT_HEADER = "[overall plot]"
DRAFT_HEADER = "[story so far]"
BLOCK_SEPARATOR = "\n---\n"


class SectionKind(str, Enum):
    """Position of a section in the story."""
    OPENING = "opening"
    CONTINUATION = "continuation"
    CLOSING = "closing"


SECTION_INSTRUCTIONS = {
    SectionKind.OPENING: OPENING_INSTRUCTIONS,
    SectionKind.CONTINUATION: CONTINUATION_INSTRUCTIONS,
    SectionKind.CLOSING: CLOSING_INSTRUCTIONS,
}


def build_plot_prompt(outline: str) -> str:
    """
    Build the plot elaboration prompt.

    Args:
        outline: Seed text describing the story idea

    Returns:
        Prompt string
    """
    return PLOT_TEMPLATE.format(outline=outline)


def build_section_prompt(kind: SectionKind, plot: str, draft: str = "") -> str:
    """
    Build the prompt for one story section.

    The opening prompt ignores the draft.

    Args:
        kind: Which section to write
        plot: Overall plot
        draft: Story so far

    Returns:
        Prompt string
    """
    blocks = [f"{PLOT_HEADER}\n{plot}"]
    if kind is not SectionKind.OPENING:
        blocks.append(f"{DRAFT_HEADER}\n{draft}")
    blocks.append(SECTION_INSTRUCTIONS[kind])
    return BLOCK_SEPARATOR.join(blocks)
