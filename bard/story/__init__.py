"""
Story module - story generation pipeline components.

- Model provider dispatch (OpenAI, Gemini, Anthropic, Ollama)
- Completion calls
- Prompt templates
- Plot and story generation
- Markdown to HTML conversion
"""

from .api_client import complete, generate
from .converter import convert, render_markdown
from .generator import Draft, generate_story, prepare_plot, section_plan
from .model_provider import (
    CompletionOptions,
    CompletionResult,
    ModelInfo,
    ModelProvider,
    ProviderKind,
    get_model_info,
    get_provider,
    parse_model_spec,
)
from .prompt_template import SectionKind, build_plot_prompt, build_section_prompt
from .results import RunResult

__all__ = [
    # api_client
    "complete",
    "generate",
    # converter
    "convert",
    "render_markdown",
    # generator
    "Draft",
    "generate_story",
    "prepare_plot",
    "section_plan",
    # model_provider
    "CompletionOptions",
    "CompletionResult",
    "ModelInfo",
    "ModelProvider",
    "ProviderKind",
    "get_model_info",
    "get_provider",
    "parse_model_spec",
    # prompt_template
    "SectionKind",
    "build_plot_prompt",
    "build_section_prompt",
    # results
    "RunResult",
]
