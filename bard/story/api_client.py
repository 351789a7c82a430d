"""
LLM API client module.

Single entry point for completion calls made by the story pipeline.
Every call uses the fixed token limits from bard.config and the seed of
the current run.
"""

import logging
import time
from typing import Mapping, Optional

from bard.config import MAX_TOKENS, MIN_LENGTH
from bard.infra.errors import CompletionError
from bard.infra.timing import format_elapsed

from .model_provider import (
    CompletionOptions,
    CompletionResult,
    ModelProvider,
    ProviderFactory,
    ProviderKind,
    get_provider,
)

logger = logging.getLogger("bard")


def estimate_output_tokens(result: CompletionResult) -> int:
    """
    Output token count of a completion.

    Uses the provider's usage report when present, otherwise a rough
    four-characters-per-token estimate.
    """
    if result.usage and result.usage.get("output_tokens"):
        return int(result.usage["output_tokens"])
    return len(result.text) // 4


def complete(
    provider: ModelProvider,
    prompt: str,
    seed: int,
    max_tokens: int = MAX_TOKENS,
    min_length: int = MIN_LENGTH
) -> str:
    """
    Request one completion and return its text.

    Args:
        provider: Provider returned by get_provider()
        prompt: Full prompt text
        seed: Sampling seed shared by every call of the run
        max_tokens: Maximum output length
        min_length: Minimum expected output length; shorter output is
            logged as a warning

    Returns:
        str: Generated text

    Raises:
        CompletionError: On any provider failure, or when the completion is empty
    """
    options = CompletionOptions(max_tokens=max_tokens, min_length=min_length, seed=seed)

    t0 = time.monotonic()
    try:
        result = provider.complete(prompt, options)
    except CompletionError:
        raise
    except Exception as e:
        logger.error(f"[LLM] Generation failed: {e}", exc_info=True)
        raise CompletionError(provider.provider_name, f"Generation failed: {e}") from e
    elapsed = time.monotonic() - t0

    logger.info(f"[LLM] {result.provider}/{result.model} completed in {format_elapsed(elapsed)}")
    if result.usage:
        logger.info(
            f"[LLM] Tokens - Input: {result.usage.get('input_tokens')}, "
            f"Output: {result.usage.get('output_tokens')}, Total: {result.usage.get('total_tokens')}"
        )

    if not result.text.strip():
        logger.error(f"[LLM] {result.provider}/{result.model} returned an empty completion")
        raise CompletionError(provider.provider_name, "empty completion")

    output_tokens = estimate_output_tokens(result)
    if output_tokens < min_length:
        logger.warning(f"[LLM] Output shorter than expected: ~{output_tokens} tokens (min {min_length})")

    return result.text


def generate(
    model_spec: Optional[str],
    prompt: str,
    seed: int,
    factories: Optional[Mapping[ProviderKind, ProviderFactory]] = None,
    strict: bool = False
) -> str:
    """
    Build the provider for model_spec and request one completion.

    Raises:
        UnsupportedModelError, ProviderError, CompletionError
    """
    provider = get_provider(model_spec, factories=factories, strict=strict)
    return complete(provider, prompt, seed)
