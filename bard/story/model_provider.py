"""
Model provider abstraction for story generation.

Supports multiple LLM backends, selected by model name prefix:
- "gpt-..."     -> OpenAI
- "gemini-..."  -> Google Gemini
- "claude-..."  -> Anthropic
- "ollama:..."  -> Ollama (prefix stripped)
- anything else -> Ollama (local default)

Usage:
    provider = get_provider("llama3.1")
    result = provider.complete(prompt, CompletionOptions(seed=42))
"""

import json
import logging
import os
import socket
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from http.client import HTTPConnection, HTTPException
from typing import Callable, Dict, Mapping, Optional

from bard.config import (
    DEFAULT_MODEL,
    MAX_TOKENS,
    MIN_LENGTH,
    OLLAMA_GENERATE_ENDPOINT,
    OLLAMA_HOST,
    OLLAMA_PORT,
    OLLAMA_TIMEOUT,
)
from bard.infra.errors import CompletionError, ProviderError, UnsupportedModelError

logger = logging.getLogger("bard")


class ProviderKind(str, Enum):
    """Supported LLM backends."""
    OPENAI = "openai"
    GEMINI = "gemini"
    ANTHROPIC = "anthropic"
    OLLAMA = "ollama"


# (prefix, kind, strip prefix from the model name)
MODEL_PREFIXES = (
    ("gpt-", ProviderKind.OPENAI, False),
    ("gemini-", ProviderKind.GEMINI, False),
    ("claude-", ProviderKind.ANTHROPIC, False),
    ("ollama:", ProviderKind.OLLAMA, True),
)


@dataclass
class ModelInfo:
    """Model identification information."""
    kind: ProviderKind
    model_name: str  # e.g., "gpt-4o", "llama3.1"
    full_spec: str  # e.g., "gpt-4o", "ollama:llama3.1"

    @property
    def provider(self) -> str:
        return self.kind.value


@dataclass
class CompletionOptions:
    """Per-call generation limits."""
    max_tokens: int = MAX_TOKENS
    min_length: int = MIN_LENGTH
    seed: Optional[int] = None


@dataclass
class CompletionResult:
    """Result from a single completion."""
    text: str
    usage: Optional[Dict[str, int]]
    provider: str
    model: str


def parse_model_spec(model_spec: Optional[str], strict: bool = False) -> ModelInfo:
    """
    Parse a model name into provider kind and model name.

    Formats:
    - "gpt-4o" -> kind=OPENAI, model="gpt-4o"
    - "gemini-1.5-pro" -> kind=GEMINI, model="gemini-1.5-pro"
    - "claude-3-5-sonnet-latest" -> kind=ANTHROPIC
    - "ollama:qwen2:7b" -> kind=OLLAMA, model="qwen2:7b"
    - "llama3.1" -> kind=OLLAMA (fallback)
    - None -> DEFAULT_MODEL

    Args:
        model_spec: Model name or None for the default
        strict: Reject names without a known prefix instead of falling
            back to Ollama

    Returns:
        ModelInfo with provider kind and model name

    Raises:
        UnsupportedModelError: Blank name, or unknown name in strict mode
    """
    if model_spec is None:
        model_spec = DEFAULT_MODEL

    if not model_spec.strip():
        raise UnsupportedModelError(model_spec, "model name is empty")

    for prefix, kind, strip in MODEL_PREFIXES:
        if model_spec.startswith(prefix):
            model_name = model_spec[len(prefix):] if strip else model_spec
            if not model_name:
                raise UnsupportedModelError(model_spec, "model name is empty")
            return ModelInfo(kind=kind, model_name=model_name, full_spec=model_spec)

    if strict:
        raise UnsupportedModelError(model_spec)

    logger.debug(f"[ModelProvider] No vendor prefix in '{model_spec}', using Ollama")
    return ModelInfo(kind=ProviderKind.OLLAMA, model_name=model_spec, full_spec=model_spec)


def _require_env(provider: str, key: str) -> str:
    value = os.getenv(key)
    if not value:
        raise ProviderError(
            provider,
            f"{key} environment variable is required. Set it in .env or environment."
        )
    return value


class ModelProvider(ABC):
    """Abstract base class for model providers."""

    def __init__(self, model_name: str):
        self.model_name = model_name

    @abstractmethod
    def complete(self, prompt: str, options: CompletionOptions) -> CompletionResult:
        """
        Request a single completion.

        Args:
            prompt: Full prompt text
            options: Token limits and sampling seed

        Returns:
            CompletionResult with generated text and metadata

        Raises:
            CompletionError: On any provider failure
        """
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return provider name for metadata."""
        pass


class OpenAIProvider(ModelProvider):
    """OpenAI chat completions provider."""

    def __init__(self, model_name: str):
        super().__init__(model_name)
        api_key = _require_env("openai", "OPENAI_API_KEY")

        import openai

        self.client = openai.OpenAI(api_key=api_key)

    @property
    def provider_name(self) -> str:
        return "openai"

    def complete(self, prompt: str, options: CompletionOptions) -> CompletionResult:
        logger.info(f"[OpenAIProvider] Generating with {self.model_name}")

        try:
            response = self.client.chat.completions.create(
                model=self.model_name,
                messages=[{"role": "user", "content": prompt}],
                max_completion_tokens=options.max_tokens,
                seed=options.seed,
            )
        except Exception as e:
            logger.error(f"[OpenAIProvider] Generation failed: {e}")
            raise CompletionError(self.provider_name, f"Generation failed: {e}") from e

        text = response.choices[0].message.content or ""

        usage = None
        if getattr(response, "usage", None):
            usage = {
                "input_tokens": response.usage.prompt_tokens,
                "output_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }

        logger.info(f"[OpenAIProvider] Generated {len(text)} chars")
        return CompletionResult(text=text, usage=usage, provider=self.provider_name, model=self.model_name)


class GeminiProvider(ModelProvider):
    """Gemini (Google AI) provider."""

    def __init__(self, model_name: str):
        super().__init__(model_name)
        api_key = _require_env("gemini", "GEMINI_API_KEY")

        from google import genai

        self.client = genai.Client(api_key=api_key)

    @property
    def provider_name(self) -> str:
        return "gemini"

    def complete(self, prompt: str, options: CompletionOptions) -> CompletionResult:
        from google.genai import types

        logger.info(f"[GeminiProvider] Generating with {self.model_name}")

        try:
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=types.GenerateContentConfig(
                    max_output_tokens=options.max_tokens,
                    seed=options.seed,
                ),
            )
            text = response.text or ""
        except Exception as e:
            logger.error(f"[GeminiProvider] Generation failed: {e}")
            raise CompletionError(self.provider_name, f"Generation failed: {e}") from e

        usage = None
        metadata = getattr(response, "usage_metadata", None)
        if metadata:
            usage = {
                "input_tokens": metadata.prompt_token_count or 0,
                "output_tokens": metadata.candidates_token_count or 0,
                "total_tokens": metadata.total_token_count or 0,
            }

        logger.info(f"[GeminiProvider] Generated {len(text)} chars")
        return CompletionResult(text=text, usage=usage, provider=self.provider_name, model=self.model_name)


class ClaudeProvider(ModelProvider):
    """Claude (Anthropic) model provider."""

    def __init__(self, model_name: str):
        super().__init__(model_name)
        api_key = _require_env("anthropic", "ANTHROPIC_API_KEY")

        import anthropic

        self.client = anthropic.Anthropic(api_key=api_key)

    @property
    def provider_name(self) -> str:
        return "anthropic"

    def complete(self, prompt: str, options: CompletionOptions) -> CompletionResult:
        logger.info(f"[ClaudeProvider] Generating with {self.model_name}")
        # The Messages API has no sampling seed
        logger.debug(f"[ClaudeProvider] Ignoring seed {options.seed}")

        try:
            message = self.client.messages.create(
                model=self.model_name,
                max_tokens=options.max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
            text = message.content[0].text
        except Exception as e:
            logger.error(f"[ClaudeProvider] Generation failed: {e}")
            raise CompletionError(self.provider_name, f"Generation failed: {e}") from e

        usage = None
        if getattr(message, "usage", None):
            try:
                usage = {
                    "input_tokens": message.usage.input_tokens,
                    "output_tokens": message.usage.output_tokens,
                    "total_tokens": message.usage.input_tokens + message.usage.output_tokens,
                }
            except (AttributeError, TypeError):
                usage = None

        logger.info(f"[ClaudeProvider] Generated {len(text)} chars")
        return CompletionResult(text=text, usage=usage, provider=self.provider_name, model=self.model_name)


class OllamaProvider(ModelProvider):
    """Ollama (local) model provider."""

    def __init__(self, model_name: str):
        super().__init__(model_name)
        self.host = os.getenv("OLLAMA_HOST", OLLAMA_HOST)
        try:
            self.port = int(os.getenv("OLLAMA_PORT", str(OLLAMA_PORT)))
        except ValueError as e:
            raise ProviderError("ollama", f"Invalid OLLAMA_PORT: {e}") from e

    @property
    def provider_name(self) -> str:
        return "ollama"

    def complete(self, prompt: str, options: CompletionOptions) -> CompletionResult:
        logger.info(f"[OllamaProvider] Generating with {self.model_name}")

        request_options = {"num_predict": options.max_tokens}
        if options.seed is not None:
            request_options["seed"] = options.seed

        request_body = {
            "model": self.model_name,
            "prompt": prompt,
            "stream": False,
            "options": request_options,
        }

        conn = HTTPConnection(self.host, self.port, timeout=OLLAMA_TIMEOUT)
        try:
            conn.request(
                "POST",
                OLLAMA_GENERATE_ENDPOINT,
                body=json.dumps(request_body),
                headers={"Content-Type": "application/json"}
            )
            response = conn.getresponse()
            response_data = response.read().decode("utf-8")
        except socket.timeout as e:
            logger.error(f"[OllamaProvider] Timeout after {OLLAMA_TIMEOUT}s")
            raise CompletionError(self.provider_name, f"Ollama timeout after {OLLAMA_TIMEOUT}s") from e
        except (socket.error, HTTPException, OSError) as e:
            logger.error(f"[OllamaProvider] Connection error: {e}")
            raise CompletionError(self.provider_name, f"Ollama connection failed: {e}") from e
        finally:
            conn.close()

        try:
            response_json = json.loads(response_data)
        except json.JSONDecodeError as e:
            raise CompletionError(self.provider_name, f"Invalid Ollama response: {e}") from e

        if "error" in response_json:
            logger.error(f"[OllamaProvider] Ollama error: {response_json['error']}")
            raise CompletionError(self.provider_name, f"Ollama error: {response_json['error']}")

        text = response_json.get("response", "")

        usage = None
        if "eval_count" in response_json:
            usage = {
                "input_tokens": response_json.get("prompt_eval_count", 0),
                "output_tokens": response_json.get("eval_count", 0),
                "total_tokens": response_json.get("prompt_eval_count", 0) + response_json.get("eval_count", 0)
            }

        logger.info(f"[OllamaProvider] Generated {len(text)} chars")
        return CompletionResult(text=text, usage=usage, provider=self.provider_name, model=self.model_name)


ProviderFactory = Callable[[str], ModelProvider]

PROVIDER_CLASSES: Dict[ProviderKind, ProviderFactory] = {
    ProviderKind.OPENAI: OpenAIProvider,
    ProviderKind.GEMINI: GeminiProvider,
    ProviderKind.ANTHROPIC: ClaudeProvider,
    ProviderKind.OLLAMA: OllamaProvider,
}


def get_provider(
    model_spec: Optional[str] = None,
    factories: Optional[Mapping[ProviderKind, ProviderFactory]] = None,
    strict: bool = False
) -> ModelProvider:
    """
    Get the provider for the given model name.

    Args:
        model_spec: Model name (e.g., "gpt-4o", "llama3.1"); None uses DEFAULT_MODEL
        factories: Overrides for the construction function of some or all
            provider kinds
        strict: Reject names without a known prefix

    Returns:
        ModelProvider instance

    Raises:
        UnsupportedModelError: If the model name cannot be dispatched
        ProviderError: If the client cannot be constructed
    """
    info = parse_model_spec(model_spec, strict=strict)

    table = dict(PROVIDER_CLASSES)
    if factories:
        table.update(factories)

    logger.info(f"[ModelProvider] Using provider={info.provider}, model={info.model_name}")

    try:
        return table[info.kind](info.model_name)
    except ProviderError:
        raise
    except Exception as e:
        logger.error(f"[ModelProvider] Cannot create {info.provider} client: {e}")
        raise ProviderError(info.provider, f"Cannot create client: {e}") from e


def get_model_info(model_spec: Optional[str] = None, strict: bool = False) -> ModelInfo:
    """
    Get model information without creating a provider.

    Args:
        model_spec: Model name

    Returns:
        ModelInfo with provider kind and model name
    """
    return parse_model_spec(model_spec, strict=strict)
