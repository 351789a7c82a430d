"""
Bard exceptions.

Every error is fatal for the current command. Library code raises these
(or returns them inside a RunResult); only the CLI decides the exit status.
"""


class BardError(Exception):
    """Base exception for all Bard errors."""
    pass


class ConfigurationError(BardError):
    """
    Raised when the run is misconfigured.

    Examples:
    - Missing .env file
    - Missing output template, or a template without exactly one placeholder
    - Fewer than 4 story parts requested
    """
    pass


class UnsupportedModelError(ConfigurationError):
    """Raised when a model name cannot be mapped to a provider."""

    def __init__(self, model_spec: str, reason: str = "no known provider prefix"):
        self.model_spec = model_spec
        super().__init__(f"Unsupported model '{model_spec}': {reason}")


class StorageError(BardError):
    """Raised when a file cannot be read or written."""

    def __init__(self, path, action: str, cause: Exception):
        self.path = path
        self.action = action
        super().__init__(f"Cannot {action} {path}: {cause}")


class ProviderError(BardError):
    """Raised when an LLM provider client cannot be constructed."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"[{provider}] {message}")


class CompletionError(ProviderError):
    """Raised when a completion request fails."""
    pass


class ConversionError(BardError):
    """Raised when markdown cannot be rendered to HTML."""
    pass
