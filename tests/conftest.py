"""
Pytest configuration and shared fixtures.
"""

import io
import logging
import os
from unittest.mock import patch

import pytest

from bard.infra.bootstrap import make_console
from bard.infra.errors import CompletionError
from bard.story.model_provider import (
    CompletionResult,
    ModelProvider,
    ProviderKind,
)
from bard.story.prompt_template import (
    CLOSING_INSTRUCTIONS,
    CONTINUATION_INSTRUCTIONS,
    OPENING_INSTRUCTIONS,
)


class FakeProvider(ModelProvider):
    """
    Provider that never touches the network.

    Records every prompt and options object. Section prompts are answered
    with "# <Kind> <call number>" so tests can check the order of sections.
    """

    def __init__(self, model_name: str = "fake-model"):
        super().__init__(model_name)
        self.prompts = []
        self.options = []
        self.fail_on_call = None
        self.empty_on_call = None

    @property
    def provider_name(self) -> str:
        return "fake"

    def complete(self, prompt, options):
        self.prompts.append(prompt)
        self.options.append(options)
        call = len(self.prompts)

        if self.fail_on_call == call:
            raise CompletionError("fake", f"failure on call {call}")

        if self.empty_on_call == call:
            text = "  \n"
        elif CLOSING_INSTRUCTIONS in prompt:
            text = f"# Closing {call}\n\nThe end of the story."
        elif CONTINUATION_INSTRUCTIONS in prompt:
            text = f"# Continuation {call}\n\nThe story goes on."
        elif OPENING_INSTRUCTIONS in prompt:
            text = f"# Opening {call}\n\nThe story begins."
        else:
            text = f"Plot elaborated on call {call}: a keeper, a storm, a ship."

        return CompletionResult(
            text=text,
            usage={"input_tokens": 10, "output_tokens": 4096, "total_tokens": 4106},
            provider=self.provider_name,
            model=self.model_name,
        )


@pytest.fixture(autouse=True)
def isolate_environment():
    """
    Restore os.environ and the "bard" logger after each test.

    load_dotenv() and setup_logging() both change process-wide state.
    """
    logger = logging.getLogger("bard")
    logger.propagate = True

    with patch.dict(os.environ):
        yield

    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def fake_provider():
    """A fresh FakeProvider."""
    return FakeProvider()


@pytest.fixture
def fake_factories(fake_provider):
    """Construction overrides routing every provider kind to fake_provider."""
    return {kind: (lambda model_name: fake_provider) for kind in ProviderKind}


@pytest.fixture
def console():
    """Console writing to a string buffer; read it with console.file.getvalue()."""
    return make_console(file=io.StringIO(), width=200)


@pytest.fixture
def work_root(tmp_path, monkeypatch):
    """Working root with a .env file, used as BARD_WORKDIR and cwd."""
    (tmp_path / ".env").write_text("OLLAMA_HOST=localhost\n", encoding="utf-8")
    monkeypatch.setenv("BARD_WORKDIR", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return tmp_path
