"""Unit tests for the Gemini client wrapper (API calls mocked)."""

from types import SimpleNamespace
from unittest.mock import patch

import pytest

from src.chat.models import AppSettings, Message, MessageRole
from src.generation.llm_client import (
    GeminiClient,
    GenerationError,
    create_client_from_config,
)
from src.generation.prompts import build_contents


@pytest.fixture
def genai_client():
    with patch("src.generation.llm_client.genai.Client") as client_cls:
        yield client_cls.return_value


@pytest.fixture
def history():
    return [Message(MessageRole.USER, "What is $x$?")]


class TestBuildContents:
    """Test mapping chat history to request contents."""

    def test_roles_and_text(self):
        contents = build_contents([
            Message(MessageRole.USER, "hi"),
            Message(MessageRole.MODEL, "hello"),
        ])

        assert [c.role for c in contents] == ["user", "model"]
        assert contents[1].parts[0].text == "hello"

    def test_blank_messages_skipped(self):
        contents = build_contents([
            Message(MessageRole.USER, "hi"),
            Message(MessageRole.MODEL, "  "),
        ])
        assert len(contents) == 1


class TestGeminiClient:
    """Test streaming and single-shot generation."""

    def test_requires_api_key(self, genai_client):
        with pytest.raises(ValueError):
            GeminiClient(api_key="")

    def test_stream_yields_non_empty_chunks(self, genai_client, history):
        genai_client.models.generate_content_stream.return_value = iter([
            SimpleNamespace(text="Hel"),
            SimpleNamespace(text=None),
            SimpleNamespace(text="lo"),
        ])
        client = GeminiClient(api_key="key", model_name="gemini-2.5-pro")

        assert list(client.stream(history)) == ["Hel", "lo"]

        kwargs = genai_client.models.generate_content_stream.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-pro"
        assert kwargs["config"].max_output_tokens == 1024

    def test_stream_failure_is_wrapped(self, genai_client, history):
        def broken_stream():
            yield SimpleNamespace(text="partial")
            raise ConnectionError("reset")

        genai_client.models.generate_content_stream.return_value = broken_stream()
        client = GeminiClient(api_key="key")
        received = []

        with pytest.raises(GenerationError) as excinfo:
            for chunk in client.stream(history):
                received.append(chunk)

        assert received == ["partial"]
        assert isinstance(excinfo.value.cause, ConnectionError)

    def test_stream_empty_history(self, genai_client):
        client = GeminiClient(api_key="key")
        with pytest.raises(GenerationError):
            list(client.stream([]))
        genai_client.models.generate_content_stream.assert_not_called()

    def test_generate_success(self, genai_client, history):
        genai_client.models.generate_content.return_value = SimpleNamespace(text="Answer")
        result = GeminiClient(api_key="key").generate(history)

        assert result.success
        assert result.answer == "Answer"

    def test_generate_failure(self, genai_client, history):
        genai_client.models.generate_content.side_effect = RuntimeError("quota")
        result = GeminiClient(api_key="key").generate(history)

        assert not result.success
        assert "quota" in result.error


def test_create_client_settings_override(genai_client):
    config = SimpleNamespace(
        google_api_key="key",
        llm_model="gemini-2.5-flash",
        llm_temperature=0.7,
        llm_max_tokens=256,
        system_prompt="env prompt",
    )
    settings = AppSettings(model_name="gemini-2.5-pro", temperature=0.1, system_prompt="mine")

    client = create_client_from_config(config, settings)

    assert client.model_name == "gemini-2.5-pro"
    assert client.temperature == 0.1
    assert client.max_tokens == 256
    assert client.system_prompt == "mine"
    assert create_client_from_config(config).system_prompt == "env prompt"
