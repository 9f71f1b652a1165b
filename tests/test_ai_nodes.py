"""Tests for the AI provider executors."""

import pytest

from nodeflow.core.exceptions import CredentialMissingError, ExternalCallError, NodeValidationError
from nodeflow.engine import llm_provider
from nodeflow.nodes import AnthropicNode, GeminiNode, OpenAINode


class FakeGenerate:
    """Stands in for llm_provider.generate_text."""

    def __init__(self, text: str = "generated", error: Exception | None = None):
        self.calls: list[dict] = []
        self._text = text
        self._error = error

    async def __call__(self, **kwargs) -> str:
        self.calls.append(kwargs)
        if self._error is not None:
            raise self._error
        return self._text


@pytest.fixture
def fake_generate(monkeypatch):
    fake = FakeGenerate()
    monkeypatch.setattr(llm_provider, "generate_text", fake)
    return fake


async def test_openai_generates_text(monkeypatch, fake_generate, make_request, sink):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    node = OpenAINode()

    result = await node.execute(
        make_request(
            node,
            data={"variablesName": "summary", "userPrompt": "Summarize {{webhook.payload.text}}"},
            context={"webhook": {"payload": {"text": "the report"}}},
        )
    )

    assert result["summary"] == {"text": "generated"}
    assert fake_generate.calls == [
        {
            "provider": "openai",
            "model": "gpt-3.5-turbo",
            "system_prompt": "You are a helpful assistant.",
            "user_prompt": "Summarize the report",
            "api_key": "sk-test",
        }
    ]
    assert sink.statuses("node_1") == ["loading", "success"]
    assert sink.channels("node_1") == {"openai"}


async def test_openai_custom_model_and_system_prompt(monkeypatch, fake_generate, make_request):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    node = OpenAINode()

    await node.execute(
        make_request(
            node,
            data={
                "variablesName": "out",
                "userPrompt": "hi",
                "systemPrompt": "You answer as {{persona}}.",
                "model": "gpt-4o-mini",
            },
            context={"persona": "a pirate"},
        )
    )

    call = fake_generate.calls[0]
    assert call["model"] == "gpt-4o-mini"
    assert call["system_prompt"] == "You answer as a pirate."


async def test_openai_requires_variable_name(monkeypatch, fake_generate, make_request, sink):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    node = OpenAINode()

    with pytest.raises(NodeValidationError, match="OpenAI node: Variable name is required"):
        await node.execute(make_request(node, data={"userPrompt": "hi"}))

    assert fake_generate.calls == []
    assert sink.statuses("node_1") == ["loading", "error"]


async def test_openai_requires_user_prompt(monkeypatch, fake_generate, make_request):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    node = OpenAINode()

    with pytest.raises(NodeValidationError, match="OpenAI node: User prompt is required"):
        await node.execute(make_request(node, data={"variablesName": "out"}))

    assert fake_generate.calls == []


async def test_missing_credential(fake_generate, make_request, sink):
    node = OpenAINode()

    with pytest.raises(CredentialMissingError) as exc_info:
        await node.execute(make_request(node, data={"variablesName": "out", "userPrompt": "hi"}))

    assert exc_info.value.message == "OpenAI node: OPENAI_API_KEY environment variable is required"
    assert fake_generate.calls == []
    assert sink.statuses("node_1") == ["loading", "error"]


async def test_anthropic_provider_failure(monkeypatch, make_request, sink):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-test")
    monkeypatch.setattr(llm_provider, "generate_text", FakeGenerate(error=RuntimeError("overloaded")))
    node = AnthropicNode()

    with pytest.raises(ExternalCallError) as exc_info:
        await node.execute(make_request(node, data={"variablesName": "claude", "userPrompt": "hi"}))

    assert exc_info.value.message == "Anthropic request failed: overloaded"
    assert exc_info.value.node_id == "node_1"
    assert sink.statuses("node_1") == ["loading", "error"]
    assert sink.channels("node_1") == {"anthropic"}


async def test_anthropic_generates_text(monkeypatch, fake_generate, make_request):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-test")
    node = AnthropicNode()

    result = await node.execute(make_request(node, data={"variablesName": "claude", "userPrompt": "hi"}))

    assert result["claude"] == {"text": "generated"}
    assert fake_generate.calls[0]["model"] == "claude-3-5-sonnet-20241022"


async def test_gemini_defaults(monkeypatch, fake_generate, make_request, sink):
    monkeypatch.setenv("GOOGLE_GENERATIVE_AI_API_KEY", "g-test")
    node = GeminiNode()

    result = await node.execute(make_request(node, data={"userPrompt": "hi"}))

    assert result["gemini"] == {"aiResponse": "generated"}
    assert fake_generate.calls[0]["provider"] == "gemini"
    assert fake_generate.calls[0]["model"] == "gemini-pro-latest"
    assert sink.channels("node_1") == {"gemini"}


async def test_gemini_requires_user_prompt(monkeypatch, fake_generate, make_request):
    monkeypatch.setenv("GOOGLE_GENERATIVE_AI_API_KEY", "g-test")
    node = GeminiNode()

    with pytest.raises(NodeValidationError, match="Gemini node: User prompt is required"):
        await node.execute(make_request(node, data={"variablesName": "g"}))


async def test_empty_generation_is_stored_as_empty_string(monkeypatch, make_request):
    monkeypatch.setenv("GOOGLE_GENERATIVE_AI_API_KEY", "g-test")
    monkeypatch.setattr(llm_provider, "generate_text", FakeGenerate(text=""))
    node = GeminiNode()

    result = await node.execute(make_request(node, data={"variablesName": "g", "userPrompt": "hi"}))

    assert result["g"] == {"aiResponse": ""}


async def test_unknown_provider_rejected():
    with pytest.raises(ValueError, match="Unsupported LLM provider"):
        await llm_provider.generate_text("mistral", "m", "s", "u", "k")  # type: ignore[arg-type]
