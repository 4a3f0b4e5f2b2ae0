from types import SimpleNamespace

import pytest

from monetize_ai.config import Settings
from monetize_ai.generation import (
    IDEA_TEMPLATES,
    STRATEGY_EXAMPLES,
    GenerationError,
    make_client,
    stream_market_trends,
    stream_strategy_analysis,
    stream_text,
    strategy_prompt,
)


class FakeModels:
    def __init__(self, chunks=None, error=None):
        self.chunks = chunks or []
        self.error = error
        self.calls = []

    def generate_content_stream(self, *, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        for text in self.chunks:
            yield SimpleNamespace(text=text)


def _client(**kwargs):
    return SimpleNamespace(models=FakeModels(**kwargs))


def test_stream_text_forwards_fragments_and_concatenates():
    client = _client(chunks=["## Hello", None, "", " world"])
    seen = []
    full = stream_text("prompt", seen.append, client=client, model_name="gemini-test")
    assert full == "## Hello world"
    assert seen == ["## Hello", " world"]
    assert client.models.calls[0]["model"] == "gemini-test"
    assert client.models.calls[0]["config"] is None


def test_stream_text_wraps_provider_failure():
    client = _client(error=RuntimeError("403 PERMISSION_DENIED"))
    with pytest.raises(GenerationError, match="PERMISSION_DENIED"):
        stream_text("prompt", lambda _t: None, client=client)


def test_stream_text_wraps_mid_stream_failure():
    def _broken(**_kwargs):
        yield SimpleNamespace(text="partial")
        raise ConnectionError("stream reset")

    client = SimpleNamespace(models=SimpleNamespace(generate_content_stream=_broken))
    seen = []
    with pytest.raises(GenerationError):
        stream_text("prompt", seen.append, client=client)
    assert seen == ["partial"]


def test_strategy_analysis_uses_system_instruction():
    client = _client(chunks=["ok"])
    stream_strategy_analysis("A todo app for dogs", lambda _t: None, client=client)
    call = client.models.calls[0]
    assert 'The user has an app idea: "A todo app for dogs"' in call["contents"]
    assert call["config"].system_instruction == "You are a Silicon Valley product strategy expert."
    assert call["config"].temperature == pytest.approx(0.7)


def test_market_trends_prompt():
    client = _client(chunks=["- trend"])
    assert stream_market_trends(lambda _t: None, client=client) == "- trend"
    assert "top 5 emerging trends" in client.models.calls[0]["contents"]


def test_strategy_prompt_has_all_sections():
    prompt = strategy_prompt("  idea  ")
    assert '"idea"' in prompt
    for section in ["Core Value Proposition", "Pricing Strategy", "Implementation Roadmap"]:
        assert section in prompt


def test_make_client_requires_api_key():
    with pytest.raises(GenerationError):
        make_client(Settings(api_key=None))


def test_starter_ideas_build_strategy_prompts():
    assert len(STRATEGY_EXAMPLES) == 3
    assert any("recipe generator" in idea for idea in STRATEGY_EXAMPLES.values())
    assert any("pickup sports" in idea for idea in STRATEGY_EXAMPLES.values())
    for idea in list(STRATEGY_EXAMPLES.values()) + list(IDEA_TEMPLATES.values()):
        assert f'"{idea}"' in strategy_prompt(idea)
