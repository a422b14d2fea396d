from datetime import timedelta
from types import SimpleNamespace

import pytest

from review_cards.core.models import ApiConfiguration, utcnow
from review_cards.services import llm
from review_cards.services.exceptions import LLMError


class _Recorder(llm.TextGenerator):
    def __init__(self, api_key, model, temperature=0.9):
        self.api_key = api_key
        self.model = model

    def generate(self, prompt):
        return "ok"


class _GeminiStub(_Recorder):
    provider = "gemini"


class _OpenAIStub(_Recorder):
    provider = "openai"


class _BrokenStub(_Recorder):
    provider = "openai"

    def __init__(self, *a, **kw):
        raise LLMError("bad key")


def _stub_providers(monkeypatch, openai_cls=_OpenAIStub):
    monkeypatch.setitem(llm._GENERATORS, "gemini", _GeminiStub)
    monkeypatch.setitem(llm._GENERATORS, "openai", openai_cls)
    monkeypatch.setattr(llm, "GeminiTextGenerator", _GeminiStub)
    monkeypatch.setattr(llm, "OpenAITextGenerator", openai_cls)


def test_active_configs_ordered_by_priority(monkeypatch, settings):
    _stub_providers(monkeypatch)
    now = utcnow()
    configs = [
        ApiConfiguration(name="backup", provider="gemini", api_key="g", model="gemini-1.5-flash", priority=2),
        ApiConfiguration(name="off", provider="gemini", api_key="x", model="gemini-1.5-pro", priority=1, is_active=False),
        ApiConfiguration(name="primary", provider="openai", api_key="o", model="gpt-4o", priority=1, created_at=now),
        ApiConfiguration(name="primary-2", provider="openai", api_key="o2", model="gpt-4o-mini", priority=1,
                         created_at=now + timedelta(seconds=1)),
    ]
    gens = llm.build_generators(configs, settings)
    assert [(g.provider, g.model) for g in gens] == [
        ("openai", "gpt-4o"), ("openai", "gpt-4o-mini"), ("gemini", "gemini-1.5-flash"),
    ]


def test_env_keys_used_without_configs(monkeypatch, settings):
    _stub_providers(monkeypatch)
    settings.gemini_api_key = "g-env"
    settings.openai_api_key = "o-env"
    gens = llm.build_generators([], settings)
    assert [(g.provider, g.model) for g in gens] == [("gemini", settings.gemini_model), ("openai", settings.openai_model)]


def test_unbuildable_config_is_skipped(monkeypatch, settings):
    _stub_providers(monkeypatch, openai_cls=_BrokenStub)
    configs = [
        ApiConfiguration(name="broken", provider="openai", api_key="o", model="gpt-4o", priority=1),
        ApiConfiguration(name="ok", provider="gemini", api_key="g", model="gemini-2.0-flash", priority=2),
    ]
    gens = llm.build_generators(configs, settings)
    assert [g.provider for g in gens] == ["gemini"]


def test_nothing_configured_means_no_generators(settings):
    assert llm.build_generators([], settings) == []


# ---- provider adapters against fake SDK clients ----

class _GeminiModels:
    def __init__(self, reply):
        self.reply = reply
        self.calls = []

    def generate_content(self, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "temperature": config.temperature})
        if isinstance(self.reply, Exception):
            raise self.reply
        return SimpleNamespace(text=self.reply)


class _GeminiClient:
    last = None

    def __init__(self, api_key):
        self.api_key = api_key
        self.models = _GeminiModels(_GeminiClient.reply)
        _GeminiClient.last = self


class _OpenAICompletions:
    def __init__(self, reply):
        self.reply = reply
        self.calls = []

    def create(self, model, messages, temperature):
        self.calls.append({"model": model, "messages": messages, "temperature": temperature})
        if isinstance(self.reply, Exception):
            raise self.reply
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.reply))])


class _OpenAIClient:
    last = None

    def __init__(self, api_key):
        self.api_key = api_key
        self.chat = SimpleNamespace(completions=_OpenAICompletions(_OpenAIClient.reply))
        _OpenAIClient.last = self


def _gemini(monkeypatch, reply):
    _GeminiClient.reply = reply
    monkeypatch.setattr(llm.genai, "Client", _GeminiClient)
    return llm.GeminiTextGenerator("g-key", "gemini-2.0-flash", temperature=0.7)


def _openai(monkeypatch, reply):
    _OpenAIClient.reply = reply
    monkeypatch.setattr(llm, "OpenAI", _OpenAIClient)
    return llm.OpenAITextGenerator("o-key", "gpt-4o-mini", temperature=0.7)


def test_gemini_returns_stripped_text(monkeypatch):
    gen = _gemini(monkeypatch, "  Great coffee and quick service.\n")
    assert gen.generate("write a review") == "Great coffee and quick service."
    call = _GeminiClient.last.models.calls[0]
    assert call == {"model": "gemini-2.0-flash", "contents": "write a review", "temperature": 0.7}
    assert _GeminiClient.last.api_key == "g-key"


@pytest.mark.parametrize("reply", ["", "   ", None, RuntimeError("429 quota exceeded")])
def test_gemini_failures_become_llm_error(monkeypatch, reply):
    gen = _gemini(monkeypatch, reply)
    with pytest.raises(LLMError):
        gen.generate("write a review")


def test_openai_returns_stripped_text(monkeypatch):
    gen = _openai(monkeypatch, '"Friendly staff."  ')
    assert gen.generate("write a review") == '"Friendly staff."'
    call = _OpenAIClient.last.chat.completions.calls[0]
    assert call["model"] == "gpt-4o-mini"
    assert call["temperature"] == 0.7
    assert call["messages"][-1] == {"role": "user", "content": "write a review"}


@pytest.mark.parametrize("reply", ["", None, ConnectionError("connection reset")])
def test_openai_failures_become_llm_error(monkeypatch, reply):
    gen = _openai(monkeypatch, reply)
    with pytest.raises(LLMError):
        gen.generate("write a review")


def test_client_construction_failure_becomes_llm_error(monkeypatch):
    def broken(api_key):
        raise ValueError("malformed key")

    monkeypatch.setattr(llm, "OpenAI", broken)
    with pytest.raises(LLMError):
        llm.OpenAITextGenerator("bad", "gpt-4o-mini")


def test_unknown_provider():
    with pytest.raises(LLMError):
        llm.build_generator("claude", "k", "m", 0.9)
