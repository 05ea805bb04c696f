"""Tests for provider selection and failure handling (providers are faked)."""

from __future__ import annotations

import asyncio

import pytest

import pdfstudio.services.llm_service as llm_mod
from pdfstudio.core.config import settings
from pdfstudio.core.errors import ProviderError


class Recorder:
    def __init__(self, name: str, result: str | None = None, error: Exception | None = None):
        self.name = name
        self.result = result
        self.error = error
        self.calls = 0

    async def __call__(self, prompt: str) -> str:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def providers(monkeypatch):
    groq = Recorder("groq", result='{"from": "groq"}')
    gemini = Recorder("gemini", result='{"from": "gemini"}')
    monkeypatch.setattr(llm_mod, "_call_groq", groq)
    monkeypatch.setattr(llm_mod, "_call_gemini", gemini)
    return groq, gemini


def test_single_provider_mode(providers, monkeypatch):
    groq, gemini = providers
    monkeypatch.setattr(settings, "AI_PROVIDER", "gemini")
    assert asyncio.run(llm_mod.complete("p")) == '{"from": "gemini"}'
    assert (groq.calls, gemini.calls) == (0, 1)


def test_single_attempt_no_retry(providers, monkeypatch):
    groq, _ = providers
    groq.error = ConnectionError("network down")
    monkeypatch.setattr(settings, "AI_PROVIDER", "groq")
    with pytest.raises(ProviderError, match="network down"):
        asyncio.run(llm_mod.complete("p"))
    assert groq.calls == 1


def test_hybrid_falls_through_once(providers, monkeypatch):
    groq, gemini = providers
    groq.error = RuntimeError("rate limited")
    monkeypatch.setattr(settings, "AI_PROVIDER", "hybrid")
    assert asyncio.run(llm_mod.complete("p")) == '{"from": "gemini"}'
    assert (groq.calls, gemini.calls) == (1, 1)


def test_hybrid_all_failed(providers, monkeypatch):
    groq, gemini = providers
    groq.error = RuntimeError("a")
    gemini.error = RuntimeError("b")
    monkeypatch.setattr(settings, "AI_PROVIDER", "hybrid")
    with pytest.raises(ProviderError, match="All AI providers failed"):
        asyncio.run(llm_mod.complete("p"))


def test_empty_completion_is_provider_error(providers, monkeypatch):
    groq, _ = providers
    groq.result = "   "
    monkeypatch.setattr(settings, "AI_PROVIDER", "groq")
    with pytest.raises(ProviderError):
        asyncio.run(llm_mod.complete("p"))


def test_missing_groq_key(monkeypatch):
    monkeypatch.setattr(llm_mod, "groq_client", None)
    with pytest.raises(ProviderError, match="Groq API Key missing"):
        asyncio.run(llm_mod._call_groq("p"))


def test_missing_google_key(monkeypatch):
    monkeypatch.setattr(settings, "GOOGLE_API_KEY", None)
    with pytest.raises(ProviderError, match="Google API Key missing"):
        asyncio.run(llm_mod._call_gemini("p"))
