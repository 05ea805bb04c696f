"""Shared pytest fixtures for the PDF Studio test suite."""

from __future__ import annotations

import fitz  # PyMuPDF
import pytest
from fastapi.testclient import TestClient

from pdfstudio.main import app
from pdfstudio.services.llm_service import get_model_invoker


class FakeModel:
    """Stands in for the provider: records prompts, returns a canned completion."""

    def __init__(self, response: str = "{}"):
        self.response = response
        self.error: Exception | None = None
        self.calls: list[str] = []

    async def __call__(self, prompt: str) -> str:
        self.calls.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def fake_model():
    """Route every generate-* request to a FakeModel instead of Groq/Gemini."""
    model = FakeModel()
    app.dependency_overrides[get_model_invoker] = lambda: model
    yield model
    app.dependency_overrides.pop(get_model_invoker, None)


@pytest.fixture
def make_pdf():
    """Build an in-memory PDF with one page per argument (None = blank page)."""

    def _make(*pages: str | None) -> bytes:
        doc = fitz.open()
        for text in pages or (None,):
            page = doc.new_page()
            if text:
                page.insert_text((72, 72), text)
        data = doc.tobytes()
        doc.close()
        return data

    return _make
