"""HTTP surface tests via FastAPI's TestClient (model calls are faked)."""

from __future__ import annotations

import io
import json

from pdfstudio.core.errors import ProviderError

QUIZ_RESPONSE = (
    '{"questions":[{"question":"Q1","options":["a","b","c","d"],"correctAnswer":1,"explanation":"e"}]}'
)


def _upload(client, content: bytes, filename: str = "test.pdf", content_type: str = "application/pdf"):
    files = {"file": (filename, io.BytesIO(content), content_type)}
    return client.post("/extract-text", files=files)


def test_health(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["status"] == "operational"


# ── /extract-text ────────────────────────────────────────────────────────────

def test_extract_text(client, make_pdf):
    r = _upload(client, make_pdf("Hello world"))
    assert r.status_code == 200, r.text
    assert r.json() == {"text": "Hello world", "pages": 1}


def test_extract_text_missing_file(client):
    r = client.post("/extract-text")
    assert r.status_code == 400
    assert "error" in r.json()


def test_extract_text_wrong_field_name(client, make_pdf):
    files = {"document": ("test.pdf", io.BytesIO(make_pdf("x")), "application/pdf")}
    r = client.post("/extract-text", files=files)
    assert r.status_code == 400


def test_extract_text_invalid_pdf(client):
    r = _upload(client, b"this is not a pdf at all")
    assert r.status_code == 500
    body = r.json()
    assert body["error"] == "Text extraction failed, please retry."


def test_extract_text_non_pdf_type(client):
    r = _upload(client, b"hello", filename="notes.txt", content_type="text/plain")
    assert r.status_code == 400


# ── /generate-* ──────────────────────────────────────────────────────────────

def test_generate_quiz(client, fake_model):
    fake_model.response = QUIZ_RESPONSE
    r = client.post("/generate-quiz", json={"text": "Hello world"})
    assert r.status_code == 200, r.text
    assert r.json() == json.loads(QUIZ_RESPONSE)
    assert len(fake_model.calls) == 1


def test_generate_outline(client, fake_model):
    fake_model.response = '{"outline":[{"title":"A","level":1,"children":[{"title":"B","level":2}]}]}'
    r = client.post("/generate-outline", json={"text": "Hello world"})
    assert r.status_code == 200, r.text
    outline = r.json()["outline"]
    assert outline[0]["title"] == "A"
    assert outline[0]["children"][0]["title"] == "B"


def test_generate_mindmap(client, fake_model):
    fake_model.response = '{"mindMap":{"id":"root","label":"R","children":[{"id":"b1","label":"B"}]}}'
    r = client.post("/generate-mindmap", json={"text": "Hello world"})
    assert r.status_code == 200, r.text
    assert r.json()["mindMap"]["children"][0]["id"] == "b1"


def test_generate_empty_text_makes_no_model_call(client, fake_model):
    for route in ("/generate-quiz", "/generate-outline", "/generate-mindmap"):
        assert client.post(route, json={"text": ""}).status_code == 400
        assert client.post(route, json={}).status_code == 400
    assert fake_model.calls == []


def test_generate_malformed_output(client, fake_model):
    fake_model.response = "I am not JSON"
    r = client.post("/generate-quiz", json={"text": "Hello world"})
    assert r.status_code == 500
    assert r.json()["error"] == "Generation failed, please retry."


def test_generate_wrong_top_level_key(client, fake_model):
    fake_model.response = '{"questions": []}'
    r = client.post("/generate-mindmap", json={"text": "Hello world"})
    assert r.status_code == 500


def test_generate_provider_failure(client, fake_model):
    fake_model.error = ProviderError("All AI providers failed")
    r = client.post("/generate-outline", json={"text": "Hello world"})
    assert r.status_code == 500
    assert r.json()["detail"] == "All AI providers failed"


def test_long_text_truncated_before_model(client, fake_model):
    fake_model.response = '{"questions": []}'
    client.post("/generate-quiz", json={"text": "a" * 8000 + "b" * 100})
    prompt = fake_model.calls[0]
    assert "a" * 8000 in prompt
    assert "b" not in prompt.split("SOURCE TEXT:\n", 1)[1]


# ── /export/* ────────────────────────────────────────────────────────────────

def test_export_extracted_text(client):
    r = client.post("/export/extracted-text", json={"text": "Hello world"})
    assert r.status_code == 200
    assert r.text == "Hello world"
    assert 'filename="extracted-text.txt"' in r.headers["content-disposition"]


def test_export_outline(client):
    body = {"outline": [{"title": "A", "level": 1, "children": [{"title": "B", "level": 2}]}]}
    r = client.post("/export/outline", json=body)
    assert r.status_code == 200
    assert r.text == "• A\n  ◦ B\n"
    assert 'filename="outline.txt"' in r.headers["content-disposition"]


def test_export_outline_empty(client):
    assert client.post("/export/outline", json={"outline": []}).status_code == 400


def test_export_mindmap(client):
    body = {"mindMap": {"id": "root", "label": "R", "children": [{"id": "b", "label": "B"}]}}
    r = client.post("/export/mindmap", json=body)
    assert r.status_code == 200
    assert r.text == "R\n  - B\n"
    assert 'filename="mindmap.txt"' in r.headers["content-disposition"]


def test_export_mindmap_empty(client):
    assert client.post("/export/mindmap", json={}).status_code == 400


# ── End-to-end ───────────────────────────────────────────────────────────────

def test_upload_then_quiz_end_to_end(client, fake_model, make_pdf):
    extracted = _upload(client, make_pdf("Hello world")).json()
    assert len(extracted["text"]) == 11
    assert extracted["pages"] == 1

    fake_model.response = QUIZ_RESPONSE
    quiz = client.post("/generate-quiz", json={"text": extracted["text"]}).json()

    selected = {0: 1}
    score = sum(1 for i, q in enumerate(quiz["questions"]) if selected[i] == q["correctAnswer"])
    assert (score, len(quiz["questions"])) == (1, 1)
