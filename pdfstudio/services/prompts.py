"""
PDF Studio — Prompt Builder
============================
Turns extracted document text into one instruction prompt per artifact kind.
Pure functions: same (kind, text) in, same prompt out.
"""

from enum import Enum

from pydantic import BaseModel, model_validator

from pdfstudio.core.config import settings
from pdfstudio.core.errors import UsageError


class ArtifactKind(str, Enum):
    quiz = "quiz"
    outline = "outline"
    mindmap = "mindmap"


# Hard ceiling on the source handed to the model; SOURCE_TEXT_LIMIT may only lower it.
MAX_SOURCE_TEXT = 8000

# Top-level JSON key the model must answer with, per kind.
TOP_LEVEL_KEYS = {
    ArtifactKind.quiz: "questions",
    ArtifactKind.outline: "outline",
    ArtifactKind.mindmap: "mindMap",
}


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# TEMPLATES — GROUNDED + STRICT JSON
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

_GROUNDING = (
    "CRITICAL RULES:\n"
    "1. Base everything strictly on the provided document text.\n"
    "2. Do NOT use any external knowledge or invent facts.\n"
    "3. Write in the SAME language as the source text.\n"
    "4. Output ONLY valid JSON — no markdown fences, no commentary.\n\n"
)

QUIZ_TEMPLATE = (
    _GROUNDING +
    "Generate EXACTLY 5 multiple-choice questions from the text below. "
    "Each question has EXACTLY 4 options and exactly 1 correct answer.\n"
    "Requirements:\n"
    "1. Questions test understanding of the text content.\n"
    "2. Wrong options must be plausible.\n"
    "3. Give a short explanation for every answer.\n"
    "4. correctAnswer is the 0-based index (0-3) of the correct option.\n\n"
    "Output MUST be valid JSON matching this EXACT schema:\n"
    "{\n"
    '  "questions": [\n'
    "    {\n"
    '      "question": "...",\n'
    '      "options": ["...", "...", "...", "..."],\n'
    '      "correctAnswer": 0,\n'
    '      "explanation": "..."\n'
    "    }\n"
    "  ]\n"
    "}\n"
)

OUTLINE_TEMPLATE = (
    _GROUNDING +
    "Build a structured outline of the text below.\n"
    "Requirements:\n"
    "1. Extract the main topics and their sub-topics.\n"
    "2. The hierarchy is at most 3 levels deep (level 1, 2 or 3).\n"
    "3. Every title is short and clear.\n\n"
    "Output MUST be valid JSON matching this EXACT schema:\n"
    "{\n"
    '  "outline": [\n'
    "    {\n"
    '      "title": "...",\n'
    '      "level": 1,\n'
    '      "children": [\n'
    "        {\n"
    '          "title": "...",\n'
    '          "level": 2,\n'
    '          "children": [\n'
    '            {"title": "...", "level": 3}\n'
    "          ]\n"
    "        }\n"
    "      ]\n"
    "    }\n"
    "  ]\n"
    "}\n"
)

MINDMAP_TEMPLATE = (
    _GROUNDING +
    "Build a mind map of the text below.\n"
    "Requirements:\n"
    "1. The core topic of the text is the root node.\n"
    "2. Identify 2-5 main branches under the root.\n"
    "3. Each branch may have child nodes, at most 2 levels below the root.\n"
    "4. Labels are concise: no more than 15 characters.\n"
    "5. Every id is unique within the tree.\n\n"
    "Output MUST be valid JSON matching this EXACT schema:\n"
    "{\n"
    '  "mindMap": {\n'
    '    "id": "root",\n'
    '    "label": "...",\n'
    '    "children": [\n'
    "      {\n"
    '        "id": "branch1",\n'
    '        "label": "...",\n'
    '        "children": [\n'
    '          {"id": "branch1-1", "label": "..."}\n'
    "        ]\n"
    "      }\n"
    "    ]\n"
    "  }\n"
    "}\n"
)

TEMPLATES = {
    ArtifactKind.quiz: QUIZ_TEMPLATE,
    ArtifactKind.outline: OUTLINE_TEMPLATE,
    ArtifactKind.mindmap: MINDMAP_TEMPLATE,
}


class ArtifactRequest(BaseModel):
    """One generation attempt: the kind plus the (already truncated) source."""
    kind: ArtifactKind
    source_text: str

    @model_validator(mode="after")
    def check_length(self) -> "ArtifactRequest":
        if len(self.source_text) > MAX_SOURCE_TEXT:
            raise ValueError(f"source_text exceeds {MAX_SOURCE_TEXT} characters")
        return self

    def render(self) -> str:
        return f"{TEMPLATES[self.kind]}\nSOURCE TEXT:\n{self.source_text}"


def truncate_source(text: str, limit: int | None = None) -> str:
    """Prefix cut to `limit` characters (no-op when shorter), never above MAX_SOURCE_TEXT."""
    limit = min(limit or settings.SOURCE_TEXT_LIMIT, MAX_SOURCE_TEXT)
    return text[:limit]


def build_request(kind: ArtifactKind | str, source_text: str | None) -> ArtifactRequest:
    source = truncate_source(source_text or "")
    if not source.strip():
        raise UsageError("No text available. Upload and extract a PDF first.")
    return ArtifactRequest(kind=ArtifactKind(kind), source_text=source)


def build_prompt(kind: ArtifactKind | str, source_text: str | None) -> str:
    """Render the kind-specific instruction prompt around the truncated text."""
    return build_request(kind, source_text).render()
