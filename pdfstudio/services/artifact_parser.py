"""
PDF Studio — Artifact Parser
=============================
Raw model text → QuizArtifact | OutlineArtifact | MindMapArtifact.

The model output is untrusted input:
  1. Strict json.loads of the whole string (fence stripping only when
     LENIENT_JSON is on)
  2. Top-level key + container type check for the requested kind
  3. Typed decode with pydantic; any wrong-shaped element fails closed

Field values are never normalised: an out-of-range correctAnswer, a 3-option
question or a level-7 outline node are passed through unchanged.
"""

import json
import re
import logging
from typing import Any, Iterator, Union

from pydantic import ValidationError

from pdfstudio.core.config import settings
from pdfstudio.core.errors import MalformedArtifactError
from pdfstudio.schemas.mindmap import MindMapArtifact, MindMapNode
from pdfstudio.schemas.outline import OutlineArtifact
from pdfstudio.schemas.quiz import QuizArtifact
from pdfstudio.services.prompts import TOP_LEVEL_KEYS, ArtifactKind

logger = logging.getLogger(__name__)

Artifact = Union[QuizArtifact, OutlineArtifact, MindMapArtifact]

_MODELS = {
    ArtifactKind.quiz: QuizArtifact,
    ArtifactKind.outline: OutlineArtifact,
    ArtifactKind.mindmap: MindMapArtifact,
}

_CONTAINERS = {
    ArtifactKind.quiz: list,
    ArtifactKind.outline: list,
    ArtifactKind.mindmap: dict,
}


# ── Helper: JSON Recovery (opt-in) ────────────────────────────────────────────

def _strip_to_json(raw_text: str) -> str:
    """
    Strip ```json fences and any prose around the outermost { ... } block.
    Only used when LENIENT_JSON is enabled.
    """
    cleaned = raw_text.strip()

    fence_match = re.search(r"```(?:json)?\s*\n?(.*?)\n?\s*```", cleaned, re.DOTALL)
    if fence_match:
        cleaned = fence_match.group(1).strip()

    if not cleaned.startswith("{"):
        brace_match = re.search(r"\{.*\}", cleaned, re.DOTALL)
        if brace_match:
            cleaned = brace_match.group(0)

    return cleaned


def _load_json(raw_text: str) -> Any:
    text = _strip_to_json(raw_text) if settings.LENIENT_JSON else raw_text
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        logger.error(f"[PARSER] JSON parse failed. Raw (first 500 chars): {str(raw_text)[:500]}")
        raise MalformedArtifactError(f"AI returned invalid JSON: {e}", raw=raw_text) from e


def _iter_ids(node: MindMapNode) -> Iterator[str]:
    yield node.id
    for child in node.children:
        yield from _iter_ids(child)


def _check_unique_ids(artifact: MindMapArtifact, raw_text: str) -> None:
    seen: set[str] = set()
    for node_id in _iter_ids(artifact.mind_map):
        if node_id in seen:
            raise MalformedArtifactError(f"Duplicate mind map node id: '{node_id}'", raw=raw_text)
        seen.add(node_id)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ENTRY POINT
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def parse_artifact(kind: ArtifactKind | str, raw_text: str) -> Artifact:
    """Decode raw model output into the typed artifact for `kind`."""
    kind = ArtifactKind(kind)
    parsed = _load_json(raw_text)

    key = TOP_LEVEL_KEYS[kind]
    container = _CONTAINERS[kind]
    if not isinstance(parsed, dict) or key not in parsed:
        raise MalformedArtifactError(f"Missing top-level key '{key}'", raw=raw_text)
    if not isinstance(parsed[key], container):
        raise MalformedArtifactError(
            f"Top-level key '{key}' must be a {'list' if container is list else 'object'}",
            raw=raw_text,
        )

    try:
        artifact = _MODELS[kind].model_validate({key: parsed[key]})
    except ValidationError as e:
        logger.error(f"[PARSER] {kind.value} failed shape validation: {e.error_count()} error(s)")
        raise MalformedArtifactError(f"AI returned a malformed {kind.value}: {e}", raw=raw_text) from e

    if isinstance(artifact, MindMapArtifact):
        _check_unique_ids(artifact, raw_text)

    return artifact
