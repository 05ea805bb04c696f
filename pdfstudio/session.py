"""
PDF Studio — Session State
===========================
Explicit, per-tab state container: one document, its extracted text and at
most one artifact per kind, plus the interaction state of each view.

  • Each kind is an independent   empty → generating → ready   machine
  • Every generation attempt gets a per-kind, monotonically increasing token;
    a response whose token is not the latest one is discarded
  • A failed generation never touches the artifact currently shown
"""

import logging
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from pdfstudio.core.errors import UsageError
from pdfstudio.schemas.mindmap import MindMapArtifact
from pdfstudio.schemas.outline import OutlineArtifact, OutlineNode
from pdfstudio.schemas.quiz import QuizArtifact, QuizQuestion
from pdfstudio.services.artifact_parser import Artifact
from pdfstudio.services.export_service import (
    EXTRACTED_TEXT_FILENAME,
    MINDMAP_FILENAME,
    OUTLINE_FILENAME,
    format_mindmap,
    format_outline,
)
from pdfstudio.services.file_service import ExtractedText
from pdfstudio.services.generator import generate_artifact
from pdfstudio.services.llm_service import ModelInvoker
from pdfstudio.services.prompts import ArtifactKind

logger = logging.getLogger(__name__)

ZOOM_MIN = 0.5
ZOOM_MAX = 2.0
ZOOM_STEP = 0.2


class Status(str, Enum):
    empty = "empty"
    generating = "generating"
    ready = "ready"


class OptionState(str, Enum):
    neutral = "neutral"
    selected = "selected"
    correct = "correct"
    incorrect = "incorrect"


class Document(BaseModel):
    """The uploaded file. Immutable; dropped on reset."""
    model_config = ConfigDict(frozen=True)

    file_name: str
    content: bytes


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# VIEW STATE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class QuizView(BaseModel):
    """Answers are overwritable until submit(); afterwards they are frozen."""
    questions: List[QuizQuestion]
    answers: Dict[int, int] = Field(default_factory=dict)
    submitted: bool = False
    score: Optional[int] = None

    @property
    def total(self) -> int:
        return len(self.questions)

    def select(self, question_index: int, option_index: int) -> bool:
        if self.submitted:
            return False
        self._check_question(question_index)
        if not 0 <= option_index < len(self.questions[question_index].options):
            raise UsageError(f"No option {option_index} for question {question_index}")
        self.answers[question_index] = option_index
        return True

    def submit(self) -> int:
        if self.submitted:
            return self.score
        if len(self.answers) < self.total:
            raise UsageError("Answer all questions before submitting.")

        self.score = sum(
            1 for i, q in enumerate(self.questions) if self.answers.get(i) == q.correct_answer
        )
        self.submitted = True
        return self.score

    def _check_question(self, question_index: int) -> None:
        if not 0 <= question_index < self.total:
            raise UsageError(f"No question at index {question_index}")

    @property
    def percentage(self) -> int:
        """Rounded accuracy of the submitted quiz; 0 before submit or with no questions."""
        if not self.submitted or not self.total:
            return 0
        return round(self.score / self.total * 100)

    def question_correct(self, question_index: int) -> Optional[bool]:
        """Per-question mark after submit; None while still answering."""
        self._check_question(question_index)
        if not self.submitted:
            return None
        return self.answers.get(question_index) == self.questions[question_index].correct_answer

    def option_state(self, question_index: int, option_index: int) -> OptionState:
        # An out-of-range correct_answer highlights nothing as correct.
        self._check_question(question_index)
        chosen = self.answers.get(question_index) == option_index
        if not self.submitted:
            return OptionState.selected if chosen else OptionState.neutral
        if option_index == self.questions[question_index].correct_answer:
            return OptionState.correct
        return OptionState.incorrect if chosen else OptionState.neutral


def outline_keys(nodes: List[OutlineNode], prefix: str = "") -> List[Tuple[str, OutlineNode]]:
    """Depth-first (key, node) pairs; key = parent key + local index, '-'-joined."""
    pairs = []
    for index, node in enumerate(nodes):
        key = f"{prefix}{index}"
        pairs.append((key, node))
        pairs.extend(outline_keys(node.children, f"{key}-"))
    return pairs


class OutlineView(BaseModel):
    nodes: List[OutlineNode]
    expanded: Set[str] = Field(default_factory=set)

    @classmethod
    def fully_expanded(cls, nodes: List[OutlineNode]) -> "OutlineView":
        return cls(nodes=nodes, expanded={key for key, _ in outline_keys(nodes)})

    def _node(self, key: str) -> OutlineNode:
        for node_key, node in outline_keys(self.nodes):
            if node_key == key:
                return node
        raise UsageError(f"No outline node with key '{key}'")

    def is_expanded(self, key: str) -> bool:
        return key in self.expanded

    def toggle(self, key: str) -> bool:
        """Flip one branch node. Leaves are a no-op (returns False)."""
        if not self._node(key).children:
            return False
        self.expanded ^= {key}
        return True

    def visible_keys(self) -> List[str]:
        visible: List[str] = []

        def walk(nodes: List[OutlineNode], prefix: str) -> None:
            for index, node in enumerate(nodes):
                key = f"{prefix}{index}"
                visible.append(key)
                if node.children and key in self.expanded:
                    walk(node.children, f"{key}-")

        walk(self.nodes, "")
        return visible


class MindMapView(BaseModel):
    zoom: float = 1.0

    def zoom_in(self) -> float:
        self.zoom = round(min(self.zoom + ZOOM_STEP, ZOOM_MAX), 2)
        return self.zoom

    def zoom_out(self) -> float:
        self.zoom = round(max(self.zoom - ZOOM_STEP, ZOOM_MIN), 2)
        return self.zoom

    def reset_zoom(self) -> float:
        self.zoom = 1.0
        return self.zoom

    def transform(self) -> str:
        return f"scale({self.zoom})"


View = Union[QuizView, OutlineView, MindMapView]

_ARTIFACT_TYPES = {
    ArtifactKind.quiz: QuizArtifact,
    ArtifactKind.outline: OutlineArtifact,
    ArtifactKind.mindmap: MindMapArtifact,
}


def _fresh_view(artifact: Artifact) -> View:
    if isinstance(artifact, QuizArtifact):
        return QuizView(questions=artifact.questions)
    if isinstance(artifact, OutlineArtifact):
        return OutlineView.fully_expanded(artifact.outline)
    return MindMapView()


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# SESSION
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ArtifactSlot(BaseModel):
    kind: ArtifactKind
    status: Status = Status.empty
    artifact: Optional[Artifact] = None
    view: Optional[View] = None
    request_id: int = 0
    last_error: Optional[str] = None


class SessionState(BaseModel):
    document: Optional[Document] = None
    extracted: Optional[ExtractedText] = None
    slots: Dict[ArtifactKind, ArtifactSlot] = Field(
        default_factory=lambda: {kind: ArtifactSlot(kind=kind) for kind in ArtifactKind}
    )

    # ── Document lifecycle ───────────────────────────────────────────────────

    def load_document(self, document: Document) -> None:
        self.reset()
        self.document = document
        logger.info(f"[SESSION] Loaded {document.file_name} ({len(document.content)} bytes)")

    def set_extracted_text(self, extracted: ExtractedText) -> None:
        self.extracted = extracted

    def reset(self) -> None:
        """Back to the upload screen. In-flight responses become stale."""
        self.document = None
        self.extracted = None
        for slot in self.slots.values():
            slot.request_id += 1
            slot.status = Status.empty
            slot.artifact = None
            slot.view = None
            slot.last_error = None

    @property
    def text(self) -> str:
        return self.extracted.text if self.extracted else ""

    # ── Accessors ────────────────────────────────────────────────────────────

    def slot(self, kind: ArtifactKind | str) -> ArtifactSlot:
        return self.slots[ArtifactKind(kind)]

    def quiz(self) -> Optional[QuizView]:
        return self.slot(ArtifactKind.quiz).view

    def outline(self) -> Optional[OutlineView]:
        return self.slot(ArtifactKind.outline).view

    def mindmap(self) -> Optional[MindMapView]:
        return self.slot(ArtifactKind.mindmap).view

    # ── Generation transitions ───────────────────────────────────────────────

    def begin_generation(self, kind: ArtifactKind | str) -> int:
        slot = self.slot(kind)
        if not self.text.strip():
            raise UsageError("No text available. Upload and extract a PDF first.")
        if slot.status == Status.generating:
            raise UsageError(f"{slot.kind.value} generation already in progress.")

        slot.request_id += 1
        slot.status = Status.generating
        slot.last_error = None
        return slot.request_id

    def complete_generation(self, kind: ArtifactKind | str, token: int, artifact: Artifact) -> bool:
        slot = self.slot(kind)
        if token != slot.request_id:
            logger.info(f"[SESSION] Discarding stale {slot.kind.value} response (#{token})")
            return False
        if not isinstance(artifact, _ARTIFACT_TYPES[slot.kind]):
            raise TypeError(f"Expected {_ARTIFACT_TYPES[slot.kind].__name__}, got {type(artifact).__name__}")

        slot.artifact = artifact
        slot.view = _fresh_view(artifact)
        slot.status = Status.ready
        return True

    def fail_generation(self, kind: ArtifactKind | str, token: int, error: Exception) -> bool:
        slot = self.slot(kind)
        if token != slot.request_id:
            logger.info(f"[SESSION] Discarding stale {slot.kind.value} failure (#{token})")
            return False

        slot.last_error = str(error)
        slot.status = Status.ready if slot.artifact is not None else Status.empty
        logger.warning(f"[SESSION] ✗ {slot.kind.value} generation failed: {error}")
        return True

    async def run_generation(
        self,
        kind: ArtifactKind | str,
        invoke: Optional[ModelInvoker] = None,
    ) -> bool:
        """
        begin → generate → complete / fail. Failures are re-raised for the
        caller to surface; returns False when the response (or failure) came
        back stale.
        """
        kind = ArtifactKind(kind)
        token = self.begin_generation(kind)
        try:
            artifact = await generate_artifact(kind, self.text, invoke)
        except Exception as e:
            if not self.fail_generation(kind, token, e):
                return False
            raise
        return self.complete_generation(kind, token, artifact)

    # ── Downloads ────────────────────────────────────────────────────────────

    def export_extracted_text(self) -> Tuple[str, str]:
        if not self.extracted:
            raise UsageError("No text available.")
        return EXTRACTED_TEXT_FILENAME, self.extracted.text

    def export_outline(self) -> Tuple[str, str]:
        slot = self.slot(ArtifactKind.outline)
        if slot.artifact is None:
            raise UsageError("No outline generated yet.")
        return OUTLINE_FILENAME, format_outline(slot.artifact.outline)

    def export_mindmap(self) -> Tuple[str, str]:
        slot = self.slot(ArtifactKind.mindmap)
        if slot.artifact is None:
            raise UsageError("No mind map generated yet.")
        return MINDMAP_FILENAME, format_mindmap(slot.artifact.mind_map)
