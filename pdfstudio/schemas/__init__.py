from pdfstudio.schemas.quiz import QuizArtifact, QuizQuestion
from pdfstudio.schemas.outline import OutlineArtifact, OutlineNode
from pdfstudio.schemas.mindmap import MindMapArtifact, MindMapNode
from pdfstudio.schemas.common import (
    ErrorResponse,
    ExportMindMapRequest,
    ExportOutlineRequest,
    ExportTextRequest,
    ExtractResponse,
    GenerateRequest,
)

__all__ = [
    "QuizArtifact",
    "QuizQuestion",
    "OutlineArtifact",
    "OutlineNode",
    "MindMapArtifact",
    "MindMapNode",
    "ErrorResponse",
    "ExportMindMapRequest",
    "ExportOutlineRequest",
    "ExportTextRequest",
    "ExtractResponse",
    "GenerateRequest",
]
