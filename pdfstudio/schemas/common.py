"""
Request / response envelopes for the HTTP surface.
Every failure is returned as ErrorResponse.
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from pdfstudio.schemas.mindmap import MindMapNode
from pdfstudio.schemas.outline import OutlineNode


# ── Requests ─────────────────────────────────────────────────────────────────

class GenerateRequest(BaseModel):
    """Body for the three generate-* routes. Emptiness is checked by the route."""
    text: Optional[str] = Field(default=None, description="Extracted document text")


class ExportTextRequest(BaseModel):
    text: Optional[str] = None


class ExportOutlineRequest(BaseModel):
    outline: List[OutlineNode] = Field(default_factory=list)


class ExportMindMapRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    mind_map: Optional[MindMapNode] = Field(default=None, alias="mindMap")


# ── Responses ────────────────────────────────────────────────────────────────

class ExtractResponse(BaseModel):
    """Result of POST /extract-text."""
    text: str
    pages: int


class ErrorResponse(BaseModel):
    """Standard error envelope."""
    error: str
    detail: Optional[str] = None
