from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator
from typing import List


class MindMapNode(BaseModel):
    """A single node in the mind map tree (recursive)."""
    id: StrictStr
    label: StrictStr
    children: List[MindMapNode] = Field(default_factory=list)

    @field_validator("children", mode="before")
    @classmethod
    def _null_children(cls, v):
        return [] if v is None else v


class MindMapArtifact(BaseModel):
    """Single-rooted mind map, serialised under the `mindMap` key."""
    model_config = ConfigDict(populate_by_name=True)

    mind_map: MindMapNode = Field(..., alias="mindMap")
