from __future__ import annotations
from pydantic import BaseModel, Field, StrictInt, StrictStr, field_validator
from typing import List


class OutlineNode(BaseModel):
    """A single outline entry (recursive). `level` is passed through as received."""
    title: StrictStr
    level: StrictInt
    children: List[OutlineNode] = Field(default_factory=list)

    @field_validator("children", mode="before")
    @classmethod
    def _null_children(cls, v):
        return [] if v is None else v


class OutlineArtifact(BaseModel):
    """A forest of top-level outline entries."""
    outline: List[OutlineNode]
