"""Pydantic models for incoming refinement requests."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

LimitType = Literal["words", "characters"]


class LimitObject(BaseModel):
    type: LimitType
    value: int = Field(gt=0)


class RefinementRequest(BaseModel):
    """A validated request to rewrite an answer under a hard length limit."""

    original_answer: str
    refinement_style: str
    question_context: str
    limit_object: LimitObject
