"""Pydantic models for measurements and the refinement result."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from answer_refiner.models.request import LimitObject, LimitType


class TextMeasurement(BaseModel):
    words: int
    characters: int


class LengthValidation(BaseModel):
    is_valid: bool = Field(alias="isValid")
    current: int
    limit: int
    type: LimitType
    was_truncated: bool = False

    model_config = {"populate_by_name": True}


class RefinementResult(BaseModel):
    original_text: str
    refined_text: str
    refinement_style: str
    question_context: str
    limit_object: LimitObject
    original_counts: TextMeasurement
    final_counts: TextMeasurement
    validation: LengthValidation
    metadata: dict[str, Any] = {}  # model, tokens, cost, timings

    def to_response(self) -> dict:
        """Render the ``{success, data}`` body returned to HTTP callers."""
        return {"success": True, "data": self.model_dump(by_alias=True)}
