"""Response Assembler: packages the final refinement result."""

from __future__ import annotations

from typing import Any

from answer_refiner.models.request import RefinementRequest
from answer_refiner.models.result import RefinementResult
from answer_refiner.pipeline.length_enforcer import EnforcedText, measure


def assemble_result(
    request: RefinementRequest,
    enforced: EnforcedText,
    metadata: dict[str, Any] | None = None,
) -> RefinementResult:
    return RefinementResult(
        original_text=request.original_answer,
        refined_text=enforced.text,
        refinement_style=request.refinement_style,
        question_context=request.question_context,
        limit_object=request.limit_object,
        original_counts=measure(request.original_answer),
        final_counts=measure(enforced.text),
        validation=enforced.validation,
        metadata=metadata or {},
    )
