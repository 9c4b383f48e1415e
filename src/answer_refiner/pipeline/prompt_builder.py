"""Prompt Builder: composes the single instruction prompt for the generator."""

from __future__ import annotations

from answer_refiner.models.profile import ContextBlock
from answer_refiner.models.request import RefinementRequest
from answer_refiner.pipeline.styles import get_style

ROLE_FRAMING = """\
You are an expert grant and investor application writer. You rewrite founders' \
answers to application questions so they are accurate, specific and compelling, \
using only facts present in the original answer and the startup context."""

OUTPUT_FORMAT = """\
OUTPUT FORMAT:
Return ONLY the rewritten answer text.
- No preamble, headings, labels or explanations
- No markdown code fences
- No quotation marks around the answer"""


def constraint_clause(request: RefinementRequest) -> str:
    limit = request.limit_object
    return f"""\
HARD CONSTRAINTS:
1. The rewritten answer MUST NOT exceed {limit.value} {limit.type}.
2. This limit is non-negotiable; a longer answer will be rejected.
3. Keep the meaning and factual content of the original answer."""


def style_section(style_key: str) -> str:
    style = get_style(style_key)
    rules = "\n".join(f"- {rule}" for rule in style.illustrative_rules)
    return f"""\
REFINEMENT STYLE: {style.name}
{style.description}

Instructions:
{style.instruction_text}

Rules:
{rules}"""


def build_prompt(request: RefinementRequest, context: ContextBlock) -> str:
    """Compose the refinement prompt.

    The context section is left out entirely when there is no context.
    """
    sections = [ROLE_FRAMING]
    if not context.is_empty:
        sections.append(f"STARTUP CONTEXT:\n{context.text}")
    sections.append(f"QUESTION:\n{request.question_context}")
    sections.append(f"ORIGINAL ANSWER:\n{request.original_answer}")
    sections.append(style_section(request.refinement_style))
    sections.append(constraint_clause(request))
    sections.append(OUTPUT_FORMAT)
    return "\n\n".join(sections)
