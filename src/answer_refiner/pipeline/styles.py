"""Refinement style templates.

Styles are data: adding one means adding an entry to ``_TEMPLATES``.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class StyleTemplate:
    name: str
    description: str
    instruction_text: str
    illustrative_rules: tuple[str, ...]


_TEMPLATES = {
    "professional": StyleTemplate(
        name="Professional",
        description="Polished, formal tone suited to grant committees and investors.",
        instruction_text=(
            "Rewrite the answer in a clear, formal and credible voice. Keep every "
            "factual claim from the original and present it with confidence."
        ),
        illustrative_rules=(
            "Use complete sentences and precise vocabulary",
            "Avoid slang, hype words and exclamation marks",
            "Lead with the most important point",
            "Refer to the startup in the first person plural (we, our)",
        ),
    ),
    "concise": StyleTemplate(
        name="Concise",
        description="Shortest faithful version of the answer.",
        instruction_text=(
            "Compress the answer to its essential message. Remove repetition, "
            "filler and qualifiers while keeping the key facts and numbers."
        ),
        illustrative_rules=(
            "One idea per sentence",
            "Prefer short, common words over long ones",
            "Drop introductory phrases such as 'We believe that'",
            "Keep concrete figures; cut vague adjectives",
        ),
    ),
    "persuasive": StyleTemplate(
        name="Persuasive",
        description="Compelling answer that argues why the startup deserves support.",
        instruction_text=(
            "Rewrite the answer to convince the reviewer. Frame the problem as "
            "urgent, the solution as credible and the team as the right one to "
            "deliver it, without inventing facts."
        ),
        illustrative_rules=(
            "Open with the strongest claim or result",
            "Tie benefits to the funder's likely goals",
            "Use active voice and confident verbs",
            "End with a clear statement of impact",
        ),
    ),
    "storytelling": StyleTemplate(
        name="Storytelling",
        description="Narrative answer built around a customer or founder story.",
        instruction_text=(
            "Turn the answer into a short narrative: the situation, the struggle, "
            "what the startup did about it and what changed as a result."
        ),
        illustrative_rules=(
            "Start from a concrete moment or person",
            "Show the problem before the solution",
            "Keep the narrative grounded in facts from the original answer",
            "Close on the outcome or the vision",
        ),
    ),
    "data_driven": StyleTemplate(
        name="Data-driven",
        description="Evidence-first answer that foregrounds metrics and traction.",
        instruction_text=(
            "Rewrite the answer so that measurable evidence carries the argument. "
            "Surface every number, metric and milestone available in the original "
            "answer and the startup context."
        ),
        illustrative_rules=(
            "Put figures early in sentences",
            "Quantify outcomes wherever the source material allows",
            "Never fabricate or estimate numbers that are not given",
            "Use comparisons (before/after, growth rates) when supported",
        ),
    ),
}

STYLE_TEMPLATES = MappingProxyType(_TEMPLATES)


def list_style_keys() -> list[str]:
    return sorted(STYLE_TEMPLATES)


def get_style(key: str) -> StyleTemplate:
    """Look up a style; raises KeyError for unknown keys."""
    return STYLE_TEMPLATES[key]
