"""Length measurement and the truncation backstop.

The generator is asked to respect the limit but is never trusted to: every
generated answer goes through ``enforce_length`` which measures it and, if
it is over budget, cuts it down to the boundary.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from answer_refiner.models.request import LimitObject
from answer_refiner.models.result import LengthValidation, TextMeasurement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnforcedText:
    """Final text plus the validation computed on it."""

    text: str
    validation: LengthValidation


def measure(text: str) -> TextMeasurement:
    """Count whitespace-separated words and raw characters (code points)."""
    return TextMeasurement(words=len(text.split()), characters=len(text))


def validate_length(text: str, limit: LimitObject) -> LengthValidation:
    """Check ``text`` against ``limit``; the boundary itself is allowed."""
    current = getattr(measure(text), limit.type)
    return LengthValidation(
        is_valid=current <= limit.value,
        current=current,
        limit=limit.value,
        type=limit.type,
    )


def truncate(text: str, limit: LimitObject) -> str:
    """Cut ``text`` down to at most ``limit.value`` units.

    Words are re-joined with single spaces, so original line breaks are
    lost. Characters are sliced verbatim and may split a word.
    """
    if limit.type == "words":
        return " ".join(text.split()[: limit.value])
    return text[: limit.value]


def enforce_length(generated: str, limit: LimitObject) -> EnforcedText:
    """Return ``generated`` unchanged if it fits, otherwise truncated."""
    validation = validate_length(generated, limit)
    if validation.is_valid:
        return EnforcedText(text=generated, validation=validation)

    logger.info(
        "Generated text over limit (%d > %d %s), truncating",
        validation.current, limit.value, limit.type,
    )
    final_text = truncate(generated, limit)
    validation = validate_length(final_text, limit)
    if not validation.is_valid:
        raise AssertionError(
            f"truncation left {validation.current} {limit.type} for a limit of {limit.value}"
        )
    validation.was_truncated = True
    return EnforcedText(text=final_text, validation=validation)
