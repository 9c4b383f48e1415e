"""Data models for the answer refinement pipeline."""

from answer_refiner.models.profile import (
    AuthUser,
    ContextBlock,
    PitchDeckSummary,
    UserProfile,
)
from answer_refiner.models.request import LimitObject, RefinementRequest
from answer_refiner.models.result import (
    LengthValidation,
    RefinementResult,
    TextMeasurement,
)

__all__ = [
    "AuthUser",
    "ContextBlock",
    "LengthValidation",
    "LimitObject",
    "PitchDeckSummary",
    "RefinementRequest",
    "RefinementResult",
    "TextMeasurement",
    "UserProfile",
]
