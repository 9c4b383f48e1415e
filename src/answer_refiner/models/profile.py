"""Models for the caller's identity and stored startup profile."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, field_validator


class AuthUser(BaseModel):
    id: str
    email: str | None = None


class UserProfile(BaseModel):
    """Subset of a ``user_profiles`` row used to personalise prompts."""

    id: str | None = None
    startup_name: str | None = None
    one_line_pitch: str | None = None
    problem_statement: str | None = None
    solution_description: str | None = None
    target_market: str | None = None
    team_description: str | None = None
    pitch_deck_summary: str | dict[str, Any] | None = None

    model_config = {"extra": "ignore"}

    @field_validator(
        "id", "startup_name", "one_line_pitch", "problem_statement",
        "solution_description", "target_market", "team_description",
        mode="before",
    )
    @classmethod
    def _scalar_to_str(cls, value: Any) -> str | None:
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (bool, int, float)):
            return str(value)
        return None

    @field_validator("pitch_deck_summary", mode="before")
    @classmethod
    def _keep_parseable_summary(cls, value: Any) -> str | dict | None:
        # Anything else falls through to the profile-field context
        return value if isinstance(value, (str, dict)) else None


class PitchDeckSummary(BaseModel):
    """Structured summary produced by the pitch-deck analyzer."""

    problem_statement: str
    solution_overview: str
    target_market: str
    business_model: str
    team_strengths: str
    key_metrics_and_traction: str
    funding_ask: str


class ContextBlock(BaseModel):
    text: str = ""
    source: str = "none"  # "pitch_deck" | "profile" | "none"

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()
