"""Context Aggregator: flattens the caller's stored profile into prompt text."""

from __future__ import annotations

import logging
from typing import Protocol

from pydantic import ValidationError

from answer_refiner.models.profile import ContextBlock, PitchDeckSummary, UserProfile
from answer_refiner.utils.json_parser import extract_json_object

logger = logging.getLogger(__name__)

NOT_SPECIFIED = "Not specified"

PITCH_DECK_LABELS: tuple[tuple[str, str], ...] = (
    ("problem_statement", "Problem Statement"),
    ("solution_overview", "Solution Overview"),
    ("target_market", "Target Market"),
    ("business_model", "Business Model"),
    ("team_strengths", "Team Strengths"),
    ("key_metrics_and_traction", "Traction & Key Metrics"),
    ("funding_ask", "Funding Ask"),
)

PROFILE_LABELS: tuple[tuple[str, str], ...] = (
    ("startup_name", "Startup"),
    ("one_line_pitch", "One-line Pitch"),
    ("problem_statement", "Problem Statement"),
    ("solution_description", "Solution"),
    ("target_market", "Target Market"),
    ("team_description", "Team"),
)


class ProfileStore(Protocol):
    async def fetch_profile(self, user_id: str) -> UserProfile | None: ...


def parse_pitch_deck(raw) -> PitchDeckSummary | None:
    """Parse a stored pitch-deck summary; None if absent or malformed."""
    if raw is None:
        return None
    if isinstance(raw, str):
        if not raw.strip():
            return None
        try:
            raw = extract_json_object(raw)
        except ValueError:
            logger.debug("pitch_deck_summary is not valid JSON")
            return None
    if not isinstance(raw, dict):
        return None
    try:
        return PitchDeckSummary(**raw)
    except ValidationError:
        logger.debug("pitch_deck_summary is missing expected keys")
        return None


def format_pitch_deck(summary: PitchDeckSummary, startup_name: str | None = None) -> str:
    lines = []
    if startup_name and startup_name.strip():
        lines.append(f"Startup: {startup_name.strip()}")
    lines.append("Pitch Deck Summary:")
    for key, label in PITCH_DECK_LABELS:
        lines.append(f"- {label}: {getattr(summary, key).strip() or NOT_SPECIFIED}")
    return "\n".join(lines)


def format_profile_fields(profile: UserProfile) -> str:
    lines = []
    for key, label in PROFILE_LABELS:
        value = getattr(profile, key)
        lines.append(f"{label}: {value.strip() if value and value.strip() else NOT_SPECIFIED}")
    return "\n".join(lines)


def _bound(text: str, max_chars: int) -> str:
    if len(text) <= max_chars:
        return text
    return text[: max_chars - 3].rstrip() + "..."


def build_context(profile: UserProfile | None, max_chars: int = 4000) -> ContextBlock:
    """Build the context block from an optional profile record."""
    if profile is None:
        return ContextBlock()

    summary = parse_pitch_deck(profile.pitch_deck_summary)
    if summary is not None:
        text = format_pitch_deck(summary, profile.startup_name)
        source = "pitch_deck"
    else:
        text = format_profile_fields(profile)
        source = "profile"
    return ContextBlock(text=_bound(text, max_chars), source=source)


class ContextAggregator:
    """Fetch the caller's profile and turn it into a bounded context block.

    A missing profile or a failing store yields an empty block; this step
    never fails the request.
    """

    def __init__(self, store: ProfileStore | None, max_chars: int = 4000):
        self.store = store
        self.max_chars = max_chars

    async def aggregate(self, user_id: str | None) -> ContextBlock:
        if self.store is None or not user_id:
            return ContextBlock()
        try:
            profile = await self.store.fetch_profile(user_id)
        except Exception:
            logger.warning("Profile lookup failed for user %s; continuing without context",
                           user_id, exc_info=True)
            return ContextBlock()

        if profile is None:
            logger.info("No profile for user %s; prompt will omit context", user_id)
        context = build_context(profile, self.max_chars)
        logger.debug("Context for user %s: source=%s, %d chars",
                     user_id, context.source, len(context.text))
        return context
