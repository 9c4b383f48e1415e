"""Shared test fixtures."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from answer_refiner.clients.llm_client import LLMResponse
from answer_refiner.models.profile import AuthUser, UserProfile
from answer_refiner.models.request import LimitObject, RefinementRequest
from answer_refiner.pipeline.answer_generator import AnswerGenerator
from answer_refiner.pipeline.orchestrator import AnswerRefiner


@pytest.fixture
def sample_pitch_deck() -> dict:
    return {
        "problem_statement": "Smallholder farmers lose 30% of harvests to spoilage.",
        "solution_overview": "Solar-powered cold storage rented by the crate.",
        "target_market": "Farming cooperatives in East Africa.",
        "business_model": "Pay-per-crate subscription.",
        "team_strengths": "Founders built cold chains at two logistics firms.",
        "key_metrics_and_traction": "40 units deployed, 1,200 farmers served.",
        "funding_ask": "$500k seed to deploy 200 more units.",
    }


@pytest.fixture
def sample_profile(sample_pitch_deck) -> UserProfile:
    return UserProfile(
        id="user-123",
        startup_name="ColdCrate",
        one_line_pitch="Cold storage as a service for farmers",
        problem_statement="Post-harvest loss",
        solution_description="Solar cold rooms",
        target_market="Cooperatives",
        team_description="Logistics veterans",
        pitch_deck_summary=json.dumps(sample_pitch_deck),
    )


@pytest.fixture
def sample_payload() -> dict:
    return {
        "original_answer": "We make cold storage for farmers so food does not rot.",
        "refinement_style": "concise",
        "question_context": "What problem are you solving?",
        "limit_object": {"type": "words", "value": 100},
    }


@pytest.fixture
def sample_request() -> RefinementRequest:
    return RefinementRequest(
        original_answer="We make cold storage for farmers so food does not rot.",
        refinement_style="persuasive",
        question_context="What problem are you solving?",
        limit_object=LimitObject(type="words", value=50),
    )


@pytest.fixture
def mock_generator() -> AnswerGenerator:
    """A generator stub returning a short, compliant answer."""
    generator = AsyncMock(spec=AnswerGenerator)
    generator.generate = AsyncMock(
        return_value=LLMResponse(
            text="Cold storage that saves harvests.",
            input_tokens=400,
            output_tokens=20,
            model="claude-haiku-4-5-20251001",
        )
    )
    return generator


@pytest.fixture
def mock_identity() -> AsyncMock:
    identity = AsyncMock()
    identity.verify_token = AsyncMock(return_value=AuthUser(id="user-123", email="a@b.co"))
    return identity


@pytest.fixture
def mock_profiles(sample_profile) -> AsyncMock:
    profiles = AsyncMock()
    profiles.fetch_profile = AsyncMock(return_value=sample_profile)
    return profiles


@pytest.fixture
def refiner(mock_generator, mock_identity, mock_profiles) -> AnswerRefiner:
    return AnswerRefiner(mock_generator, mock_identity, mock_profiles)


@pytest.fixture
def generator_returning():
    """Factory for generator stubs that always return the given text."""

    def _make(text: str) -> AsyncMock:
        generator = AsyncMock(spec=AnswerGenerator)
        generator.generate = AsyncMock(
            return_value=LLMResponse(text=text, input_tokens=10, output_tokens=10)
        )
        return generator

    return _make
