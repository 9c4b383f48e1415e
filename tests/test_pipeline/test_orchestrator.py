"""Tests for the AnswerRefiner pipeline."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from answer_refiner.errors import (
    BadRequest,
    GenerationFailed,
    Unauthenticated,
    UpgradeRequired,
)
from answer_refiner.pipeline.length_enforcer import measure
from answer_refiner.pipeline.orchestrator import AnswerRefiner

AUTH = "Bearer token-abc"


class TestAnswerRefiner:
    async def test_full_pipeline(self, refiner, sample_payload, mock_generator, mock_identity):
        result = await refiner.refine(sample_payload, AUTH)

        mock_identity.verify_token.assert_awaited_once_with("token-abc")
        prompt, style = mock_generator.generate.call_args.args
        assert style == "concise"
        assert "ColdCrate" in prompt

        assert result.refined_text == "Cold storage that saves harvests."
        assert result.original_text == sample_payload["original_answer"]
        assert result.refinement_style == "concise"
        assert result.question_context == sample_payload["question_context"]
        assert result.original_counts == measure(sample_payload["original_answer"])
        assert result.final_counts.words == 5
        assert result.validation.is_valid is True
        assert result.validation.was_truncated is False
        assert result.metadata["context_source"] == "pitch_deck"
        assert result.metadata["input_tokens"] == 400
        assert result.metadata["estimated_cost_usd"] > 0

    @pytest.mark.parametrize("limit", [
        {"type": "words", "value": 12},
        {"type": "characters", "value": 40},
    ])
    async def test_overlong_generation_is_truncated(
        self, generator_returning, mock_identity, mock_profiles, sample_payload, limit,
    ):
        generator = generator_returning("grant " * 5000)
        refiner = AnswerRefiner(generator, mock_identity, mock_profiles)
        sample_payload["limit_object"] = limit

        result = await refiner.refine(sample_payload, AUTH)

        assert getattr(measure(result.refined_text), limit["type"]) <= limit["value"]
        assert result.validation.is_valid is True
        assert result.validation.was_truncated is True
        assert result.metadata["generated_counts"]["words"] == 5000

    async def test_boundary_output_not_truncated(
        self, generator_returning, mock_identity, mock_profiles, sample_payload,
    ):
        refiner = AnswerRefiner(generator_returning("a b c d e"), mock_identity, mock_profiles)
        sample_payload["limit_object"] = {"type": "words", "value": 5}
        result = await refiner.refine(sample_payload, AUTH)
        assert result.refined_text == "a b c d e"
        assert result.validation.was_truncated is False

    async def test_missing_profile_still_succeeds(
        self, mock_generator, mock_identity, sample_payload,
    ):
        profiles = AsyncMock()
        profiles.fetch_profile = AsyncMock(return_value=None)
        refiner = AnswerRefiner(mock_generator, mock_identity, profiles)

        result = await refiner.refine(sample_payload, AUTH)

        prompt = mock_generator.generate.call_args.args[0]
        assert "STARTUP CONTEXT" not in prompt
        assert result.metadata["context_source"] == "none"

    async def test_validation_runs_before_any_external_call(
        self, refiner, sample_payload, mock_identity, mock_profiles, mock_generator,
    ):
        sample_payload["refinement_style"] = "sarcastic"
        with pytest.raises(BadRequest):
            await refiner.refine(sample_payload, AUTH)
        mock_identity.verify_token.assert_not_called()
        mock_profiles.fetch_profile.assert_not_called()
        mock_generator.generate.assert_not_called()

    async def test_missing_authorization(self, refiner, sample_payload, mock_identity):
        with pytest.raises(Unauthenticated):
            await refiner.refine(sample_payload, None)
        mock_identity.verify_token.assert_not_called()

    async def test_invalid_token_propagates(self, refiner, sample_payload, mock_identity, mock_generator):
        mock_identity.verify_token.side_effect = Unauthenticated("Invalid or expired token")
        with pytest.raises(Unauthenticated):
            await refiner.refine(sample_payload, AUTH)
        mock_generator.generate.assert_not_called()

    async def test_generation_failure_propagates(self, refiner, sample_payload, mock_generator):
        mock_generator.generate.side_effect = GenerationFailed("Failed to refine answer with AI")
        with pytest.raises(GenerationFailed):
            await refiner.refine(sample_payload, AUTH)


class TestProGate:
    async def test_non_pro_user_rejected(
        self, mock_generator, mock_identity, mock_profiles, sample_payload,
    ):
        plans = AsyncMock()
        plans.has_active_pro = AsyncMock(return_value=False)
        refiner = AnswerRefiner(
            mock_generator, mock_identity, mock_profiles, plans=plans, require_pro=True,
        )
        with pytest.raises(UpgradeRequired):
            await refiner.refine(sample_payload, AUTH)
        plans.has_active_pro.assert_awaited_once_with("user-123")
        mock_profiles.fetch_profile.assert_not_called()

    async def test_pro_user_allowed(
        self, mock_generator, mock_identity, mock_profiles, sample_payload,
    ):
        plans = AsyncMock()
        plans.has_active_pro = AsyncMock(return_value=True)
        refiner = AnswerRefiner(
            mock_generator, mock_identity, mock_profiles, plans=plans, require_pro=True,
        )
        result = await refiner.refine(sample_payload, AUTH)
        assert result.validation.is_valid is True

    async def test_gate_disabled_by_default(self, refiner, sample_payload):
        assert refiner.require_pro is False
        await refiner.refine(sample_payload, AUTH)


class TestRefineRequest:
    async def test_without_context(self, mock_generator, sample_request):
        refiner = AnswerRefiner(mock_generator)
        result = await refiner.refine_request(sample_request)
        assert result.refinement_style == "persuasive"
        assert result.metadata["context_source"] == "none"


class TestClose:
    async def test_shared_client_closed_once(self, mock_generator):
        store = AsyncMock()
        refiner = AnswerRefiner(mock_generator, store, store, plans=store)
        await refiner.aclose()
        store.aclose.assert_awaited_once()

    async def test_without_collaborators(self, mock_generator):
        await AnswerRefiner(mock_generator).aclose()
