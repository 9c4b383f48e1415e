"""Main pipeline orchestrator - runs one refinement request end to end."""

from __future__ import annotations

import logging
import os
import time
from typing import Protocol

from answer_refiner.clients.llm_client import LLMClient
from answer_refiner.clients.supabase_client import SupabaseClient
from answer_refiner.config import AppConfig
from answer_refiner.errors import UpgradeRequired
from answer_refiner.models.profile import AuthUser, ContextBlock
from answer_refiner.models.request import RefinementRequest
from answer_refiner.models.result import RefinementResult
from answer_refiner.pipeline.answer_generator import AnswerGenerator, TextGenerator
from answer_refiner.pipeline.context_aggregator import ContextAggregator, ProfileStore
from answer_refiner.pipeline.length_enforcer import enforce_length, measure
from answer_refiner.pipeline.prompt_builder import build_prompt
from answer_refiner.pipeline.request_validator import validate_request
from answer_refiner.pipeline.response_assembler import assemble_result
from answer_refiner.usage.cost_calculator import calculate_cost

logger = logging.getLogger(__name__)


class IdentityVerifier(Protocol):
    async def verify_token(self, token: str) -> AuthUser: ...


class PlanChecker(Protocol):
    async def has_active_pro(self, user_id: str) -> bool: ...


class AnswerRefiner:
    """Validate, personalise, generate and length-enforce one answer.

    Holds only read-only collaborators, so a single instance can serve
    concurrent requests.
    """

    def __init__(
        self,
        generator: TextGenerator,
        identity: IdentityVerifier | None = None,
        profiles: ProfileStore | None = None,
        *,
        plans: PlanChecker | None = None,
        require_pro: bool = False,
        context_max_chars: int = 4000,
    ):
        self.generator = generator
        self.identity = identity
        self.plans = plans
        self.require_pro = require_pro
        self.context = ContextAggregator(profiles, max_chars=context_max_chars)

    async def refine(self, payload, authorization: str | None) -> RefinementResult:
        """Run the full pipeline for a raw payload and Authorization header."""
        request, token = validate_request(payload, authorization)
        if self.identity is None:
            raise RuntimeError("AnswerRefiner.refine needs an identity verifier")
        user = await self.identity.verify_token(token)

        if self.require_pro:
            if self.plans is None or not await self.plans.has_active_pro(user.id):
                logger.info("User %s refused: no active pro subscription", user.id)
                raise UpgradeRequired("Upgrade to Pro to use this feature")

        context = await self.context.aggregate(user.id)
        result = await self.refine_request(request, context)
        logger.info(
            "Answer refined for user %s (style=%s, truncated=%s)",
            user.id, request.refinement_style, result.validation.was_truncated,
        )
        return result

    async def refine_request(
        self,
        request: RefinementRequest,
        context: ContextBlock | None = None,
    ) -> RefinementResult:
        """Run the prompt -> generate -> enforce -> assemble stages."""
        context = context or ContextBlock()
        start = time.monotonic()

        prompt = build_prompt(request, context)
        response = await self.generator.generate(prompt, request.refinement_style)
        generated_counts = measure(response.text)
        enforced = enforce_length(response.text, request.limit_object)

        metadata = {
            "model": response.model,
            "context_source": context.source,
            "prompt_characters": len(prompt),
            "generated_counts": generated_counts.model_dump(),
            "input_tokens": response.input_tokens,
            "output_tokens": response.output_tokens,
            "estimated_cost_usd": calculate_cost(
                [(response.model, response.input_tokens, response.output_tokens)]
            ),
            "elapsed_seconds": round(time.monotonic() - start, 3),
        }
        return assemble_result(request, enforced, metadata)

    async def aclose(self) -> None:
        """Close collaborators that hold connections, each one once."""
        seen: set[int] = set()
        for collaborator in (self.identity, self.context.store, self.plans):
            if collaborator is None or id(collaborator) in seen:
                continue
            seen.add(id(collaborator))
            close = getattr(collaborator, "aclose", None)
            if close is not None:
                await close()


def build_refiner(config: AppConfig) -> AnswerRefiner:
    """Wire the production refiner (Claude + Supabase) from config and env vars."""
    llm = LLMClient(timeout=config.llm.timeout, max_attempts=config.llm.max_retries)
    generator = AnswerGenerator(
        llm,
        model=config.llm.model,
        temperature=config.llm.temperature,
        max_tokens=config.llm.max_tokens,
    )
    supabase = SupabaseClient(
        os.environ.get(config.supabase.url_env),
        os.environ.get(config.supabase.service_key_env),
        profile_table=config.supabase.profile_table,
        subscription_table=config.supabase.subscription_table,
        timeout=config.supabase.timeout,
    )
    return AnswerRefiner(
        generator,
        identity=supabase,
        profiles=supabase,
        plans=supabase,
        require_pro=config.refiner.require_pro,
        context_max_chars=config.refiner.context_max_chars,
    )
