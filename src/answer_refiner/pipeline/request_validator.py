"""Request validation: turns a raw payload into a RefinementRequest.

Checks run in a fixed priority order and the first failure wins:
identity header, payload shape, field presence, limit shape, style key.
No I/O happens here.
"""

from __future__ import annotations

import math
from numbers import Real

from answer_refiner.errors import BadRequest, Unauthenticated
from answer_refiner.models.request import LimitObject, RefinementRequest
from answer_refiner.pipeline.styles import STYLE_TEMPLATES, list_style_keys

REQUIRED_FIELDS = ("original_answer", "refinement_style", "question_context", "limit_object")
TEXT_FIELDS = ("original_answer", "refinement_style", "question_context")
LIMIT_TYPES = ("words", "characters")


def extract_bearer_token(authorization: str | None) -> str:
    """Return the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization or not authorization.strip():
        raise Unauthenticated("Authorization header is required")
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise Unauthenticated("Authorization header must use the Bearer scheme")
    return token


def _is_missing(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_limit(raw) -> LimitObject:
    if not isinstance(raw, dict):
        raise BadRequest("invalid_limit", "Invalid limit: limit_object must be an object")

    limit_type = raw.get("type")
    if limit_type not in LIMIT_TYPES:
        raise BadRequest(
            "invalid_limit",
            f"Invalid limit: limit_object.type must be one of {', '.join(LIMIT_TYPES)}",
        )

    value = raw.get("value")
    # bool is a Real subclass; reject it explicitly
    if (
        isinstance(value, bool)
        or not isinstance(value, Real)
        or not math.isfinite(value)
        or value <= 0
        or value != int(value)
    ):
        raise BadRequest(
            "invalid_limit",
            "Invalid limit: limit_object.value must be a positive whole number",
        )
    return LimitObject(type=limit_type, value=int(value))


def validate_request(payload, authorization: str | None) -> tuple[RefinementRequest, str]:
    """Validate a raw request and return the typed request plus bearer token.

    Raises:
        Unauthenticated: missing or malformed Authorization header.
        BadRequest: the first violated payload constraint.
    """
    token = extract_bearer_token(authorization)

    if not isinstance(payload, dict):
        raise BadRequest("invalid_payload", "Invalid payload: request body must be a JSON object")

    missing = [name for name in REQUIRED_FIELDS if _is_missing(payload.get(name))]
    if missing:
        raise BadRequest(
            "missing_field",
            f"Missing required field(s): {', '.join(missing)}",
        )

    for name in TEXT_FIELDS:
        if not isinstance(payload[name], str):
            raise BadRequest("invalid_payload", f"Invalid payload: {name} must be a string")

    limit = _parse_limit(payload["limit_object"])

    style = payload["refinement_style"].strip()
    if style not in STYLE_TEMPLATES:
        raise BadRequest(
            "unknown_style",
            f"Unknown refinement_style '{style}'. "
            f"Valid styles: {', '.join(list_style_keys())}",
        )

    request = RefinementRequest(
        original_answer=payload["original_answer"],
        refinement_style=style,
        question_context=payload["question_context"],
        limit_object=limit,
    )
    return request, token
