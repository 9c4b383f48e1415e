"""Error taxonomy for the refinement pipeline.

Each stage raises exactly one of these; the HTTP layer turns them into
``{"error": kind, "message": ...}`` bodies with the matching status code.
"""

from __future__ import annotations


class RefinerError(Exception):
    """Base class for errors surfaced to the caller."""

    kind: str = "InternalError"
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict:
        return {"error": self.kind, "message": self.message}


class Unauthenticated(RefinerError):
    kind = "Unauthenticated"
    status_code = 401


class UpgradeRequired(RefinerError):
    kind = "UpgradeRequired"
    status_code = 403


class BadRequest(RefinerError):
    """Request validation failure.

    ``reason`` is one of ``invalid_payload``, ``missing_field``,
    ``invalid_limit`` or ``unknown_style``.
    """

    kind = "BadRequest"
    status_code = 400

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason


class GenerationFailed(RefinerError):
    kind = "GenerationFailed"
    status_code = 502
