"""Supabase REST wrapper: token verification, profile and plan lookups."""

from __future__ import annotations

import logging
import os

import httpx

from answer_refiner.errors import Unauthenticated
from answer_refiner.models.profile import AuthUser, UserProfile

logger = logging.getLogger(__name__)


class SupabaseClient:
    """Async client for the Supabase auth and PostgREST endpoints.

    Uses the service-role key, so every query filters on the verified user id.
    """

    def __init__(
        self,
        url: str | None = None,
        service_key: str | None = None,
        *,
        profile_table: str = "user_profiles",
        subscription_table: str = "subscriptions",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        url = url or os.environ.get("SUPABASE_URL")
        key = service_key or os.environ.get("SUPABASE_SERVICE_ROLE_KEY")
        if not url or not key:
            raise ValueError(
                "Supabase credentials required. Set SUPABASE_URL and "
                "SUPABASE_SERVICE_ROLE_KEY env vars or pass url/service_key."
            )
        self.base_url = url.rstrip("/")
        self.service_key = key
        self.profile_table = profile_table
        self.subscription_table = subscription_table
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"apikey": key},
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    def _service_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.service_key}",
            "Accept": "application/json",
        }

    async def _select(self, table: str, params: dict[str, str]) -> list[dict]:
        response = await self.client.get(
            f"/rest/v1/{table}", params=params, headers=self._service_headers()
        )
        response.raise_for_status()
        rows = response.json()
        return rows if isinstance(rows, list) else []

    async def verify_token(self, token: str) -> AuthUser:
        """Resolve a user access token to the user it belongs to."""
        try:
            response = await self.client.get(
                "/auth/v1/user", headers={"Authorization": f"Bearer {token}"}
            )
        except httpx.RequestError as exc:
            logger.error("Token verification request failed: %s", exc)
            raise Unauthenticated("Could not verify authorization token") from exc

        if response.status_code in (401, 403):
            raise Unauthenticated("Invalid or expired token")
        if response.is_error:
            logger.error("Token verification returned HTTP %d", response.status_code)
            raise Unauthenticated("Could not verify authorization token")

        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict) or not data.get("id"):
            raise Unauthenticated("Invalid or expired token")
        return AuthUser(id=str(data["id"]), email=data.get("email"))

    async def fetch_profile(self, user_id: str) -> UserProfile | None:
        """Return the user's profile row, or None when there is none."""
        rows = await self._select(
            self.profile_table,
            {"id": f"eq.{user_id}", "select": "*", "limit": "1"},
        )
        if not rows:
            return None
        return UserProfile(**rows[0])

    async def has_active_pro(self, user_id: str) -> bool:
        """True if the user has an active pro subscription."""
        try:
            rows = await self._select(
                self.subscription_table,
                {
                    "user_id": f"eq.{user_id}",
                    "status": "eq.active",
                    "tier": "eq.pro",
                    "select": "tier,status",
                    "limit": "1",
                },
            )
        except (httpx.HTTPError, ValueError):
            logger.error("Subscription lookup failed for user %s", user_id, exc_info=True)
            return False
        return bool(rows)
