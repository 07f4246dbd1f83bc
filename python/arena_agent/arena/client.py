"""Async client for the Agent Arena REST API.

Every public method is a single authenticated round trip. The client keeps no
state between calls: retries and deduplication are left to the caller and to
the server-side idempotency key attached to submissions.
"""

from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from arena_agent.config.constants import (
    API_PREFIX,
    DEFAULT_HTTP_TIMEOUT,
    IDEMPOTENCY_HEADER,
    SCHEMA_VERSION,
)
from arena_agent.core.exceptions import CompatibilityError, TransportError

from .models import (
    AssetInfo,
    ClockResponse,
    DecisionPayload,
    Portfolio,
    SubmissionResult,
    ValidationResult,
    VersionResponse,
)


class ArenaClient:
    """Typed wrapper over the arena API, authenticated with a bearer token."""

    def __init__(
        self,
        api_url: str,
        token: str,
        *,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        schema_version: int = SCHEMA_VERSION,
    ) -> None:
        self._schema_version = schema_version
        self._http = httpx.AsyncClient(
            base_url=api_url.rstrip("/"),
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {token}",
            },
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ArenaClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @staticmethod
    def idempotency_key(agent_id: str, interval_start: str) -> str:
        """Deterministic submission key for one (agent, interval) pair."""
        return f"{agent_id}:{interval_start}"

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        url = f"{API_PREFIX}{path}"
        logger.debug("Arena request {} {}", method, url)
        response = await self._http.request(method, url, json=body, headers=headers)
        logger.debug("Arena response {} {} -> {}", method, url, response.status_code)

        if not response.is_success:
            raise TransportError(method, url, response.status_code, response.text)
        return response.json()

    async def check_version(self) -> VersionResponse:
        """Fetch the server schema version and fail on mismatch."""
        version = VersionResponse.model_validate(await self._request("GET", "/version"))
        if version.schema_version != self._schema_version:
            raise CompatibilityError(self._schema_version, version.schema_version)
        return version

    async def get_clock(self) -> ClockResponse:
        """Fetch the current interval and seconds remaining."""
        return ClockResponse.model_validate(await self._request("GET", "/game/clock"))

    async def get_portfolio(self, agent_id: str) -> Portfolio:
        """Fetch the agent's balances and NAV."""
        data = await self._request("GET", f"/agents/{agent_id}/portfolio")
        return Portfolio.model_validate(data)

    async def get_assets(self) -> List[AssetInfo]:
        """Fetch the tradeable assets."""
        data = await self._request("GET", "/game/assets")
        return [AssetInfo.model_validate(item) for item in data]

    async def validate_decision(
        self, agent_id: str, payload: DecisionPayload
    ) -> ValidationResult:
        """Run the arena validator against a decision without side effects."""
        data = await self._request(
            "POST", f"/agents/{agent_id}/validate", payload.to_wire()
        )
        return ValidationResult.model_validate(data)

    async def submit_decision(
        self, agent_id: str, payload: DecisionPayload, interval_start: str
    ) -> SubmissionResult:
        """Submit the decision for the interval starting at ``interval_start``.

        Repeated calls for the same (agent, interval) carry the same
        idempotency key, so the server collapses them into one submission.
        """
        key = self.idempotency_key(agent_id, interval_start)
        data = await self._request(
            "POST",
            f"/agents/{agent_id}/submissions",
            payload.to_wire(),
            headers={IDEMPOTENCY_HEADER: key},
        )
        return SubmissionResult.model_validate(data)
