"""Validate-before-submit gate backed by the arena's own validator."""

from loguru import logger

from arena_agent.core.exceptions import ValidationFailure

from .client import ArenaClient
from .models import DecisionPayload, ValidationResult


class ValidationGate:
    """Pass-through to the remote validator; its verdict is authoritative."""

    def __init__(self, client: ArenaClient, agent_id: str) -> None:
        self._client = client
        self._agent_id = agent_id

    async def validate(self, payload: DecisionPayload) -> ValidationResult:
        logger.info("Validating decision...")
        result = await self._client.validate_decision(self._agent_id, payload)
        for warning in result.warnings:
            logger.warning("Validation warning: {}", warning)
        return result

    @staticmethod
    def ensure_submittable(result: ValidationResult) -> None:
        """Raise ValidationFailure when the validator reported any error."""
        if not result.is_blocking:
            logger.info("Validation passed")
            return
        for error in result.errors:
            logger.error("Validation error: {}", error)
        raise ValidationFailure(result.errors, result.warnings)
