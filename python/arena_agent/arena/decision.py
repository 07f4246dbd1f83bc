"""Construction of the decision payload submitted to the arena."""

from typing import Iterable

from loguru import logger

from arena_agent.config.constants import SCHEMA_VERSION
from arena_agent.config.settings import Provenance

from .models import DecisionBody, DecisionMetadata, DecisionPayload, Trade


def build_decision_payload(
    trades: Iterable[Trade], reasoning: str, provenance: Provenance
) -> DecisionPayload:
    """Wrap trades and reasoning with schema version and run provenance."""
    payload = DecisionPayload(
        schema_version=SCHEMA_VERSION,
        decision=DecisionBody(trades=list(trades)),
        reasoning=reasoning,
        metadata=DecisionMetadata(
            repo_url=provenance.repo_url,
            commit_sha=provenance.commit_sha,
            workflow_run_url=provenance.workflow_run_url,
        ),
    )
    logger.debug("Built decision payload: {}", payload.to_wire())
    return payload
