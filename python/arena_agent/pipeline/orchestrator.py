"""Pipeline orchestrator: one interval, one decision, one submission attempt."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from loguru import logger

from arena_agent.arena.client import ArenaClient
from arena_agent.arena.decision import build_decision_payload
from arena_agent.arena.models import DecisionPayload, SubmissionResult, ValidationResult
from arena_agent.arena.snapshot import MarketSnapshot, MarketSnapshotReader
from arena_agent.arena.validation import ValidationGate
from arena_agent.config.settings import Provenance
from arena_agent.core.exceptions import EngineIncompleteError, ValidationFailure
from arena_agent.strategy.interfaces import StrategyEngine
from arena_agent.strategy.models import StrategyOutput


class PipelineStage(str, Enum):
    INIT = "init"
    VERSION_CHECKED = "version_checked"
    SNAPSHOT_READ = "snapshot_read"
    DECIDED = "decided"
    VALIDATED = "validated"
    SUBMITTED = "submitted"
    VALIDATION_FAILED = "validation_failed"
    ABORTED = "aborted"


@dataclass
class PipelineResult:
    """Outcome of a single pipeline run."""

    stage: PipelineStage = PipelineStage.INIT
    snapshot: Optional[MarketSnapshot] = None
    output: Optional[StrategyOutput] = None
    payload: Optional[DecisionPayload] = None
    validation: Optional[ValidationResult] = None
    submission: Optional[SubmissionResult] = None
    error: Optional[BaseException] = None

    @property
    def exit_code(self) -> int:
        return 0 if self.stage is PipelineStage.SUBMITTED else 1


class DecisionPipeline:
    """Sequences snapshot -> strategy -> validation -> submission.

    Stages advance strictly in order. Validation rejection ends in
    VALIDATION_FAILED, any other exception in ABORTED; neither submits.
    There are no retries here: a re-run of the whole pipeline for the same
    interval is safe because submissions carry a deterministic idempotency key.
    """

    def __init__(
        self,
        *,
        reader: MarketSnapshotReader,
        strategy: StrategyEngine,
        gate: ValidationGate,
        client: ArenaClient,
        agent_id: str,
        provenance: Provenance,
    ) -> None:
        self._reader = reader
        self._strategy = strategy
        self._gate = gate
        self._client = client
        self._agent_id = agent_id
        self._provenance = provenance

    async def run(self) -> PipelineResult:
        result = PipelineResult()
        try:
            await self._run(result)
        except ValidationFailure as exc:
            result.error = exc
            self._advance(result, PipelineStage.VALIDATION_FAILED)
            logger.error("{}", exc.message)
        except EngineIncompleteError as exc:
            result.error = exc
            self._advance(result, PipelineStage.ABORTED)
            logger.warning("No decision produced: {}", exc.message)
        except Exception as exc:
            failed_at = result.stage
            result.error = exc
            self._advance(result, PipelineStage.ABORTED)
            logger.exception("Fatal error after stage {}", failed_at.value)
        return result

    @staticmethod
    def _advance(result: PipelineResult, stage: PipelineStage) -> None:
        result.stage = stage
        logger.debug("Pipeline stage -> {}", stage.value)

    async def _run(self, result: PipelineResult) -> None:
        version = await self._reader.check_version()
        self._advance(result, PipelineStage.VERSION_CHECKED)

        snapshot = await self._reader.read_state(version)
        result.snapshot = snapshot
        self._advance(result, PipelineStage.SNAPSHOT_READ)

        logger.info("Running strategy...")
        output = await self._strategy.decide(snapshot)
        result.output = output
        logger.info("Reasoning: {}", output.reasoning)
        logger.info("Strategy produced {} trade(s)", len(output.trades))

        if output.already_submitted:
            # the agentic strategy validated and submitted through its own tool
            result.payload = output.payload
            self._advance(result, PipelineStage.DECIDED)
            result.validation = output.validation
            self._advance(result, PipelineStage.VALIDATED)
            result.submission = output.submission
            self._finish(result)
            return

        result.payload = build_decision_payload(
            output.trades, output.reasoning, self._provenance
        )
        self._advance(result, PipelineStage.DECIDED)

        validation = await self._gate.validate(result.payload)
        result.validation = validation
        self._gate.ensure_submittable(validation)
        self._advance(result, PipelineStage.VALIDATED)

        logger.info("Submitting decision...")
        result.submission = await self._client.submit_decision(
            self._agent_id, result.payload, snapshot.interval_start
        )
        self._finish(result)

    def _finish(self, result: PipelineResult) -> None:
        submission = result.submission
        self._advance(result, PipelineStage.SUBMITTED)
        if not submission.accepted:
            logger.warning(
                "Arena did not accept submission {} for interval {}",
                submission.submission_id,
                submission.interval_start,
            )
            return
        logger.info(
            "Submitted! id={} interval={}",
            submission.submission_id,
            submission.interval_start,
        )
