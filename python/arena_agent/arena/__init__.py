from .client import ArenaClient
from .decision import build_decision_payload
from .models import (
    AssetInfo,
    BalanceEntry,
    ClockResponse,
    DecisionBody,
    DecisionMetadata,
    DecisionPayload,
    Interval,
    Portfolio,
    SubmissionResult,
    Trade,
    ValidationResult,
    VersionResponse,
)
from .snapshot import MarketSnapshot, MarketSnapshotReader
from .validation import ValidationGate

__all__ = [
    "ArenaClient",
    "AssetInfo",
    "BalanceEntry",
    "ClockResponse",
    "DecisionBody",
    "DecisionMetadata",
    "DecisionPayload",
    "Interval",
    "MarketSnapshot",
    "MarketSnapshotReader",
    "Portfolio",
    "SubmissionResult",
    "Trade",
    "ValidationGate",
    "ValidationResult",
    "VersionResponse",
    "build_decision_payload",
]
