from .constants import SCHEMA_VERSION
from .settings import (
    AgentSettings,
    Provenance,
    RoutingPolicy,
    StrategyMode,
    load_settings,
)

__all__ = [
    "SCHEMA_VERSION",
    "AgentSettings",
    "Provenance",
    "RoutingPolicy",
    "StrategyMode",
    "load_settings",
]
