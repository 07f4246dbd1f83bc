from .agentic import AgenticStrategy
from .factory import build_strategy
from .interfaces import LlmBackend, StrategyEngine, ToolSessionFactory
from .models import StrategyOutput, TradePlan
from .research_strategy import ResearchThenDecideStrategy
from .single_shot import SingleShotStrategy

__all__ = [
    "AgenticStrategy",
    "LlmBackend",
    "ResearchThenDecideStrategy",
    "SingleShotStrategy",
    "StrategyEngine",
    "StrategyOutput",
    "ToolSessionFactory",
    "TradePlan",
    "build_strategy",
]
