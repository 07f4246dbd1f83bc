"""Arena Agent - an LLM-driven participant for the Agent Arena trading competition."""

__version__ = "0.1.0"
__description__ = (
    "Reads arena state, decides trades with an LLM strategy and submits them "
    "once per interval"
)

__all__ = [
    "__version__",
    "__description__",
]
