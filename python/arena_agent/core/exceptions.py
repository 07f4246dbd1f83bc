"""Exception taxonomy for the arena agent."""

from typing import List, Optional


class ArenaAgentError(Exception):
    """Base exception for all arena agent failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigError(ArenaAgentError):
    """Required configuration is missing or invalid."""


class CompatibilityError(ArenaAgentError):
    """The arena reports a schema version this agent does not speak."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Schema version mismatch. Expected {expected}, got {actual}. "
            "Please update your agent."
        )


class TransportError(ArenaAgentError):
    """A remote call returned a non-success HTTP status."""

    def __init__(self, method: str, path: str, status_code: int, body: str):
        self.method = method
        self.path = path
        self.status_code = status_code
        self.body = body
        super().__init__(f"API {method} {path} failed ({status_code}): {body}")


class ValidationFailure(ArenaAgentError):
    """The arena validator rejected the decision."""

    def __init__(self, errors: List[str], warnings: Optional[List[str]] = None):
        self.errors = list(errors)
        self.warnings = list(warnings or [])
        detail = "; ".join(self.errors) if self.errors else "decision marked invalid"
        super().__init__(f"Decision rejected by validator: {detail}")


class EngineIncompleteError(ArenaAgentError):
    """The agentic strategy ran out of steps without submitting a decision."""

    def __init__(self, steps_used: int, max_steps: int):
        self.steps_used = steps_used
        self.max_steps = max_steps
        super().__init__(
            f"Strategy used {steps_used}/{max_steps} steps without submitting a decision"
        )


class StrategyOutputError(ArenaAgentError):
    """The structured generator did not return a valid trade plan."""
