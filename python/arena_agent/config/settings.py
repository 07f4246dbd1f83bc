"""Runtime settings for the arena agent.

Settings are resolved once at startup from the process environment (optionally
seeded from a `.env` file through python-dotenv) and then passed explicitly to
every component. Nothing below the entry point reads the environment.
"""

import os
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from arena_agent.core.exceptions import ConfigError
from arena_agent.utils.env import (
    agent_debug_mode_enabled,
    build_repo_url,
    build_workflow_run_url,
)

from .constants import (
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_LLM_PROVIDER,
    DEFAULT_TAOSTATS_MCP_URL,
    PROVIDER_API_KEY_ENV,
    PROVIDER_DEFAULT_MODELS,
)


class StrategyMode(str, Enum):
    """Which decision policy the strategy engine runs."""

    SINGLE_SHOT = "single_shot"
    RESEARCH = "research"
    AGENTIC = "agentic"


class RoutingPolicy(str, Enum):
    """Trade routing rules described to the model."""

    STRICT = "strict"
    RELAXED = "relaxed"


class Provenance(BaseModel):
    """Where this decision was produced from; echoed into decision metadata."""

    model_config = ConfigDict(frozen=True)

    repo_url: str = ""
    commit_sha: str = "local"
    workflow_run_url: Optional[str] = None


class AgentSettings(BaseModel):
    """Explicit configuration for one agent invocation."""

    model_config = ConfigDict(frozen=True)

    agent_id: str = Field(..., min_length=1)
    agent_token: SecretStr
    api_url: str = Field(..., min_length=1)

    llm_provider: str = DEFAULT_LLM_PROVIDER
    llm_model_id: Optional[str] = None
    llm_api_key: SecretStr

    strategy: StrategyMode = StrategyMode.RESEARCH
    routing: RoutingPolicy = RoutingPolicy.STRICT

    taostats_mcp_url: str = DEFAULT_TAOSTATS_MCP_URL
    taostats_api_key: Optional[SecretStr] = None

    http_timeout: float = Field(default=DEFAULT_HTTP_TIMEOUT, gt=0)
    log_level: str = "INFO"
    debug_mode: bool = False

    provenance: Provenance = Field(default_factory=Provenance)

    @field_validator("api_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("llm_provider")
    @classmethod
    def _known_provider(cls, value: str) -> str:
        value = value.lower()
        if value not in PROVIDER_API_KEY_ENV:
            raise ValueError(
                f"Unsupported LLM provider '{value}'. "
                f"Choose one of: {', '.join(sorted(PROVIDER_API_KEY_ENV))}"
            )
        return value

    @property
    def model_id(self) -> str:
        return self.llm_model_id or PROVIDER_DEFAULT_MODELS[self.llm_provider]


def _require(environ: Mapping[str, str], name: str) -> str:
    value = environ.get(name)
    if not value:
        raise ConfigError(
            f"Missing required env var: {name}. Set it in .env or GitHub Secrets."
        )
    return value


def settings_from_env(environ: Mapping[str, str]) -> AgentSettings:
    """Build settings from an environment mapping.

    Raises:
        ConfigError: If a required variable is missing or a value is invalid.
    """
    provider = environ.get("ARENA_LLM_PROVIDER", DEFAULT_LLM_PROVIDER).lower()
    key_env = PROVIDER_API_KEY_ENV.get(provider)
    if key_env is None:
        raise ConfigError(
            f"Unsupported LLM provider '{provider}'. "
            f"Choose one of: {', '.join(sorted(PROVIDER_API_KEY_ENV))}"
        )

    values = {
        "agent_id": _require(environ, "AGENT_ID"),
        "agent_token": _require(environ, "AGENT_TOKEN"),
        "api_url": _require(environ, "ARENA_API_URL"),
        "llm_provider": provider,
        "llm_model_id": environ.get("ARENA_MODEL_ID") or None,
        "llm_api_key": _require(environ, key_env),
        "strategy": environ.get("ARENA_STRATEGY", StrategyMode.RESEARCH.value),
        "routing": environ.get("ARENA_ROUTING", RoutingPolicy.STRICT.value),
        "taostats_mcp_url": environ.get("TAOSTATS_MCP_URL") or DEFAULT_TAOSTATS_MCP_URL,
        "taostats_api_key": environ.get("TAOSTATS_API_KEY") or None,
        "http_timeout": environ.get("ARENA_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
        "log_level": environ.get("LOG_LEVEL", "INFO").upper(),
        "debug_mode": agent_debug_mode_enabled(environ),
        "provenance": Provenance(
            repo_url=build_repo_url(environ),
            commit_sha=environ.get("GITHUB_SHA") or "local",
            workflow_run_url=build_workflow_run_url(environ),
        ),
    }

    try:
        return AgentSettings(**values)
    except ValueError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def load_settings(
    env_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AgentSettings:
    """Load `.env` (without overriding existing variables) and build settings.

    When ``environ`` is given it is used as-is and no `.env` file is read.
    """
    if environ is None:
        if env_file is not None and not Path(env_file).exists():
            raise ConfigError(f".env file not found at {env_file}")
        loaded = load_dotenv(env_file, override=False)
        if loaded:
            logger.debug("Environment variables loaded from {}", env_file or ".env")
        environ = os.environ

    return settings_from_env(environ)
