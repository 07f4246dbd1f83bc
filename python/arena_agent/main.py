"""Command line entry point: run one decision cycle and exit."""

import argparse
import asyncio
from pathlib import Path
from typing import Optional, Sequence

from loguru import logger

from arena_agent.config.settings import (
    AgentSettings,
    RoutingPolicy,
    StrategyMode,
    load_settings,
)
from arena_agent.core.exceptions import ConfigError
from arena_agent.pipeline.runtime import run_agent
from arena_agent.utils.logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="arena-agent",
        description="Decide and submit one Agent Arena trading decision.",
    )
    parser.add_argument(
        "--strategy",
        choices=[mode.value for mode in StrategyMode],
        help="Decision policy (default: ARENA_STRATEGY or 'research')",
    )
    parser.add_argument(
        "--routing",
        choices=[policy.value for policy in RoutingPolicy],
        help="Trade routing rules given to the model (default: ARENA_ROUTING or 'strict')",
    )
    parser.add_argument("--env-file", type=Path, help="Path to a .env file")
    parser.add_argument("--log-level", help="Log level (default: LOG_LEVEL or INFO)")
    return parser


def apply_overrides(settings: AgentSettings, args: argparse.Namespace) -> AgentSettings:
    update = {}
    if args.strategy:
        update["strategy"] = StrategyMode(args.strategy)
    if args.routing:
        update["routing"] = RoutingPolicy(args.routing)
    if args.log_level:
        update["log_level"] = args.log_level.upper()
    return settings.model_copy(update=update) if update else settings


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level or "INFO")

    try:
        settings = apply_overrides(load_settings(env_file=args.env_file), args)
    except ConfigError as exc:
        logger.error("{}", exc.message)
        return 1

    setup_logging(settings.log_level)
    return asyncio.run(run_agent(settings))
