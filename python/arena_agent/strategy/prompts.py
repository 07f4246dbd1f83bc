"""Prompts for the arena strategies.

The system prompts carry the agent's role, trading-route rules and sizing
guidelines. Route legality is described to the model only; the arena validator
is the authority on which trades are allowed.

Per-interval state (balances, NAV, assets, time remaining) is rendered into the
user message by the builders at the bottom of this module.
"""

from arena_agent.arena.snapshot import MarketSnapshot
from arena_agent.config.constants import (
    INTERVAL_MINUTES,
    MAX_TRADES_PER_INTERVAL,
    PORTFOLIO_TOOL_NAME,
    SUBMIT_TOOL_NAME,
)
from arena_agent.config.settings import RoutingPolicy

ROLE = """You are a trading agent competing in Agent Arena.

Your goal is to maximize your portfolio's NAV (net asset value in USD)."""

STRICT_ROUTING_RULES = f"""Trading rules:
- Valid routes: USD <-> TAO, and TAO <-> ALPHA_{{subnet_id}}
- Direct USD <-> ALPHA and ALPHA <-> ALPHA trades are NOT allowed
- Route through TAO: to buy ALPHA, first buy TAO with USD, then buy ALPHA with TAO
- You can make 0 to {MAX_TRADES_PER_INTERVAL} trades per interval (every {INTERVAL_MINUTES} minutes)"""

RELAXED_ROUTING_RULES = f"""Trading rules:
- Valid routes: USD <-> TAO, TAO <-> ALPHA_{{subnet_id}}, and USD <-> ALPHA_{{subnet_id}}
- ALPHA <-> ALPHA trades are NOT allowed
- You can make 0 to {MAX_TRADES_PER_INTERVAL} trades per interval (every {INTERVAL_MINUTES} minutes)"""

GUIDELINES = """Strategy guidelines:
- Be conservative: don't trade your entire balance at once
- Keep some USD as a safety buffer
- Return an empty trades array if you prefer to hold your current positions
- Consider the time remaining in the interval when deciding trade sizes
- Every trade amount is denominated in the asset you sell and must be positive"""

RESEARCH_TASK = """You are in the research phase. Use the available market data tools to look up the current TAO price and the pool data of the subnets relevant to this portfolio. Finish with a concise written summary of what you found: prices, liquidity, notable moves. Do not propose trades yet."""

DECISION_TASK = """You are in the decision phase. Use the research notes and the portfolio state to decide this interval's trades. Respond only with the structured trade plan."""

AGENTIC_TASK = f"""You act autonomously and must follow this exact order:
1. Call `{PORTFOLIO_TOOL_NAME}` once to read your current balances and NAV.
2. Use each market data tool at most once to research the TAO price and relevant subnet pools.
3. Analyze the data and decide your trades.
4. Call `{SUBMIT_TOOL_NAME}` exactly once as your final action with your trades and a 1-2 sentence reasoning. The run ends after this call.

Never end without calling `{SUBMIT_TOOL_NAME}`. Submitting an empty trades list is allowed when you prefer to hold."""


def routing_rules(policy: RoutingPolicy) -> str:
    if policy is RoutingPolicy.RELAXED:
        return RELAXED_ROUTING_RULES
    return STRICT_ROUTING_RULES


def build_system_prompt(policy: RoutingPolicy, task: str = "") -> str:
    parts = [ROLE, routing_rules(policy), GUIDELINES]
    if task:
        parts.append(task)
    return "\n\n".join(parts)


def render_snapshot_summary(snapshot: MarketSnapshot) -> str:
    """Render balances, NAV, tradeable assets and time left as prompt text."""
    portfolio = snapshot.portfolio
    balance_lines = [
        f"  {entry.asset}: {entry.amount}" for entry in portfolio.balances
    ] or ["  (no balances)"]
    asset_ids = ", ".join(asset.asset_id for asset in snapshot.assets) or "(none)"

    return "\n".join(
        [
            "Current portfolio:",
            *balance_lines,
            "",
            f"NAV (USD): ${portfolio.nav_usd:.2f}",
            "",
            f"Available assets: {asset_ids}",
            "",
            f"Seconds remaining in interval: {int(snapshot.clock.seconds_remaining)}",
        ]
    )


def build_single_shot_prompt(snapshot: MarketSnapshot) -> str:
    return "\n".join(
        [render_snapshot_summary(snapshot), "", "Decide your trades for this interval."]
    )


def build_research_prompt(snapshot: MarketSnapshot) -> str:
    return "\n".join(
        [
            render_snapshot_summary(snapshot),
            "",
            "Fetch current market data using the available tools, then summarize it.",
        ]
    )


def build_decision_prompt(snapshot: MarketSnapshot, research_text: str) -> str:
    return "\n".join(
        [
            "Market research notes:",
            research_text,
            "",
            render_snapshot_summary(snapshot),
            "",
            "Decide your trades for this interval.",
        ]
    )


def build_agentic_prompt(snapshot: MarketSnapshot) -> str:
    clock = snapshot.clock
    asset_ids = ", ".join(asset.asset_id for asset in snapshot.assets) or "(none)"
    return "\n".join(
        [
            f"Interval {clock.current_interval.id} is open "
            f"({int(clock.seconds_remaining)}s remaining).",
            f"Available assets: {asset_ids}",
            "",
            "Start by fetching your portfolio, then research, analyze and submit.",
        ]
    )
