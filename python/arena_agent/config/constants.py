"""Core constants for the arena agent."""

# Wire schema version this agent was built against
SCHEMA_VERSION = 1

# All arena endpoints live under this prefix
API_PREFIX = "/v1"
IDEMPOTENCY_HEADER = "Idempotency-Key"
DEFAULT_HTTP_TIMEOUT = 30.0  # seconds

# Step budgets for tool-augmented reasoning
RESEARCH_MAX_STEPS = 5
AGENTIC_MAX_STEPS = 10

# Research artifact embedding limits
RESEARCH_MAX_CHARS = 12_000
RESEARCH_TRUNCATION_MARKER = "\n\n[research truncated]"
RESEARCH_TOOL_SEPARATOR = "\n\n---\n\n"
EMPTY_RESEARCH_NOTE = "No research data was gathered for this interval."

# Structured output limits
REASONING_MAX_LENGTH = 2000
MAX_TRADES_PER_INTERVAL = 50
INTERVAL_MINUTES = 15

# Market data tools
DEFAULT_TAOSTATS_MCP_URL = "https://mcp.taostats.io?tools=data"

# Arena-side tool names used by the agentic strategy
PORTFOLIO_TOOL_NAME = "get_portfolio"
SUBMIT_TOOL_NAME = "submit_decision"

# LLM defaults
DEFAULT_LLM_PROVIDER = "xai"
PROVIDER_API_KEY_ENV = {
    "xai": "XAI_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
    "openai": "OPENAI_API_KEY",
}
PROVIDER_DEFAULT_MODELS = {
    "xai": "grok-3-mini",
    "openrouter": "x-ai/grok-3-mini",
    "openai": "gpt-4o-mini",
}
