"""Model utility functions built on the provider factory."""

from loguru import logger

from arena_agent.config.settings import AgentSettings


def create_model_from_settings(settings: AgentSettings, **kwargs):
    """
    Create the agno model configured for this agent.

    Args:
        settings: Resolved agent settings (provider, model id, API key)
        **kwargs: Additional parameters passed to the provider
                  (e.g., temperature, max_tokens)

    Returns:
        Model instance for the configured provider

    Raises:
        ValueError: If the provider is unsupported or lacks credentials
    """
    from arena_agent.adapters.models.factory import create_model

    try:
        return create_model(
            provider=settings.llm_provider,
            model_id=settings.model_id,
            api_key=settings.llm_api_key.get_secret_value(),
            **kwargs,
        )
    except Exception as e:
        logger.error("Failed to create model for provider {}: {}", settings.llm_provider, e)
        if "API key" in str(e):
            logger.error(
                "Hint: Make sure to set the provider API key in .env or GitHub Secrets."
            )
        raise
