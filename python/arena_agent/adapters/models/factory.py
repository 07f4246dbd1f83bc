"""
Model Factory - Creates agno model instances for the configured LLM provider

This factory:
1. Maps a provider name to a provider class
2. Validates that credentials are present
3. Creates the agno model with merged parameters
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from loguru import logger

from arena_agent.config.constants import PROVIDER_DEFAULT_MODELS


@dataclass
class ProviderConfig:
    """Credentials and defaults for one provider."""

    name: str
    api_key: Optional[str]
    default_model: str
    base_url: Optional[str] = None
    parameters: Dict[str, Any] = field(default_factory=dict)


class ModelProvider(ABC):
    """Abstract base class for model providers"""

    def __init__(self, config: ProviderConfig):
        self.config = config

    @abstractmethod
    def create_model(self, model_id: Optional[str] = None, **kwargs):
        """
        Create a model instance

        Args:
            model_id: Model identifier (uses default if None)
            **kwargs: Additional model parameters

        Returns:
            Model instance
        """

    def is_available(self) -> bool:
        """Check if provider credentials are available"""
        return bool(self.config.api_key)


class XaiProvider(ModelProvider):
    """xAI Grok model provider"""

    def create_model(self, model_id: Optional[str] = None, **kwargs):
        """Create xAI model via agno"""
        try:
            from agno.models.xai import xAI
        except ImportError:
            raise ImportError(
                "agno package not installed. Install with: pip install agno"
            )

        model_id = model_id or self.config.default_model
        params = {**self.config.parameters, **kwargs}

        logger.info("Creating xAI model: {}", model_id)

        return xAI(
            id=model_id,
            api_key=self.config.api_key,
            temperature=params.get("temperature"),
            max_tokens=params.get("max_tokens"),
        )


class OpenRouterProvider(ModelProvider):
    """OpenRouter model provider"""

    def create_model(self, model_id: Optional[str] = None, **kwargs):
        """Create OpenRouter model via agno"""
        try:
            from agno.models.openrouter import OpenRouter
        except ImportError:
            raise ImportError(
                "agno package not installed. Install with: pip install agno"
            )

        model_id = model_id or self.config.default_model
        params = {**self.config.parameters, **kwargs}

        logger.info("Creating OpenRouter model: {}", model_id)

        kwargs_out: Dict[str, Any] = {
            "id": model_id,
            "api_key": self.config.api_key,
            "temperature": params.get("temperature"),
            "max_tokens": params.get("max_tokens"),
        }
        if self.config.base_url:
            kwargs_out["base_url"] = self.config.base_url
        return OpenRouter(**kwargs_out)


class OpenAIProvider(ModelProvider):
    """OpenAI model provider"""

    def create_model(self, model_id: Optional[str] = None, **kwargs):
        """Create OpenAI chat model via agno"""
        try:
            from agno.models.openai import OpenAIChat
        except ImportError:
            raise ImportError("agno package not installed")

        model_id = model_id or self.config.default_model
        params = {**self.config.parameters, **kwargs}

        logger.info("Creating OpenAI model: {}", model_id)

        return OpenAIChat(
            id=model_id,
            api_key=self.config.api_key,
            temperature=params.get("temperature"),
            max_tokens=params.get("max_tokens"),
        )


# Registry of provider classes
PROVIDERS: Dict[str, type[ModelProvider]] = {
    "xai": XaiProvider,
    "openrouter": OpenRouterProvider,
    "openai": OpenAIProvider,
}


def create_model(
    provider: str,
    model_id: Optional[str] = None,
    api_key: Optional[str] = None,
    **kwargs,
):
    """
    Create a model from a specific provider

    Args:
        provider: Provider name (e.g., "xai", "openrouter")
        model_id: Model identifier (uses provider default if None)
        api_key: Provider API key
        **kwargs: Additional model parameters (temperature, max_tokens, ...)

    Returns:
        agno model instance

    Raises:
        ValueError: If provider is not supported or has no credentials
    """
    provider_class = PROVIDERS.get(provider)
    if provider_class is None:
        raise ValueError(f"Unsupported provider: {provider}")

    config = ProviderConfig(
        name=provider,
        api_key=api_key,
        default_model=PROVIDER_DEFAULT_MODELS[provider],
    )
    provider_instance = provider_class(config)
    if not provider_instance.is_available():
        raise ValueError(f"Provider validation failed: no API key for {provider}")

    return provider_instance.create_model(model_id, **kwargs)
