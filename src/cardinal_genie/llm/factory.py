from typing import Any

from .base import ChatProvider
from .providers import HostedGenieProvider, OpenAIGatewayProvider


def create_chat_provider(provider: str, **config: Any) -> ChatProvider:
    """Create a chat provider instance.

    This factory function hides the instantiation logic for different backends.

    Args:
        provider: Provider type ('hosted', 'openai')
        **config: Provider-specific configuration
            For hosted (the Cardinal Genie functions):
                - api_key: str (required)
                - base_url: str (required)
                - read_timeout: float (default: 60.0)
                - connect_timeout: float (default: 10.0)
            For openai (direct OpenAI-compatible gateway):
                - api_key: str (required)
                - model: str (default: 'google/gemini-2.5-flash')
                - base_url: str | None
                - timeout: float (default: 60.0)

    Returns:
        Initialized chat provider instance

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> provider = create_chat_provider(
        ...     "hosted",
        ...     api_key="eyJ...",
        ...     base_url="https://project.supabase.co"
        ... )
    """
    provider_lower = provider.lower()

    if provider_lower in ("hosted", "genie", "supabase"):
        if "api_key" not in config:
            raise TypeError("Hosted provider requires 'api_key' in config")
        if "base_url" not in config:
            raise TypeError("Hosted provider requires 'base_url' in config")
        return HostedGenieProvider(**config)

    if provider_lower in ("openai", "gateway"):
        if "api_key" not in config:
            raise TypeError("OpenAI provider requires 'api_key' in config")
        return OpenAIGatewayProvider(**config)

    raise ValueError(
        f"Unsupported provider: {provider}. "
        f"Supported providers: 'hosted', 'openai'"
    )
