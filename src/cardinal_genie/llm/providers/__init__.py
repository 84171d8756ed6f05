from .hosted import HostedGenieProvider
from .openai import OpenAIGatewayProvider

__all__ = ["HostedGenieProvider", "OpenAIGatewayProvider"]
