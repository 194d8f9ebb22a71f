# SPDX-License-Identifier: AGPL-3.0-only

"""
Provider client registration.

The set of providers is closed: every member of ``Provider`` maps to exactly
one client class here.
"""

from typing import Dict, Optional, Type

from ..config import ProcessingConfig
from ..models import Provider
from .base import ProviderClient
from .anthropic_provider import AnthropicClient
from .gemini_provider import GeminiClient
from .openai_provider import OpenAIClient


PROVIDER_CLIENTS: Dict[Provider, Type[ProviderClient]] = {
    Provider.OPENAI: OpenAIClient,
    Provider.ANTHROPIC: AnthropicClient,
    Provider.GEMINI: GeminiClient,
}


def build_clients(settings: Optional[ProcessingConfig] = None) -> Dict[Provider, ProviderClient]:
    """
    Instantiate one client per provider.

    Args:
        settings: Configuration shared by all clients

    Returns:
        Mapping of provider to its client
    """
    return {provider: client_cls(settings) for provider, client_cls in PROVIDER_CLIENTS.items()}


__all__ = [
    "AnthropicClient",
    "GeminiClient",
    "OpenAIClient",
    "PROVIDER_CLIENTS",
    "ProviderClient",
    "build_clients",
]
