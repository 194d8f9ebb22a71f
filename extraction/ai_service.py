# SPDX-License-Identifier: AGPL-3.0-only

"""
AI service for document structuring.

This module routes extracted text to the provider client the caller asked
for. Routing is a lookup over the closed ``Provider`` enum; the caller's API
key travels with each call and is never stored.
"""

import logging
from typing import Any, Dict, Optional

from .config import ProcessingConfig
from .errors import MissingApiKey
from .models import ModelRequest, Provider
from .providers import ProviderClient, build_clients

logger = logging.getLogger(__name__)


class AIProcessingService:
    """Service that dispatches text to an LLM provider and returns its JSON."""

    def __init__(
        self,
        clients: Optional[Dict[Provider, ProviderClient]] = None,
        settings: Optional[ProcessingConfig] = None,
    ):
        """
        Initialize the AI processing service.

        Args:
            clients: Provider clients to route to (built from settings if omitted)
            settings: Configuration used when building default clients
        """
        self.clients = clients if clients is not None else build_clients(settings)

    def dispatch(self, text: str, provider, api_key: str) -> Any:
        """
        Convert text to structured JSON with the selected provider.

        Args:
            text: Document or chunk text
            provider: Provider enum member or its name
            api_key: Caller-supplied vendor credential

        Returns:
            Parsed JSON value from the provider

        Raises:
            UnsupportedModelError: If the provider name is unknown
            MissingApiKey: If no key was given
        """
        if not api_key:
            raise MissingApiKey()
        request = ModelRequest(text=text, provider=Provider.parse(provider), api_key=api_key)
        return self.process_request(request)

    def process_request(self, request: ModelRequest) -> Any:
        """Run one model request against its provider client."""
        client = self.clients[request.provider]
        logger.info("Sending %d characters to %s", len(request.text), client.get_name())
        return client.process(request.text, request.api_key)
