# SPDX-License-Identifier: AGPL-3.0-only

"""
Anthropic provider client.

Talks to the Messages API with direct HTTP requests. Claude has no JSON
mode, so the object is cut out of whatever prose surrounds it.
"""

import logging
from typing import Any, Dict

import requests

from ..errors import ProviderApiError
from ..models import Provider
from .base import SYSTEM_PROMPT, ProviderClient

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicClient(ProviderClient):
    """Client for the Anthropic Messages API."""

    provider = Provider.ANTHROPIC

    def process(self, text: str, api_key: str) -> Any:
        anthropic_config = self.ai_config["anthropic"]
        payload = {
            "model": anthropic_config["model"],
            "max_tokens": anthropic_config["max_tokens"],
            "system": SYSTEM_PROMPT,
            "messages": [
                {
                    "role": "user",
                    "content": [{"type": "text", "text": self.build_user_prompt(text)}],
                }
            ],
        }
        headers = {
            "Content-Type": "application/json",
            "x-api-key": api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }

        try:
            response = requests.post(
                self.settings.anthropic_api_url,
                json=payload,
                headers=headers,
                timeout=self.ai_config["timeout"],
            )
        except requests.exceptions.Timeout as e:
            raise ProviderApiError(self.get_name(), "Request timeout") from e
        except requests.exceptions.RequestException as e:
            raise ProviderApiError(self.get_name(), str(e)) from e

        if response.status_code != 200:
            detail = self._error_detail(response)
            logger.error("Anthropic API returned status %s: %s", response.status_code, detail)
            raise ProviderApiError(self.get_name(), detail)

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderApiError(self.get_name(), "Response body is not valid JSON") from e
        content = self._collect_text(data)
        if not content:
            raise ProviderApiError(self.get_name(), "No content returned from Anthropic")
        return self.parse_response(content)

    @staticmethod
    def _collect_text(data: Dict[str, Any]) -> str:
        parts = []
        for block in data.get("content") or []:
            if isinstance(block, dict) and block.get("type") == "text" and block.get("text"):
                parts.append(block["text"])
        return "\n".join(parts)

    @staticmethod
    def _error_detail(response: requests.Response) -> str:
        """Prefer the API's own error message over the bare status line."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and error.get("message"):
                return f"{response.status_code} {error['message']}"
        excerpt = (response.text or "").strip()[:200]
        if excerpt:
            return f"{response.status_code} {excerpt}"
        return f"API returned status {response.status_code}"
