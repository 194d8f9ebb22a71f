# SPDX-License-Identifier: AGPL-3.0-only

"""
Gemini provider client using the google-genai SDK.
"""

import logging
from typing import Any

from google import genai
from google.genai import types

from ..errors import ProviderApiError
from ..models import Provider
from .base import SYSTEM_PROMPT, ProviderClient

logger = logging.getLogger(__name__)


class GeminiClient(ProviderClient):
    """Client for the Gemini generate-content API."""

    provider = Provider.GEMINI

    def process(self, text: str, api_key: str) -> Any:
        gemini_config = self.ai_config["gemini"]
        client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=self.ai_config["timeout"] * 1000),
        )
        try:
            response = client.models.generate_content(
                model=gemini_config["model"],
                contents=self.build_user_prompt(text),
                config=types.GenerateContentConfig(
                    system_instruction=SYSTEM_PROMPT,
                    temperature=gemini_config["temperature"],
                    max_output_tokens=gemini_config["max_output_tokens"],
                ),
            )
            content = response.text
        except Exception as e:
            logger.error("Gemini API error: %s", e)
            raise ProviderApiError(self.get_name(), str(e)) from e

        if not content:
            raise ProviderApiError(self.get_name(), "No content returned from Gemini")
        return self.parse_response(content)
