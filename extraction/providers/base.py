# SPDX-License-Identifier: AGPL-3.0-only

"""
Base class for LLM provider clients.

Each provider client wraps one vendor's completion API and exposes a single
capability: turn document text into a parsed JSON value. Clients hold only
configuration; the caller's API key is passed on every call.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from common.json_utils import extract_json_object, parse_json, strip_control_characters

from ..config import ProcessingConfig, config as default_config
from ..models import Provider


SYSTEM_PROMPT = (
    "You are a data structuring assistant that ALWAYS responds with valid JSON. "
    "Your task is to analyze document content and convert it to a structured JSON format. "
    "IMPORTANT: Your entire response must be a single valid JSON object, with no additional "
    "text or explanation.\n\n"
    "Rules for JSON structure:\n"
    "1. Focus on actual content/text, ignore metadata\n"
    "2. Extract key information like title, sections, paragraphs\n"
    "3. Create a hierarchical structure preserving document organization\n"
    "4. Use descriptive keys (e.g., 'title', 'sections', 'paragraphs')\n"
    "5. All text must be properly escaped\n"
    "6. Use section titles as main JSON keys when present\n\n"
    "Remember: Your ENTIRE response must be a valid JSON object. Do not include any other text."
)

USER_PROMPT_PREFIX = "Please convert the following text into a structured JSON format:\n\n"


class ProviderClient(ABC):
    """Abstract base class for provider clients."""

    provider: Provider

    def __init__(self, settings: Optional[ProcessingConfig] = None):
        """
        Initialize the client.

        Args:
            settings: Configuration to read model names and limits from
        """
        self.settings = settings or default_config
        self.ai_config = self.settings.get_ai_config()

    @abstractmethod
    def process(self, text: str, api_key: str) -> Any:
        """
        Convert document text to a JSON value.

        Args:
            text: Document (or chunk) text
            api_key: Caller-supplied vendor credential

        Returns:
            Parsed JSON value
        """
        pass

    def get_name(self) -> str:
        """Get the human-readable provider name."""
        return self.provider.display_name

    @staticmethod
    def build_user_prompt(text: str) -> str:
        """Clean the text and wrap it in the conversion instruction."""
        return USER_PROMPT_PREFIX + strip_control_characters(text)

    @staticmethod
    def parse_response(content: str) -> Any:
        """Pull the JSON object out of a free-form response and parse it."""
        return parse_json(extract_json_object(content))
