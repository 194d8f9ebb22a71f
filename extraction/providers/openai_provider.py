# SPDX-License-Identifier: AGPL-3.0-only

"""
OpenAI provider client.

Relies on the chat completions JSON mode, so the content is parsed as-is.
Texts longer than the configured chunk size are split at paragraph/sentence
boundaries, converted chunk by chunk in parallel, and merged back together.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, List

import openai
from openai import OpenAI

from common.json_utils import merge_all, parse_json
from common.text_chunker import split_text

from ..errors import ProviderApiError
from ..models import Provider, TextChunk
from .base import SYSTEM_PROMPT, ProviderClient

logger = logging.getLogger(__name__)


class OpenAIClient(ProviderClient):
    """Client for the OpenAI chat completions API."""

    provider = Provider.OPENAI

    def process(self, text: str, api_key: str) -> Any:
        chunk_size = self.ai_config["openai"]["chunk_size"]
        if chunk_size <= 0 or len(text) <= chunk_size:
            return self._complete(SYSTEM_PROMPT, text, api_key)

        chunks = split_text(text, chunk_size)
        if len(chunks) == 1:
            return self._complete(SYSTEM_PROMPT, text, api_key)

        logger.info("OpenAI input of %d characters split into %d chunks", len(text), len(chunks))
        with ThreadPoolExecutor(max_workers=self.settings.effective_workers(len(chunks))) as executor:
            results: List[Any] = list(executor.map(lambda chunk: self._process_chunk(chunk, api_key), chunks))
        return merge_all(results)

    def _process_chunk(self, chunk: TextChunk, api_key: str) -> Any:
        system_prompt = (
            f"{SYSTEM_PROMPT}\n\n"
            f"This is chunk {chunk.index + 1} of {chunk.total} of a larger document. "
            "Structure only the content of this chunk; the results of all chunks will be merged."
        )
        return self._complete(system_prompt, chunk.text, api_key)

    def _complete(self, system_prompt: str, text: str, api_key: str) -> Any:
        """Issue one chat completion in JSON mode and parse its content."""
        client = OpenAI(api_key=api_key, timeout=self.ai_config["timeout"], max_retries=0)
        try:
            response = client.chat.completions.create(
                model=self.ai_config["openai"]["model"],
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": self.build_user_prompt(text)},
                ],
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as e:
            logger.error("OpenAI API error: %s", e)
            raise ProviderApiError(self.get_name(), str(e)) from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise ProviderApiError(self.get_name(), "No content returned from OpenAI")
        return parse_json(content)
