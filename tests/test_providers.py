# SPDX-License-Identifier: AGPL-3.0-only

import json
import re

import openai
import pytest
import requests
from unittest.mock import MagicMock, Mock, patch

from extraction.errors import JsonParseError, NoJsonFoundError, ProviderApiError
from extraction.models import Provider
from extraction.providers import (
    PROVIDER_CLIENTS,
    AnthropicClient,
    GeminiClient,
    OpenAIClient,
    build_clients,
)
from extraction.providers.base import SYSTEM_PROMPT, USER_PROMPT_PREFIX


def _openai_response(content):
    response = MagicMock()
    response.choices[0].message.content = content
    return response


def _anthropic_response(text, status_code=200):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = {"content": [{"type": "text", "text": text}]}
    response.text = text
    return response


class TestRegistry:
    """Every provider has exactly one client."""

    def test_registry_covers_all_providers(self):
        assert set(PROVIDER_CLIENTS) == set(Provider)

    def test_build_clients(self, settings):
        clients = build_clients(settings)
        assert isinstance(clients[Provider.OPENAI], OpenAIClient)
        assert isinstance(clients[Provider.ANTHROPIC], AnthropicClient)
        assert isinstance(clients[Provider.GEMINI], GeminiClient)
        assert all(client.settings is settings for client in clients.values())


class TestOpenAIClient:
    """Test suite for the OpenAI client."""

    @pytest.fixture
    def client(self, settings):
        return OpenAIClient(settings)

    @patch("extraction.providers.openai_provider.OpenAI")
    def test_uses_json_mode_and_callers_key(self, mock_openai, client):
        mock_openai.return_value.chat.completions.create.return_value = _openai_response('{"title": "Doc"}')

        assert client.process("Doc\x00text", "sk-caller") == {"title": "Doc"}

        mock_openai.assert_called_once_with(api_key="sk-caller", timeout=5, max_retries=0)
        kwargs = mock_openai.return_value.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["messages"][0] == {"role": "system", "content": SYSTEM_PROMPT}
        assert kwargs["messages"][1]["content"] == USER_PROMPT_PREFIX + "Doc text"

    @patch("extraction.providers.openai_provider.OpenAI")
    def test_two_calls_with_different_keys(self, mock_openai, client):
        mock_openai.return_value.chat.completions.create.return_value = _openai_response("{}")
        client.process("a", "key-one")
        client.process("b", "key-two")
        keys = [call.kwargs["api_key"] for call in mock_openai.call_args_list]
        assert keys == ["key-one", "key-two"]

    @patch("extraction.providers.openai_provider.OpenAI")
    def test_sdk_error_becomes_provider_error(self, mock_openai, client):
        mock_openai.return_value.chat.completions.create.side_effect = openai.OpenAIError("Incorrect API key provided")
        with pytest.raises(ProviderApiError) as exc_info:
            client.process("text", "bad")
        assert str(exc_info.value) == "Failed to process text with OpenAI: Incorrect API key provided"

    @patch("extraction.providers.openai_provider.OpenAI")
    def test_empty_content_is_an_error(self, mock_openai, client):
        mock_openai.return_value.chat.completions.create.return_value = _openai_response(None)
        with pytest.raises(ProviderApiError, match="No content returned"):
            client.process("text", "key")

    @patch("extraction.providers.openai_provider.OpenAI")
    def test_invalid_json_content(self, mock_openai, client):
        mock_openai.return_value.chat.completions.create.return_value = _openai_response("not json")
        with pytest.raises(JsonParseError):
            client.process("text", "key")

    @patch("extraction.providers.openai_provider.OpenAI")
    def test_long_text_is_chunked_and_merged(self, mock_openai, client):
        paragraphs = [f"Paragraph {i} " + "x" * 50 for i in range(4)]
        text = "\n\n".join(paragraphs)

        def respond(**kwargs):
            system = kwargs["messages"][0]["content"]
            chunk_no = int(re.search(r"This is chunk (\d+) of (\d+)", system).group(1))
            return _openai_response(json.dumps({"sections": [chunk_no], "title": "Report"}))

        mock_openai.return_value.chat.completions.create.side_effect = respond

        result = client.process(text, "key")

        calls = mock_openai.return_value.chat.completions.create.call_count
        assert calls == 4
        assert result == {"sections": [1, 2, 3, 4], "title": "Report"}


class TestAnthropicClient:
    """Test suite for the Anthropic client."""

    @pytest.fixture
    def client(self, settings):
        return AnthropicClient(settings)

    @patch("extraction.providers.anthropic_provider.requests.post")
    def test_extracts_json_from_prose(self, mock_post, client):
        mock_post.return_value = _anthropic_response('Sure! {"a":1} Hope that helps')

        assert client.process("hello", "ak-caller") == {"a": 1}

        kwargs = mock_post.call_args.kwargs
        assert kwargs["headers"]["x-api-key"] == "ak-caller"
        assert kwargs["json"]["system"] == SYSTEM_PROMPT
        assert kwargs["json"]["model"] == "claude-3-5-haiku-latest"
        assert kwargs["json"]["max_tokens"] == 4096
        assert kwargs["json"]["messages"][0]["content"][0]["text"] == USER_PROMPT_PREFIX + "hello"
        assert kwargs["timeout"] == 5

    @patch("extraction.providers.anthropic_provider.requests.post")
    def test_no_json_in_response(self, mock_post, client):
        mock_post.return_value = _anthropic_response("I cannot help with that.")
        with pytest.raises(NoJsonFoundError, match="No valid JSON found"):
            client.process("hello", "key")

    @patch("extraction.providers.anthropic_provider.requests.post")
    def test_api_error_message_is_passed_through(self, mock_post, client):
        response = Mock(status_code=401, text="")
        response.json.return_value = {"error": {"type": "authentication_error", "message": "invalid x-api-key"}}
        mock_post.return_value = response
        with pytest.raises(ProviderApiError) as exc_info:
            client.process("hello", "bad")
        assert "invalid x-api-key" in str(exc_info.value)
        assert str(exc_info.value).startswith("Failed to process text with Anthropic")

    @patch("extraction.providers.anthropic_provider.requests.post")
    def test_non_json_body_becomes_provider_error(self, mock_post, client):
        response = Mock(status_code=200, text="<html>gateway</html>")
        response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
        mock_post.return_value = response
        with pytest.raises(ProviderApiError, match="not valid JSON"):
            client.process("hello", "key")

    @patch("extraction.providers.anthropic_provider.requests.post")
    def test_timeout(self, mock_post, client):
        mock_post.side_effect = requests.exceptions.Timeout()
        with pytest.raises(ProviderApiError, match="Request timeout"):
            client.process("hello", "key")
        assert mock_post.call_count == 1


class TestGeminiClient:
    """Test suite for the Gemini client."""

    @pytest.fixture
    def client(self, settings):
        return GeminiClient(settings)

    @patch("extraction.providers.gemini_provider.genai.Client")
    def test_extracts_json_from_prose(self, mock_client_cls, client):
        mock_client_cls.return_value.models.generate_content.return_value = Mock(
            text='```json\n{"title": "Doc", "items": [1]}\n```'
        )

        assert client.process("body", "g-key") == {"title": "Doc", "items": [1]}

        assert mock_client_cls.call_args.kwargs["api_key"] == "g-key"
        kwargs = mock_client_cls.return_value.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.0-flash-exp"
        assert kwargs["contents"] == USER_PROMPT_PREFIX + "body"
        assert kwargs["config"].system_instruction == SYSTEM_PROMPT
        assert kwargs["config"].temperature == 0.1
        assert kwargs["config"].max_output_tokens == 4096

    @patch("extraction.providers.gemini_provider.genai.Client")
    def test_sdk_error_becomes_provider_error(self, mock_client_cls, client):
        mock_client_cls.return_value.models.generate_content.side_effect = RuntimeError("API key not valid")
        with pytest.raises(ProviderApiError, match="API key not valid"):
            client.process("body", "bad")

    @patch("extraction.providers.gemini_provider.genai.Client")
    def test_no_json_in_response(self, mock_client_cls, client):
        mock_client_cls.return_value.models.generate_content.return_value = Mock(text="Nothing structured here")
        with pytest.raises(NoJsonFoundError):
            client.process("body", "key")
