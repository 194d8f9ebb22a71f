# SPDX-License-Identifier: AGPL-3.0-only

"""
Configuration service for the document processing system.

This module centralizes all configuration settings for the upload pipeline,
supporting environment variable overrides and validation.
"""

from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_ALLOWED_EXTENSIONS = [
    ".txt", ".csv", ".pdf", ".docx", ".xlsx", ".zip",
    ".js", ".jsx", ".ts", ".tsx", ".css", ".html", ".htm",
    ".php", ".sql", ".json", ".py", ".md", ".markdown", ".xml",
]

DEFAULT_CODE_EXTENSIONS = [
    ".js", ".jsx", ".ts", ".tsx", ".css", ".html", ".htm",
    ".php", ".sql", ".json", ".py", ".md", ".markdown", ".xml",
]


class ProcessingConfig(BaseSettings):
    """Configuration settings for the document processing system."""

    model_config = SettingsConfigDict(env_prefix="DOCJSON_", case_sensitive=False)

    # Chunking settings
    chunk_size: int = Field(default=100_000, description="Upload-level window size in characters")
    chunk_lookahead: int = Field(default=1_000, description="How far a window boundary may move to reach a break")
    openai_chunk_size: int = Field(default=12_000, description="Max characters per OpenAI call before splitting")

    # Upload settings
    max_file_size: int = Field(default=10 * 1024 * 1024, description="Max upload size in bytes (10MB)")
    allowed_extensions: List[str] = Field(default_factory=lambda: list(DEFAULT_ALLOWED_EXTENSIONS))
    code_extensions: List[str] = Field(default_factory=lambda: list(DEFAULT_CODE_EXTENSIONS))

    # Concurrency settings
    max_workers: Optional[int] = Field(default=None, description="Cap on concurrent model calls (None = one per call)")

    # AI service settings
    ai_timeout: int = Field(default=120, description="Per-call AI service timeout in seconds")

    # OpenAI settings
    openai_model: str = Field(default="gpt-4o", description="OpenAI model name")

    # Anthropic settings
    anthropic_model: str = Field(default="claude-3-5-haiku-latest", description="Anthropic model name")
    anthropic_max_tokens: int = Field(default=4096, description="Anthropic max output tokens")
    anthropic_api_url: str = Field(default="https://api.anthropic.com/v1/messages", description="Anthropic messages endpoint")

    # Gemini settings
    gemini_model: str = Field(default="gemini-2.0-flash-exp", description="Gemini model name")
    gemini_temperature: float = Field(default=0.1, description="Gemini sampling temperature")
    gemini_max_output_tokens: int = Field(default=4096, description="Gemini max output tokens")

    # HTTP settings
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"],
        description="Origins allowed to call /api/*",
    )
    log_level: str = Field(default="INFO", description="Root log level")

    def get_ai_config(self) -> dict:
        """Get AI service configuration."""
        return {
            "timeout": self.ai_timeout,
            "openai": {
                "model": self.openai_model,
                "chunk_size": self.openai_chunk_size,
            },
            "anthropic": {
                "model": self.anthropic_model,
                "max_tokens": self.anthropic_max_tokens,
            },
            "gemini": {
                "model": self.gemini_model,
                "temperature": self.gemini_temperature,
                "max_output_tokens": self.gemini_max_output_tokens,
            },
        }

    def get_upload_config(self) -> dict:
        """Get upload configuration."""
        return {
            "max_file_size": self.max_file_size,
            "allowed_extensions": self.allowed_extensions,
        }

    def is_allowed_extension(self, extension: str) -> bool:
        """Check an extension (with leading dot) against the upload allow-list."""
        return extension.lower() in self.allowed_extensions

    def effective_workers(self, jobs: int) -> int:
        """Number of threads to use for ``jobs`` concurrent model calls."""
        if self.max_workers:
            return max(1, min(self.max_workers, jobs))
        return max(1, jobs)


# Global configuration instance
config = ProcessingConfig()
