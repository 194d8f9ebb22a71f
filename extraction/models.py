# SPDX-License-Identifier: AGPL-3.0-only

"""
Pydantic models for the document processing system.

This module defines the core data structures that flow through the upload
pipeline. None of them outlive a single request.
"""

import os
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from .errors import UnsupportedModelError


class Provider(str, Enum):
    """Supported LLM backends."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"

    @classmethod
    def parse(cls, value) -> "Provider":
        """Map a caller-supplied model name onto a provider."""
        if isinstance(value, cls):
            return value
        normalized = str(value or "").strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            raise UnsupportedModelError(str(value)) from None

    @property
    def display_name(self) -> str:
        return {"openai": "OpenAI", "anthropic": "Anthropic", "gemini": "Gemini"}[self.value]


class UploadedFile(BaseModel):
    """A file as received from the multipart form."""
    filename: str = Field(description="Original filename")
    content: bytes = Field(repr=False, description="Raw file bytes")
    mimetype: Optional[str] = Field(None, description="Declared MIME type")

    @property
    def extension(self) -> str:
        """Lower-cased extension with leading dot, or '' when there is none."""
        return os.path.splitext(self.filename or "")[1].lower()


class ExtractedDocument(BaseModel):
    """Plain text recovered from one logical document."""
    filename: str = Field(description="Name of the file the text came from")
    text: str = Field("", description="Extracted text")
    error: Optional[str] = Field(None, description="Set when extraction failed for an archive entry")

    @property
    def failed(self) -> bool:
        return self.error is not None


class TextChunk(BaseModel):
    """Contiguous slice of a document's text sent in one model call."""
    index: int = Field(ge=0, description="Zero-based position of the chunk")
    total: int = Field(ge=1, description="Number of chunks in the parent document")
    text: str = Field(description="Chunk text")


class ModelRequest(BaseModel):
    """One model call: the text, where to send it, and the caller's key."""
    text: str
    provider: Provider
    api_key: str = Field(repr=False)
