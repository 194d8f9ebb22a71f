# SPDX-License-Identifier: AGPL-3.0-only

"""
Error taxonomy for the document processing pipeline.

Every error raised on the request path derives from ``ProcessingError`` and
carries the HTTP status the API layer answers with. The message is what the
caller sees, so keep it human-readable.
"""

from typing import Optional


class ProcessingError(Exception):
    """Base class for all request-level processing failures."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class NoFileUploaded(ProcessingError):
    status_code = 400

    def __init__(self, message: str = "No file uploaded"):
        super().__init__(message)


class MissingApiKey(ProcessingError):
    status_code = 400

    def __init__(self, message: str = "API key is required"):
        super().__init__(message)


class UnsupportedFileType(ProcessingError):
    status_code = 400

    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(f"Unsupported file type: {extension or '(none)'}")


class ExtractionError(ProcessingError):
    """Text could not be extracted from a document of the given format."""

    def __init__(self, format: str, detail: Optional[str] = None):
        self.format = format
        self.detail = detail
        message = f"Failed to extract text from {format.upper()} file"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class UnsupportedModelError(ProcessingError):
    def __init__(self, model: str):
        self.model = model
        super().__init__(f"Unsupported AI model: {model}")


class NoJsonFoundError(ProcessingError):
    def __init__(self, message: str = "No valid JSON found in the response"):
        super().__init__(message)


class JsonParseError(ProcessingError):
    def __init__(self, raw_text: str = ""):
        self.raw_text = raw_text
        super().__init__(
            "Failed to parse AI response as JSON. The response might contain invalid characters."
        )


class ProviderApiError(ProcessingError):
    """The vendor SDK or HTTP API failed; its message is passed through."""

    def __init__(self, provider: str, detail: str):
        self.provider = provider
        self.detail = detail
        super().__init__(f"Failed to process text with {provider}: {detail}")
