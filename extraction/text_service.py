# SPDX-License-Identifier: AGPL-3.0-only

"""
Text extraction service for uploaded documents.

This module turns the raw bytes of an upload into plain text, delegating
each binary format to a dedicated decoder: PyPDF2 for PDF text layers,
python-docx for Word documents and pandas for spreadsheets. Everything else
is treated as UTF-8 text.
"""

import io
import logging
from typing import Callable, Dict, List, Optional

import pandas as pd
from docx import Document
from PyPDF2 import PdfReader

from .config import config
from .errors import ExtractionError

logger = logging.getLogger(__name__)


class TextExtractionService:
    """Service for extracting plain text from uploaded file bytes."""

    def __init__(self, code_extensions: Optional[List[str]] = None):
        """
        Initialize the text extraction service.

        Args:
            code_extensions: Extensions that get a "File type" banner so the
                model knows what kind of source it is reading
        """
        if code_extensions is None:
            code_extensions = config.code_extensions
        self.code_extensions = {ext.lower() for ext in code_extensions}
        self._decoders: Dict[str, Callable[[bytes], str]] = {
            ".docx": self._extract_docx,
            ".pdf": self._extract_pdf,
            ".xlsx": self._extract_xlsx,
        }

    def extract(self, content: bytes, extension: str) -> str:
        """
        Extract text from file bytes.

        Args:
            content: Raw file bytes
            extension: File extension including the leading dot

        Returns:
            Plain text content

        Raises:
            ExtractionError: If a binary format cannot be decoded
        """
        extension = (extension or "").lower()
        decoder = self._decoders.get(extension)
        if decoder is not None:
            text = decoder(content)
        else:
            text = self._extract_plain(content, extension)
        logger.debug("Extracted %d characters from %s content", len(text), extension or "extensionless")
        return text

    def _extract_plain(self, content: bytes, extension: str) -> str:
        """Decode bytes as UTF-8, adding a banner for known code formats."""
        text = content.decode("utf-8", errors="replace")
        if text.startswith("\ufeff"):
            text = text[1:]
        if extension in self.code_extensions:
            text = f"File type: {extension.lstrip('.').upper()}\n\n{text}"
        return text

    def _extract_docx(self, content: bytes) -> str:
        """Extract paragraph text from a Word document."""
        try:
            document = Document(io.BytesIO(content))
        except Exception as e:
            raise ExtractionError("docx", str(e) or type(e).__name__) from e
        return "\n".join(paragraph.text for paragraph in document.paragraphs)

    def _extract_pdf(self, content: bytes) -> str:
        """Extract the text layer of a PDF, one block per page."""
        try:
            reader = PdfReader(io.BytesIO(content))
            if reader.is_encrypted:
                raise ExtractionError("pdf", "document is encrypted")
            pages_text = [page.extract_text() or "" for page in reader.pages]
        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError("pdf", str(e) or type(e).__name__) from e
        return "\n".join(pages_text)

    def _extract_xlsx(self, content: bytes) -> str:
        """Flatten every sheet of a workbook to CSV under a 'Sheet: <name>' header."""
        try:
            sheets = pd.read_excel(
                io.BytesIO(content), sheet_name=None, header=None, dtype=str, engine="openpyxl"
            )
        except Exception as e:
            raise ExtractionError("xlsx", str(e) or type(e).__name__) from e

        blocks = []
        for name, frame in sheets.items():
            csv_text = frame.to_csv(index=False, header=False).rstrip("\n")
            blocks.append(f"Sheet: {name}\n{csv_text}")
        return "\n\n".join(blocks)
