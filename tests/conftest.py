# SPDX-License-Identifier: AGPL-3.0-only

"""
Pytest configuration and fixtures.

This module provides shared fixtures and configuration for all tests.
Documents are built in memory so no fixture files are needed.
"""

import io
import zipfile

import pandas as pd
import pytest
from docx import Document
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas
from unittest.mock import Mock

from extraction.ai_service import AIProcessingService
from extraction.archive_service import ArchiveService
from extraction.config import ProcessingConfig
from extraction.pipeline import DocumentPipeline
from extraction.text_service import TextExtractionService


@pytest.fixture
def settings():
    """Configuration with small windows so chunking is easy to trigger."""
    return ProcessingConfig(chunk_size=200, chunk_lookahead=20, openai_chunk_size=120, ai_timeout=5)


@pytest.fixture
def sample_text():
    """Sample text content for testing."""
    return (
        "Quarterly Report\n\n"
        "Revenue grew by 12% compared to the previous quarter. Costs were flat.\n\n"
        "Outlook\n\n"
        "We expect continued growth in the next quarter."
    )


@pytest.fixture
def make_pdf():
    """Build a PDF with one line of text per page."""
    def _make(*pages):
        buffer = io.BytesIO()
        c = canvas.Canvas(buffer, pagesize=letter)
        for line in pages:
            c.drawString(100, 750, line)
            c.showPage()
        c.save()
        return buffer.getvalue()
    return _make


@pytest.fixture
def make_docx():
    """Build a Word document with the given paragraphs."""
    def _make(*paragraphs):
        document = Document()
        for paragraph in paragraphs:
            document.add_paragraph(paragraph)
        buffer = io.BytesIO()
        document.save(buffer)
        return buffer.getvalue()
    return _make


@pytest.fixture
def make_xlsx():
    """Build a workbook from a {sheet_name: rows} mapping."""
    def _make(sheets):
        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            for name, rows in sheets.items():
                pd.DataFrame(rows).to_excel(writer, sheet_name=name, index=False, header=False)
        return buffer.getvalue()
    return _make


@pytest.fixture
def make_zip():
    """Build a ZIP archive from (name, bytes) pairs; names ending in '/' become directories."""
    def _make(entries):
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as archive:
            for name, data in entries:
                if name.endswith("/"):
                    archive.writestr(zipfile.ZipInfo(name), b"")
                else:
                    archive.writestr(name, data)
        return buffer.getvalue()
    return _make


@pytest.fixture
def text_service():
    """Text extraction service instance."""
    return TextExtractionService()


@pytest.fixture
def archive_service(text_service):
    """Archive service instance."""
    return ArchiveService(text_service)


@pytest.fixture
def mock_ai_service():
    """Mock AI service returning a fixed object."""
    service = Mock(spec=AIProcessingService)
    service.dispatch.return_value = {"title": "Quarterly Report"}
    return service


@pytest.fixture
def pipeline(text_service, archive_service, mock_ai_service, settings):
    """Pipeline wired to real extraction and a mocked model."""
    return DocumentPipeline(
        text_service=text_service,
        archive_service=archive_service,
        ai_service=mock_ai_service,
        settings=settings,
    )
