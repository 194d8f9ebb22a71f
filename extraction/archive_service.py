# SPDX-License-Identifier: AGPL-3.0-only

"""
Archive expansion service.

A ZIP upload is treated as a bundle of documents: every file entry is run
through the text extraction service on its own, so one broken entry never
takes the rest of the archive down with it.
"""

import io
import logging
import os
import zipfile
from typing import List, Optional

from .config import config as default_config
from .errors import ExtractionError
from .models import ExtractedDocument
from .text_service import TextExtractionService

logger = logging.getLogger(__name__)


class ArchiveService:
    """Service for expanding ZIP archives into extracted documents."""

    def __init__(self, text_service: TextExtractionService, max_entry_size: Optional[int] = None):
        """
        Initialize the archive service.

        Args:
            text_service: Service used to extract each entry's text
            max_entry_size: Largest uncompressed entry, in bytes, that will be read
                (defaults to the upload size limit)
        """
        self.text_service = text_service
        self.max_entry_size = max_entry_size or default_config.max_file_size

    def expand(self, content: bytes) -> List[ExtractedDocument]:
        """
        Expand a ZIP archive into one document per file entry.

        Args:
            content: Raw ZIP bytes

        Returns:
            Documents in archive order; failed entries are placeholders whose
            error and text carry the failure message

        Raises:
            ExtractionError: If the archive itself cannot be opened
        """
        try:
            archive = zipfile.ZipFile(io.BytesIO(content))
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError) as e:
            raise ExtractionError("zip", str(e)) from e

        documents = []
        with archive:
            for info in archive.infolist():
                if info.is_dir():
                    continue
                documents.append(self._extract_entry(archive, info))

        logger.info("Expanded archive into %d documents", len(documents))
        return documents

    def _extract_entry(self, archive: zipfile.ZipFile, info: zipfile.ZipInfo) -> ExtractedDocument:
        """Extract one entry, converting any failure into a placeholder."""
        filename = info.filename
        extension = os.path.splitext(filename)[1].lower()
        try:
            if extension == ".zip":
                raise ExtractionError("zip", "nested archives are not supported")
            if info.file_size > self.max_entry_size:
                raise ExtractionError(
                    "zip",
                    f"entry expands to {info.file_size} bytes (limit {self.max_entry_size})",
                )
            raw = archive.read(info)
            text = self.text_service.extract(raw, extension)
        except ExtractionError as e:
            return self._placeholder(filename, str(e))
        except Exception as e:
            return self._placeholder(filename, f"Failed to read {filename}: {e}")
        return ExtractedDocument(filename=filename, text=text)

    @staticmethod
    def _placeholder(filename: str, message: str) -> ExtractedDocument:
        logger.warning("Archive entry %s failed: %s", filename, message)
        return ExtractedDocument(filename=filename, text=message, error=message)
