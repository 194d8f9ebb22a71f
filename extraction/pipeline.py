# SPDX-License-Identifier: AGPL-3.0-only

"""
Main processing pipeline.

This module orchestrates the services behind an upload: text extraction (or
archive expansion), window chunking, model dispatch and result aggregation.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, List, Optional, Sequence

from common.json_utils import merge_all
from common.text_chunker import chunk_text_windows

from .ai_service import AIProcessingService
from .archive_service import ArchiveService
from .config import ProcessingConfig, config as default_config
from .models import ExtractedDocument, Provider, UploadedFile
from .text_service import TextExtractionService

logger = logging.getLogger(__name__)


class DocumentPipeline:
    """Main pipeline for converting uploads to structured JSON."""

    def __init__(
        self,
        text_service: TextExtractionService,
        archive_service: ArchiveService,
        ai_service: AIProcessingService,
        settings: Optional[ProcessingConfig] = None,
    ):
        """
        Initialize the processing pipeline.

        Args:
            text_service: Service for text extraction
            archive_service: Service for ZIP expansion
            ai_service: Service for model dispatch
            settings: Chunking and concurrency configuration
        """
        self.text_service = text_service
        self.archive_service = archive_service
        self.ai_service = ai_service
        self.settings = settings or default_config

    def process(self, upload: UploadedFile, provider, api_key: str) -> Any:
        """
        Convert an uploaded file to structured JSON.

        Args:
            upload: The uploaded file
            provider: Provider enum member or its name
            api_key: Caller-supplied vendor credential

        Returns:
            The provider's JSON for a single-chunk document, otherwise a
            ``multi_file`` or ``chunked_document`` wrapper
        """
        provider = Provider.parse(provider)
        extension = upload.extension
        logger.info("Processing %s (%d bytes) with %s", upload.filename, len(upload.content), provider.value)

        if extension == ".zip":
            documents = self.archive_service.expand(upload.content)
            contents = self._run_concurrently(
                [lambda doc=doc: self.process_document(doc, provider, api_key) for doc in documents]
            )
            return {
                "type": "multi_file",
                "files": [
                    {"filename": doc.filename, "content": content}
                    for doc, content in zip(documents, contents)
                ],
            }

        text = self.text_service.extract(upload.content, extension)
        document = ExtractedDocument(filename=upload.filename, text=text)
        return self.process_document(document, provider, api_key)

    def process_document(self, document: ExtractedDocument, provider: Provider, api_key: str) -> Any:
        """
        Convert one extracted document, chunking it when it is too large.

        Placeholders for failed archive entries are answered locally with an
        error object instead of a model call.
        """
        if document.failed:
            return {"error": document.error}

        chunks = chunk_text_windows(document.text, self.settings.chunk_size, self.settings.chunk_lookahead)
        if len(chunks) <= 1:
            return self.ai_service.dispatch(document.text, provider, api_key)

        logger.info("%s split into %d chunks", document.filename, len(chunks))
        results = self._run_concurrently(
            [lambda chunk=chunk: self.ai_service.dispatch(chunk.text, provider, api_key) for chunk in chunks]
        )
        return {
            "type": "chunked_document",
            "total_chunks": len(chunks),
            "merged_content": merge_all(results),
        }

    def _run_concurrently(self, calls: Sequence[Callable[[], Any]]) -> List[Any]:
        """Run calls on a thread pool and return their results in order.

        Every call settles before this returns; the first failure (in call
        order) is then re-raised.
        """
        if not calls:
            return []
        if len(calls) == 1:
            return [calls[0]()]

        with ThreadPoolExecutor(max_workers=self.settings.effective_workers(len(calls))) as executor:
            futures = [executor.submit(call) for call in calls]
        return [future.result() for future in futures]


def build_pipeline(settings: Optional[ProcessingConfig] = None) -> DocumentPipeline:
    """Wire the default services into a pipeline."""
    settings = settings or default_config
    text_service = TextExtractionService(settings.code_extensions)
    return DocumentPipeline(
        text_service=text_service,
        archive_service=ArchiveService(text_service, settings.max_file_size),
        ai_service=AIProcessingService(settings=settings),
        settings=settings,
    )
