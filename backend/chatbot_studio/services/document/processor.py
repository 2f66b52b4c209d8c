"""
Text extraction for uploaded documents.
"""
import logging
from pathlib import Path

import aiofiles
import pdfplumber
from starlette.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"


class UnsupportedDocumentError(Exception):
    """Raised when no extractor exists for a MIME type."""
    pass


class DocumentProcessor:
    """Extracts plain text from stored documents."""

    @staticmethod
    def extract_pdf_text(file_path: str | Path) -> str:
        """Extract page text from a PDF, pages separated by blank lines."""
        text_parts = []

        with pdfplumber.open(file_path) as pdf:
            for page in pdf.pages:
                page_text = page.extract_text()
                if page_text:
                    text_parts.append(page_text)

        return "\n\n".join(text_parts)

    @staticmethod
    async def process(file_path: str | Path, mime_type: str) -> str:
        """
        Extract the text content of a stored file.

        Args:
            file_path: Path to the stored file
            mime_type: File MIME type

        Returns:
            Extracted text

        Raises:
            UnsupportedDocumentError: If the MIME type has no extractor
        """
        if mime_type == PDF_MIME_TYPE:
            # pdfplumber is blocking
            return await run_in_threadpool(DocumentProcessor.extract_pdf_text, file_path)

        if mime_type.startswith("text/"):
            async with aiofiles.open(file_path, "rb") as f:
                raw = await f.read()
            return raw.decode("utf-8", errors="replace")

        raise UnsupportedDocumentError(f"Cannot extract text from '{mime_type}'")
