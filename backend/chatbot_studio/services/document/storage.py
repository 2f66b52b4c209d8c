"""
Document storage service for uploaded knowledge files.
"""
import os
import shutil
from pathlib import Path
from typing import Optional

import aiofiles
from fastapi import UploadFile

from chatbot_studio.core.config import settings


class DocumentStorage:
    """Service for managing document file storage."""

    def __init__(self, base_path: Optional[str] = None):
        """
        Initialize document storage.

        Args:
            base_path: Base storage path (default: from settings)
        """
        self.base_path = Path(base_path or settings.storage_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _get_bot_path(self, bot_id: str) -> Path:
        """Get storage path for a bot."""
        path = self.base_path / "documents" / bot_id
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _get_document_path(self, bot_id: str, document_id: str, filename: str) -> Path:
        """Get full path for a document file."""
        # Use document_id as folder to avoid filename conflicts
        doc_path = self._get_bot_path(bot_id) / document_id
        doc_path.mkdir(parents=True, exist_ok=True)
        return doc_path / filename

    @staticmethod
    def validate(file: UploadFile) -> int:
        """
        Check an upload against the allowed types and size limit.

        Returns:
            File size in bytes

        Raises:
            ValueError: If file is too large or of a disallowed type
        """
        if file.content_type not in settings.allowed_upload_types:
            raise ValueError(f"File type '{file.content_type}' is not supported")

        file.file.seek(0, 2)  # Seek to end
        file_size = file.file.tell()
        file.file.seek(0)

        max_size = settings.max_file_size_mb * 1024 * 1024
        if file_size > max_size:
            raise ValueError(
                f"File size ({file_size / 1024 / 1024:.1f}MB) exceeds "
                f"maximum allowed ({settings.max_file_size_mb}MB)"
            )
        return file_size

    async def save_file(
        self,
        bot_id: str,
        document_id: str,
        file: UploadFile,
    ) -> tuple[str, int]:
        """
        Save uploaded file to storage.

        Args:
            bot_id: Bot ID
            document_id: Document ID
            file: Uploaded file

        Returns:
            Tuple of (file_path, file_size)

        Raises:
            ValueError: If file is too large or invalid type
        """
        file_size = self.validate(file)

        safe_filename = self._sanitize_filename(file.filename or "upload")
        file_path = self._get_document_path(bot_id, document_id, safe_filename)

        async with aiofiles.open(file_path, "wb") as f:
            content = await file.read()
            await f.write(content)

        return str(file_path), file_size

    def _sanitize_filename(self, filename: str) -> str:
        """
        Sanitize filename for safe storage.

        Args:
            filename: Original filename

        Returns:
            Sanitized filename
        """
        # Remove path components
        filename = os.path.basename(filename)

        # Replace unsafe characters
        unsafe_chars = '<>:"/\\|?*'
        for char in unsafe_chars:
            filename = filename.replace(char, "_")

        # Limit length
        name, ext = os.path.splitext(filename)
        if len(name) > 100:
            name = name[:100]

        return f"{name}{ext}" or "upload"

    async def delete_file(self, bot_id: str, document_id: str) -> bool:
        """
        Delete document folder and contents.

        Returns:
            True if deleted, False if not found
        """
        doc_path = self.base_path / "documents" / bot_id / document_id
        if doc_path.exists():
            shutil.rmtree(doc_path)
            return True
        return False


# Singleton instance
_storage_instance: Optional[DocumentStorage] = None


def get_document_storage() -> DocumentStorage:
    """Get or create the singleton storage instance."""
    global _storage_instance
    if _storage_instance is None:
        _storage_instance = DocumentStorage()
    return _storage_instance
