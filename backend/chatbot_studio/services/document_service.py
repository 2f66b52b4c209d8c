"""
Document service: upload, text extraction and removal.
"""
import logging
from typing import Optional
from uuid import uuid4

from fastapi import UploadFile
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from chatbot_studio.core.exceptions import ValidationFailedException
from chatbot_studio.models.bot import Bot
from chatbot_studio.models.document import Document, DocumentStatus
from chatbot_studio.services.document.processor import DocumentProcessor
from chatbot_studio.services.document.storage import DocumentStorage

logger = logging.getLogger(__name__)


class DocumentService:
    """Manage knowledge documents on bots a user owns."""

    @staticmethod
    async def list_by_user(
        db: AsyncSession,
        user_id: str,
        bot_id: Optional[str] = None,
    ) -> list[Document]:
        """List documents on a user's bots, newest first."""
        query = (
            select(Document)
            .join(Bot, Document.bot_id == Bot.id)
            .where(Bot.user_id == user_id)
        )
        if bot_id:
            query = query.where(Document.bot_id == bot_id)

        result = await db.execute(query.order_by(Document.created_at.desc()))
        return list(result.scalars().all())

    @staticmethod
    async def get_by_id(
        db: AsyncSession,
        document_id: str,
        user_id: str,
    ) -> Optional[Document]:
        result = await db.execute(
            select(Document)
            .join(Bot, Document.bot_id == Bot.id)
            .where(Document.id == document_id, Bot.user_id == user_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def upload(
        db: AsyncSession,
        storage: DocumentStorage,
        bot_id: str,
        file: UploadFile,
    ) -> Document:
        """
        Store an uploaded file and extract its text.

        Extraction errors do not fail the upload; the document is recorded
        as FAILED with the error message.

        Args:
            db: Database session
            storage: File storage
            bot_id: Owning bot ID (ownership already checked)
            file: Uploaded file

        Returns:
            Created document

        Raises:
            ValidationFailedException: If the file type or size is not accepted
        """
        document_id = str(uuid4())

        try:
            file_path, file_size = await storage.save_file(bot_id, document_id, file)
        except ValueError as e:
            raise ValidationFailedException(str(e))

        document = Document(
            id=document_id,
            bot_id=bot_id,
            name=file.filename or "upload",
            type=file.content_type,
            size=file_size,
            url=file_path,
            status=DocumentStatus.PROCESSING,
        )

        try:
            document.content = await DocumentProcessor.process(file_path, file.content_type)
            document.status = DocumentStatus.COMPLETED
        except Exception as e:
            logger.error(f"Text extraction failed for document {document_id}: {e}")
            document.status = DocumentStatus.FAILED
            document.error_message = str(e)

        db.add(document)
        await db.commit()
        await db.refresh(document)

        logger.info(f"Uploaded document {document_id} ({document.status.value})")
        return document

    @staticmethod
    async def delete(
        db: AsyncSession,
        storage: DocumentStorage,
        document_id: str,
        user_id: str,
    ) -> bool:
        """Delete a document row and its stored file."""
        document = await DocumentService.get_by_id(db, document_id, user_id)
        if not document:
            return False

        bot_id = document.bot_id
        await db.delete(document)
        await db.commit()

        await storage.delete_file(bot_id, document_id)
        logger.info(f"Deleted document {document_id}")
        return True
