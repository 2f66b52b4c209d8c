"""
Document management API router.
"""
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from chatbot_studio.api.bots.router import get_owned_bot
from chatbot_studio.api.common import MessageResponse
from chatbot_studio.api.deps import CurrentUser, DbSession
from chatbot_studio.api.documents.schemas import DocumentResponse
from chatbot_studio.core.exceptions import NotFoundException, ValidationFailedException
from chatbot_studio.services.document.storage import DocumentStorage, get_document_storage
from chatbot_studio.services.document_service import DocumentService

router = APIRouter()

Storage = Annotated[DocumentStorage, Depends(get_document_storage)]


@router.get("", response_model=list[DocumentResponse])
async def list_documents(
    current_user: CurrentUser,
    db: DbSession,
    bot_id: Optional[str] = Query(default=None, alias="botId"),
) -> list[DocumentResponse]:
    """List documents on the user's bots, newest first."""
    documents = await DocumentService.list_by_user(db, current_user.id, bot_id)
    return [DocumentResponse.model_validate(d) for d in documents]


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(
    current_user: CurrentUser,
    db: DbSession,
    storage: Storage,
    bot_id: str = Form(..., alias="botId"),
    file: Optional[UploadFile] = File(default=None),
) -> DocumentResponse:
    """
    Upload a document to a bot and extract its text.

    Args:
        current_user: Authenticated user
        db: Database session
        storage: File storage
        bot_id: Target bot ID
        file: Uploaded file (PDF or text)

    Returns:
        Created document

    Raises:
        ValidationFailedException: No file, unsupported type or too large
        NotFoundException: If the bot is not owned by the user
    """
    if file is None:
        raise ValidationFailedException("No file uploaded")

    await get_owned_bot(db, bot_id, current_user)

    document = await DocumentService.upload(db, storage, bot_id, file)
    return DocumentResponse.model_validate(document)


@router.delete("/{document_id}", response_model=MessageResponse)
async def delete_document(
    document_id: str,
    current_user: CurrentUser,
    db: DbSession,
    storage: Storage,
) -> MessageResponse:
    """Delete a document and its stored file."""
    if not await DocumentService.delete(db, storage, document_id, current_user.id):
        raise NotFoundException("Document")
    return MessageResponse(message="Document deleted")
