import logging
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import SQLAlchemyError
from typing import List
from groupchat.api.dependencies import get_storage
from groupchat.schemas import InsertMessage, MessageEdit, MessageOwner, MessageResponse, UpdateMessage
from groupchat.storage.chat_storage import ChatStorage, UnknownUserError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/messages", tags=["messages"])

# Edit and delete answer the same way for "no such message" and "not yours"
# so other users can't probe which ids exist
MESSAGE_NOT_FOUND_MESSAGE = "Message not found or unauthorized"


@router.get("", response_model=List[MessageResponse])
def list_messages(storage: ChatStorage = Depends(get_storage)):
    """All messages in the room, oldest first"""
    return storage.get_messages()


@router.get("/{message_id}", response_model=MessageResponse)
def get_message(message_id: int, storage: ChatStorage = Depends(get_storage)):
    """Get a single message"""
    message = storage.get_message_by_id(message_id)
    if not message:
        raise HTTPException(status_code=404, detail="Message not found")
    return message


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def create_message(data: InsertMessage, storage: ChatStorage = Depends(get_storage)):
    """Post a message to the room"""
    try:
        return storage.create_message(data)
    except UnknownUserError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except SQLAlchemyError as e:
        storage.db.rollback()
        logger.error(f"Error creating message: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create message"
        )


@router.patch("/{message_id}", response_model=MessageResponse)
def update_message(
    message_id: int,
    edit: MessageEdit,
    storage: ChatStorage = Depends(get_storage)
):
    """Edit the content of one of your own messages"""
    patch = UpdateMessage(content=edit.content)
    try:
        message = storage.update_message(message_id, edit.user_id, patch)
    except SQLAlchemyError as e:
        storage.db.rollback()
        logger.error(f"Error updating message {message_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update message"
        )

    if not message:
        raise HTTPException(status_code=404, detail=MESSAGE_NOT_FOUND_MESSAGE)
    return message


@router.delete("/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_message(
    message_id: int,
    owner: MessageOwner,
    storage: ChatStorage = Depends(get_storage)
):
    """Delete one of your own messages"""
    try:
        deleted = storage.delete_message(message_id, owner.user_id)
    except SQLAlchemyError as e:
        storage.db.rollback()
        logger.error(f"Error deleting message {message_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete message"
        )

    if not deleted:
        raise HTTPException(status_code=404, detail=MESSAGE_NOT_FOUND_MESSAGE)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
