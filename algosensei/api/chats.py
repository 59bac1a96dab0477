"""
Chat management API endpoints
Owner-scoped chat history: list, create, read, rename/append, delete
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends

from algosensei.api.deps import get_chat_repository, get_current_user
from algosensei.schemas.chat import (
    Chat,
    ChatCreate,
    ChatSummary,
    ChatUpdate,
    DeleteResponse,
)
from algosensei.services.chat_repository import ChatRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/chats", tags=["chats"])


@router.get("", response_model=List[ChatSummary])
async def list_chats(
    current_user: Dict[str, Any] = Depends(get_current_user),
    chats: ChatRepository = Depends(get_chat_repository)
):
    """
    List chats for current user

    Returns:
        Chat summaries ordered by updated_at (most recent first)
    """
    return [ChatSummary.from_chat(c) for c in chats.list_chats(current_user["email"])]


@router.post("", response_model=Chat)
async def create_chat(
    body: Optional[ChatCreate] = None,
    current_user: Dict[str, Any] = Depends(get_current_user),
    chats: ChatRepository = Depends(get_chat_repository)
):
    """Create a chat (title defaults to "New Discussion")"""
    title = body.title if body else None
    return chats.create_chat(current_user["email"], title)


@router.get("/{chat_id}", response_model=Chat)
async def get_chat(
    chat_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    chats: ChatRepository = Depends(get_chat_repository)
):
    """
    Get a chat with all its messages

    Raises:
        404 if the chat does not exist or belongs to another user
    """
    return chats.get_chat(current_user["email"], chat_id)


@router.patch("/{chat_id}", response_model=Chat)
async def update_chat(
    chat_id: str,
    body: ChatUpdate,
    current_user: Dict[str, Any] = Depends(get_current_user),
    chats: ChatRepository = Depends(get_chat_repository)
):
    """
    Rename a chat and/or append a message

    Raises:
        404 if the chat does not exist or belongs to another user
        400 if the new title is blank
    """
    return chats.update_chat(
        current_user["email"],
        chat_id,
        title=body.title,
        message=body.message,
    )


@router.delete("/{chat_id}", response_model=DeleteResponse)
async def delete_chat(
    chat_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    chats: ChatRepository = Depends(get_chat_repository)
):
    """
    Delete a chat and its messages

    Raises:
        404 if the chat does not exist or belongs to another user
    """
    chats.delete_chat(current_user["email"], chat_id)
    return DeleteResponse(success=True)
