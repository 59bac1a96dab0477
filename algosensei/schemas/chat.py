"""
Pydantic Schemas for Chat endpoints
Chat records, messages with plain or multimodal content, AI requests
"""

from pydantic import BaseModel, Field
from typing import Annotated, Any, List, Literal, Optional, Union
from datetime import datetime, timezone
from enum import Enum

DEFAULT_CHAT_TITLE = "New Discussion"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MessageRole(str, Enum):
    """Message roles"""
    USER = "user"
    ASSISTANT = "assistant"


class TextPart(BaseModel):
    """Text part of a multimodal message"""
    type: Literal["text"] = "text"
    text: str = ""


class ImageUrl(BaseModel):
    """Image reference (http(s) URL or data: URI)"""
    url: str
    detail: Literal["auto", "low", "high"] = "auto"


class ImagePart(BaseModel):
    """Image part of a multimodal message"""
    type: Literal["image_url"] = "image_url"
    image_url: ImageUrl


ContentPart = Annotated[Union[TextPart, ImagePart], Field(discriminator="type")]

# Plain text, or an ordered list of text/image parts
MessageContent = Union[str, List[ContentPart]]


class ChatMessage(BaseModel):
    """Single message persisted inside a chat"""
    id: Optional[str] = Field(None, description="Client-side message id")
    role: MessageRole = Field(..., description="Message role")
    content: MessageContent = Field(..., description="Plain text or list of content parts")
    stage: Optional[str] = Field(None, description="Tutoring stage label")
    session_id: Optional[str] = Field(None, description="Session correlation id")
    created_at: datetime = Field(default_factory=utcnow, validation_alias="createdAt")

    class Config:
        populate_by_name = True


class Chat(BaseModel):
    """Full chat record as stored and returned"""
    id: str
    owner: str = Field(..., description="Owner email")
    title: str = DEFAULT_CHAT_TITLE
    messages: List[ChatMessage] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class ChatSummary(BaseModel):
    """Chat entry in the sidebar listing"""
    id: str
    title: str
    created_at: datetime
    updated_at: datetime
    message_count: int

    @classmethod
    def from_chat(cls, chat: Chat) -> "ChatSummary":
        return cls(
            id=chat.id,
            title=chat.title,
            created_at=chat.created_at,
            updated_at=chat.updated_at,
            message_count=len(chat.messages),
        )


class ChatCreate(BaseModel):
    """Request schema for POST /chats"""
    title: Optional[str] = Field(None, max_length=255)


class ChatUpdate(BaseModel):
    """Request schema for PATCH /chats/{chat_id}: rename and/or append"""
    title: Optional[str] = Field(None, max_length=255)
    message: Optional[ChatMessage] = None


class DeleteResponse(BaseModel):
    success: bool = True


class AIRequest(BaseModel):
    """
    Request schema for POST /ai

    Messages are accepted loosely; blank or malformed turns are dropped by
    the completion relay instead of failing the whole request.
    """
    messages: List[Any] = Field(..., description="Conversation so far, oldest first")
    session_id: Optional[str] = Field(None, description="Session correlation id for memory")
