"""
Pydantic Schemas for Request/Response Validation

Auth Schemas:
    - RegisterRequest / RegisterResponse: POST /auth/register
    - LoginRequest / SessionResponse: POST /auth/login
    - UserResponse: GET /auth/me

Chat Schemas:
    - ChatMessage: Message with plain or multimodal content
    - Chat / ChatSummary: Stored chat and its listing entry
    - ChatCreate / ChatUpdate: POST /chats, PATCH /chats/{id}
    - AIRequest: POST /ai
"""

from algosensei.schemas.auth import (
    RegisterRequest,
    RegisterResponse,
    LoginRequest,
    UserResponse,
    SessionResponse,
    LogoutResponse,
)

from algosensei.schemas.chat import (
    DEFAULT_CHAT_TITLE,
    MessageRole,
    TextPart,
    ImagePart,
    ChatMessage,
    Chat,
    ChatSummary,
    ChatCreate,
    ChatUpdate,
    DeleteResponse,
    AIRequest,
)

__all__ = [
    # Auth schemas
    "RegisterRequest",
    "RegisterResponse",
    "LoginRequest",
    "UserResponse",
    "SessionResponse",
    "LogoutResponse",
    # Chat schemas
    "DEFAULT_CHAT_TITLE",
    "MessageRole",
    "TextPart",
    "ImagePart",
    "ChatMessage",
    "Chat",
    "ChatSummary",
    "ChatCreate",
    "ChatUpdate",
    "DeleteResponse",
    "AIRequest",
]
