"""
FastAPI dependencies
Authentication, storage, repositories, services
"""

import logging
from functools import lru_cache
from typing import Any, Dict

from fastapi import Depends, Request

from algosensei.core.exceptions import AuthenticationError
from algosensei.core.security import decode_session_token, get_session_token
from algosensei.services.chat_repository import ChatRepository
from algosensei.services.memory_service import MemoryService
from algosensei.services.user_repository import UserRepository
from algosensei.storage.base import RecordStore
from algosensei.storage.factory import get_record_store

logger = logging.getLogger(__name__)


def get_user_repository(store: RecordStore = Depends(get_record_store)) -> UserRepository:
    return UserRepository(store)


def get_chat_repository(store: RecordStore = Depends(get_record_store)) -> ChatRepository:
    return ChatRepository(store)


async def get_current_user(
    request: Request,
    users: UserRepository = Depends(get_user_repository)
) -> Dict[str, Any]:
    """
    Get current authenticated user from the session credential

    Args:
        request: Incoming request (Authorization header or session cookie)
        users: User repository

    Returns:
        dict: Stored user record

    Raises:
        AuthenticationError: 401 if the credential is absent, invalid, or its user is gone
    """
    token = get_session_token(request)
    if not token:
        raise AuthenticationError("Not authenticated")

    payload = decode_session_token(token)

    user = users.get_user(payload["sub"])
    if not user:
        raise AuthenticationError("User not found")

    return user


# ==============================================================================
# Service Singletons
# ==============================================================================
# Built once per process; the relay pulls in LiteLLM, so it is imported lazily


@lru_cache(maxsize=1)
def get_memory_service() -> MemoryService:
    """
    Get singleton MemoryService instance

    Returns:
        MemoryService: No-op when MEM0_API_KEY is unset
    """
    return MemoryService()


def get_completion_relay(memory_service: MemoryService = Depends(get_memory_service)):
    """
    Get a CompletionRelay bound to the memory service

    Returns:
        CompletionRelay
    """
    from algosensei.services.completion_relay import CompletionRelay
    return CompletionRelay(memory_service=memory_service)
