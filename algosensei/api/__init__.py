"""
API Routes and Endpoints

Routers:
    - auth: Registration, login, logout, profile
    - chats: Chat history CRUD
    - ai: Streaming tutor replies
"""

from algosensei.api import auth, chats, ai

__all__ = ["auth", "chats", "ai"]
