"""
User Repository - registration and credential checks
Users are stored as records at users/<encoded email>
"""

import logging
from typing import Any, Dict, Optional

from algosensei.core.exceptions import AuthenticationError, DuplicateError, ValidationError
from algosensei.core.security import hash_password, verify_password
from algosensei.schemas.auth import UserResponse
from algosensei.schemas.chat import utcnow
from algosensei.storage.base import RecordStore, encode_email, generate_id

logger = logging.getLogger(__name__)


class UserRepository:
    """Create and look up users in the record store"""

    def __init__(self, store: RecordStore):
        self.store = store

    @staticmethod
    def _key(email: str) -> str:
        return f"users/{encode_email(email)}"

    def get_user(self, email: str) -> Optional[Dict[str, Any]]:
        """Return the stored user record, or None if no such user"""
        if not email:
            return None
        return self.store.get(self._key(email))

    def register(self, username: str, email: str, password: str) -> Dict[str, Any]:
        """
        Register a new user

        Raises:
            ValidationError: If any field is blank
            DuplicateError: If the email is already registered (stored record untouched)
        """
        username = (username or "").strip()
        email = (email or "").strip()
        if not username or not email or not password:
            raise ValidationError("Missing required fields")

        key = self._key(email)
        if self.store.get(key) is not None:
            raise DuplicateError("Email already registered")

        user = {
            "id": generate_id(),
            "username": username,
            "email": email,
            "hashed_password": hash_password(password),
            "created_at": utcnow().isoformat(),
        }
        self.store.put(key, user)
        logger.info(f"Registered user {user['id']}")
        return user

    def authenticate(self, email: str, password: str) -> Dict[str, Any]:
        """
        Check an email/password pair

        Returns:
            The stored user record

        Raises:
            AuthenticationError: Unknown email or wrong password (same message for both)
        """
        user = self.get_user(email)
        if user is None or not verify_password(password, user.get("hashed_password", "")):
            raise AuthenticationError("Invalid email or password")
        return user

    @staticmethod
    def to_response(user: Dict[str, Any]) -> UserResponse:
        return UserResponse(
            id=user["id"],
            username=user.get("username", ""),
            email=user["email"],
            name=user.get("name") or "",
            bio=user.get("bio") or "",
            preferred_languages=user.get("preferred_languages") or [],
            created_at=user.get("created_at"),
        )
