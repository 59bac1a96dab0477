"""
Chat Repository - chat CRUD on top of the record store

Chats live at chats/<encoded owner email>/<chat_id>. Every mutation is a
read-modify-write of the whole record with no locking: two concurrent
appends to the same chat can race and the last write wins.
"""

import logging
import re
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from algosensei.core.exceptions import NotFoundError, ValidationError
from algosensei.schemas.chat import DEFAULT_CHAT_TITLE, Chat, ChatMessage, utcnow
from algosensei.storage.base import RecordStore, encode_email, generate_id

logger = logging.getLogger(__name__)

_CHAT_ID = re.compile(r"[A-Za-z0-9_-]{1,64}")


class ChatRepository:
    """Owner-scoped chat storage"""

    def __init__(self, store: RecordStore):
        self.store = store

    @staticmethod
    def _namespace(owner: str) -> str:
        return f"chats/{encode_email(owner)}/"

    def _key(self, owner: str, chat_id: str) -> str:
        if not chat_id or not _CHAT_ID.fullmatch(chat_id):
            raise NotFoundError("Chat not found")
        return f"{self._namespace(owner)}{chat_id}"

    def _save(self, chat: Chat) -> None:
        self.store.put(self._key(chat.owner, chat.id), chat.model_dump(mode="json"))

    def list_chats(self, owner: str) -> List[Chat]:
        """
        List the owner's chats, most recently updated first

        Records whose stored owner differs from owner are skipped even if
        they sit in the owner's namespace.
        """
        chats = []
        for record in self.store.list(self._namespace(owner)):
            try:
                chat = Chat.model_validate(record)
            except PydanticValidationError as e:
                logger.warning(f"Skipping malformed chat record for {encode_email(owner)}: {e}")
                continue
            if chat.owner == owner:
                chats.append(chat)

        chats.sort(key=lambda c: c.updated_at, reverse=True)
        return chats

    def create_chat(self, owner: str, title: Optional[str] = None) -> Chat:
        now = utcnow()
        chat = Chat(
            id=generate_id(),
            owner=owner,
            title=(title or "").strip() or DEFAULT_CHAT_TITLE,
            messages=[],
            created_at=now,
            updated_at=now,
        )
        self._save(chat)
        logger.info(f"Created chat {chat.id}")
        return chat

    def get_chat(self, owner: str, chat_id: str) -> Chat:
        """
        Load one chat

        Raises:
            NotFoundError: If the chat is absent or owned by someone else
        """
        record = self.store.get(self._key(owner, chat_id))
        if record is None or record.get("owner") != owner:
            raise NotFoundError("Chat not found")
        return Chat.model_validate(record)

    def update_chat(
        self,
        owner: str,
        chat_id: str,
        title: Optional[str] = None,
        message: Optional[ChatMessage] = None
    ) -> Chat:
        """
        Rename and/or append in a single read-modify-write

        updated_at is bumped even when neither title nor message is given.

        Raises:
            NotFoundError: If the chat is absent or owned by someone else
            ValidationError: If title is given but blank
        """
        chat = self.get_chat(owner, chat_id)

        if title is not None:
            title = title.strip()
            if not title:
                raise ValidationError("Title must not be blank")
            chat.title = title

        if message is not None:
            chat.messages.append(message)

        chat.updated_at = utcnow()
        self._save(chat)
        return chat

    def append_message(self, owner: str, chat_id: str, message: ChatMessage) -> Chat:
        return self.update_chat(owner, chat_id, message=message)

    def rename_chat(self, owner: str, chat_id: str, title: str) -> Chat:
        return self.update_chat(owner, chat_id, title=title or "")

    def delete_chat(self, owner: str, chat_id: str) -> None:
        """
        Raises:
            NotFoundError: If nothing was removed
        """
        # Check ownership of the stored record, not just the key
        self.get_chat(owner, chat_id)
        if not self.store.delete(self._key(owner, chat_id)):
            raise NotFoundError("Chat not found")
        logger.info(f"Deleted chat {chat_id}")
