"""
Abstract base class for record stores
Defines the interface shared by the local, S3 and MongoDB backends
"""

import secrets
import time
from abc import ABC, abstractmethod
from typing import Any, List, Optional
from urllib.parse import quote


def encode_email(email: str) -> str:
    """
    Encode an email for use as a key segment

    Percent-encoding of the lower-cased address (only "@" and the RFC 3986
    unreserved characters are kept), so distinct emails never share a key
    and urllib.parse.unquote() recovers the address.

    Example:
        >>> encode_email("Ada.Lovelace+dsa@Example.com")
        'ada.lovelace%2Bdsa@example.com'
    """
    return quote(email.lower(), safe="@")


def generate_id() -> str:
    """Generate a unique, roughly time-ordered record id (20 hex chars)"""
    timestamp = format(int(time.time() * 1000), "x").zfill(12)
    return f"{timestamp}{secrets.token_hex(4)}"


def validate_key(key: str) -> str:
    """
    Reject keys that could escape their namespace

    Raises:
        ValueError: On empty keys, empty segments, '.'/'..' segments or a leading '/'
    """
    if not key or key.startswith("/"):
        raise ValueError(f"Invalid record key: {key!r}")
    for segment in key.split("/"):
        if segment in ("", ".", "..") or "\\" in segment:
            raise ValueError(f"Invalid record key: {key!r}")
    return key


class RecordStore(ABC):
    """
    Key/value store for JSON-serializable records

    "Not found" is never an error: get() returns None and delete() returns
    False. Any other backend failure is raised as StorageError.
    """

    @abstractmethod
    def put(self, key: str, value: Any) -> None:
        """
        Serialize value and store it at key, overwriting any existing value

        Args:
            key: Path-like key (e.g. "chats/<owner>/<chat_id>")
            value: JSON-serializable value
        """
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """
        Read the value stored at key

        Returns:
            Deserialized value, or None if the key is absent
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove the value at key

        Returns:
            bool: True if something was removed
        """
        pass

    @abstractmethod
    def list(self, prefix: str) -> List[Any]:
        """
        Return every value whose key starts with prefix (unspecified order)
        """
        pass
