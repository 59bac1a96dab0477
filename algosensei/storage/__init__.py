"""
Record storage system
Supports local filesystem, S3-compatible blob storage and MongoDB
"""

from algosensei.storage.base import RecordStore, encode_email, generate_id, validate_key
from algosensei.storage.factory import create_record_store, get_record_store

__all__ = [
    "RecordStore",
    "encode_email",
    "generate_id",
    "validate_key",
    "create_record_store",
    "get_record_store",
]
