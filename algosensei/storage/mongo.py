"""
MongoDB record storage backend
Implements RecordStore on a single document collection keyed by record key
"""

import logging
import re
from typing import Any, List, Optional

import pymongo
from pymongo.errors import PyMongoError

from algosensei.core.exceptions import StorageError
from algosensei.storage.base import RecordStore, validate_key

logger = logging.getLogger(__name__)


class MongoStorage(RecordStore):
    """
    Document database storage

    Each record is stored as {"_id": <key>, "value": <record>}, so every
    operation touches exactly one document and relies on MongoDB's
    single-document atomicity.
    """

    def __init__(self, uri: str = None, database: str = "algosensei", collection: str = "records", client=None):
        """
        Args:
            uri: MongoDB connection string
            database: Database name
            collection: Collection holding all records
            client: Pre-built MongoClient (skips connecting with uri)
        """
        self.client = client if client is not None else pymongo.MongoClient(uri)
        self.collection = self.client[database][collection]
        logger.info(f"Using MongoDB collection: {database}.{collection}")

    def put(self, key: str, value: Any) -> None:
        key = validate_key(key)
        try:
            self.collection.replace_one({"_id": key}, {"_id": key, "value": value}, upsert=True)
        except PyMongoError as e:
            logger.error(f"Failed to write record {key}: {e}")
            raise StorageError("Failed to write record") from e

    def get(self, key: str) -> Optional[Any]:
        key = validate_key(key)
        try:
            document = self.collection.find_one({"_id": key})
        except PyMongoError as e:
            logger.error(f"Failed to read record {key}: {e}")
            raise StorageError("Failed to read record") from e
        return document["value"] if document else None

    def delete(self, key: str) -> bool:
        key = validate_key(key)
        try:
            result = self.collection.delete_one({"_id": key})
        except PyMongoError as e:
            logger.error(f"Failed to delete record {key}: {e}")
            raise StorageError("Failed to delete record") from e
        return result.deleted_count > 0

    def list(self, prefix: str) -> List[Any]:
        try:
            cursor = self.collection.find({"_id": {"$regex": f"^{re.escape(prefix)}"}})
            return [document["value"] for document in cursor]
        except PyMongoError as e:
            logger.error(f"Failed to list prefix {prefix}: {e}")
            raise StorageError("Failed to list records") from e
