"""
Record store factory
Creates the appropriate storage backend based on configuration
"""

import logging
from functools import lru_cache

from algosensei.config import settings
from algosensei.core.exceptions import ConfigurationError
from algosensei.storage.base import RecordStore

logger = logging.getLogger(__name__)


def create_record_store() -> RecordStore:
    """
    Create the storage backend selected by STORAGE_BACKEND

    Returns:
        RecordStore: LocalStorage, S3Storage or MongoStorage

    Raises:
        ConfigurationError: Unknown backend, or its required settings are missing
    """
    backend_type = settings.STORAGE_BACKEND.lower()

    if backend_type == "local":
        from algosensei.storage.local import LocalStorage

        logger.info(f"Using local record storage: {settings.STORAGE_DIR}")
        return LocalStorage(base_path=settings.STORAGE_DIR)

    elif backend_type == "s3":
        from algosensei.storage.s3 import S3Storage

        if not settings.S3_BUCKET_NAME:
            raise ConfigurationError('Missing environment variable: "S3_BUCKET_NAME"')

        logger.info(f"Using S3 storage: bucket={settings.S3_BUCKET_NAME}, region={settings.S3_REGION}")

        # Build S3 config (only pass non-empty values)
        s3_config = {
            "bucket_name": settings.S3_BUCKET_NAME,
        }

        if settings.S3_ACCESS_KEY_ID:
            s3_config["aws_access_key_id"] = settings.S3_ACCESS_KEY_ID
        if settings.S3_SECRET_ACCESS_KEY:
            s3_config["aws_secret_access_key"] = settings.S3_SECRET_ACCESS_KEY
        if settings.S3_REGION:
            s3_config["region_name"] = settings.S3_REGION
        if settings.S3_ENDPOINT_URL:
            s3_config["endpoint_url"] = settings.S3_ENDPOINT_URL

        return S3Storage(**s3_config)

    elif backend_type == "mongo":
        from algosensei.storage.mongo import MongoStorage

        if not settings.MONGODB_URI:
            raise ConfigurationError('Missing environment variable: "MONGODB_URI"')

        return MongoStorage(
            uri=settings.MONGODB_URI,
            database=settings.MONGODB_DATABASE,
            collection=settings.MONGODB_COLLECTION,
        )

    else:
        raise ConfigurationError(
            f"Invalid STORAGE_BACKEND: {backend_type}. Must be 'local', 's3' or 'mongo'"
        )


@lru_cache(maxsize=1)
def get_record_store() -> RecordStore:
    """
    Get the process-wide record store

    Built on first use; call get_record_store.cache_clear() to rebuild it.
    """
    return create_record_store()
