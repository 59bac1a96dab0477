"""
S3 record storage backend
Implements RecordStore for AWS S3 (or compatible blob stores)
"""

import json
import logging
from typing import Any, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from algosensei.core.exceptions import StorageError
from algosensei.storage.base import RecordStore, validate_key

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}


def _is_not_found(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES


class S3Storage(RecordStore):
    """S3 record storage, one JSON object per key"""

    SUFFIX = ".json"

    def __init__(
        self,
        bucket_name: str,
        aws_access_key_id: str = None,
        aws_secret_access_key: str = None,
        region_name: str = None,
        endpoint_url: str = None,
        client=None
    ):
        """
        Initialize S3 storage backend

        Args:
            bucket_name: S3 bucket name
            aws_access_key_id: AWS access key (optional, uses env/IAM if not provided)
            aws_secret_access_key: AWS secret key (optional)
            region_name: AWS region (optional)
            endpoint_url: Custom S3 endpoint (for MinIO, DigitalOcean Spaces, etc.)
            client: Pre-built boto3 S3 client (skips client construction)
        """
        self.bucket_name = bucket_name

        if client is None:
            s3_config = {}
            if aws_access_key_id:
                s3_config['aws_access_key_id'] = aws_access_key_id
            if aws_secret_access_key:
                s3_config['aws_secret_access_key'] = aws_secret_access_key
            if region_name:
                s3_config['region_name'] = region_name
            if endpoint_url:
                s3_config['endpoint_url'] = endpoint_url
            client = boto3.client('s3', **s3_config)

        self.s3_client = client

        # Verify bucket exists
        try:
            self.s3_client.head_bucket(Bucket=self.bucket_name)
            logger.info(f"Connected to S3 bucket: {self.bucket_name}")
        except (ClientError, BotoCoreError) as e:
            logger.error(f"S3 bucket {self.bucket_name} not accessible: {e}")
            raise StorageError(f"S3 bucket {self.bucket_name} not accessible") from e

    def _get_object_key(self, key: str) -> str:
        return f"{validate_key(key)}{self.SUFFIX}"

    def put(self, key: str, value: Any) -> None:
        s3_key = self._get_object_key(key)
        try:
            body = json.dumps(value).encode("utf-8")
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=s3_key,
                Body=body,
                ContentType="application/json"
            )
            logger.debug(f"Uploaded record to S3: {s3_key}")
        except (TypeError, ValueError) as e:
            raise StorageError(f"Record is not JSON serializable: {e}") from e
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to upload to S3: {e}")
            raise StorageError("Failed to write record") from e

    def _download(self, s3_key: str) -> Optional[Any]:
        try:
            response = self.s3_client.get_object(Bucket=self.bucket_name, Key=s3_key)
            return json.loads(response['Body'].read())
        except ClientError as e:
            if _is_not_found(e):
                return None
            logger.error(f"Failed to read from S3: {e}")
            raise StorageError("Failed to read record") from e
        except (BotoCoreError, ValueError) as e:
            logger.error(f"Failed to read from S3: {e}")
            raise StorageError("Failed to read record") from e

    def get(self, key: str) -> Optional[Any]:
        return self._download(self._get_object_key(key))

    def delete(self, key: str) -> bool:
        s3_key = self._get_object_key(key)
        try:
            # delete_object succeeds for missing keys, so check first
            self.s3_client.head_object(Bucket=self.bucket_name, Key=s3_key)
        except ClientError as e:
            if _is_not_found(e):
                return False
            logger.error(f"Failed to delete from S3: {e}")
            raise StorageError("Failed to delete record") from e
        except BotoCoreError as e:
            raise StorageError("Failed to delete record") from e

        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=s3_key)
            logger.debug(f"Deleted record from S3: {s3_key}")
            return True
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to delete from S3: {e}")
            raise StorageError("Failed to delete record") from e

    def list(self, prefix: str) -> List[Any]:
        results = []
        try:
            paginator = self.s3_client.get_paginator('list_objects_v2')
            pages = paginator.paginate(Bucket=self.bucket_name, Prefix=prefix)

            for page in pages:
                for obj in page.get('Contents', []):
                    if not obj['Key'].endswith(self.SUFFIX):
                        continue
                    value = self._download(obj['Key'])
                    if value is not None:
                        results.append(value)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to list S3 prefix {prefix}: {e}")
            raise StorageError("Failed to list records") from e
        return results
