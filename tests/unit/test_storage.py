"""
Unit tests for record storage backends

Tests:
- Key helpers (encode_email, generate_id, validate_key)
- LocalStorage put/get/delete/list on a temp directory
- S3Storage against a mocked boto3 client
- MongoStorage against a mocked pymongo collection
- Backend factory selection and configuration errors
"""

import json
import pytest
from unittest.mock import MagicMock, patch
from botocore.exceptions import ClientError
from pymongo.errors import PyMongoError

from algosensei.core.exceptions import ConfigurationError, StorageError
from algosensei.storage.base import encode_email, generate_id, validate_key
from algosensei.storage.factory import create_record_store, get_record_store
from algosensei.storage.local import LocalStorage
from algosensei.storage.mongo import MongoStorage
from algosensei.storage.s3 import S3Storage


def _client_error(code: str, operation: str = "GetObject") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.mark.unit
class TestKeyHelpers:
    """Key encoding and validation"""

    def test_encode_email(self):
        assert encode_email("Ada.Lovelace+dsa@Example.com") == "ada.lovelace%2Bdsa@example.com"

    def test_encode_email_is_case_insensitive(self):
        assert encode_email("ADA@EXAMPLE.COM") == encode_email("ada@example.com")

    @pytest.mark.parametrize("first,second", [
        ("ada+dsa@example.com", "ada_dsa@example.com"),
        ("ada!x@example.com", "ada~x@example.com"),
        ("a.b@example.com", "a_b@example.com"),
    ])
    def test_encode_email_distinct_addresses_never_collide(self, first, second):
        assert encode_email(first) != encode_email(second)

    def test_encode_email_is_a_single_key_segment(self):
        encoded = encode_email("ada/../admin@example.com")

        assert "/" not in encoded
        assert validate_key(f"users/{encoded}")

    def test_generate_id_format(self):
        chat_id = generate_id()
        assert len(chat_id) == 20
        int(chat_id, 16)

    def test_generate_id_unique(self):
        assert len({generate_id() for _ in range(200)}) == 200

    @pytest.mark.parametrize("key", ["", "/users/a", "users//a", "users/../a", "users/./a", "users/a\\b"])
    def test_validate_key_rejects(self, key):
        with pytest.raises(ValueError):
            validate_key(key)

    def test_validate_key_accepts(self):
        assert validate_key("chats/ada@example.com/abc123") == "chats/ada@example.com/abc123"


@pytest.mark.unit
class TestLocalStorage:
    """Test suite for LocalStorage"""

    def test_put_and_get(self, record_store):
        record_store.put("users/ada", {"email": "ada@example.com", "tags": [1, 2]})

        assert record_store.get("users/ada") == {"email": "ada@example.com", "tags": [1, 2]}

    def test_put_overwrites(self, record_store):
        record_store.put("users/ada", {"v": 1})
        record_store.put("users/ada", {"v": 2})

        assert record_store.get("users/ada") == {"v": 2}

    def test_put_leaves_no_temp_files(self, record_store):
        record_store.put("users/ada", {"v": 1})
        record_store.put("users/ada", {"v": 2})

        files = [p.name for p in (record_store.base_path / "users").iterdir()]
        assert files == ["ada.json"]

    def test_get_missing_returns_none(self, record_store):
        assert record_store.get("users/nobody") is None

    def test_get_corrupt_raises_storage_error(self, record_store):
        path = record_store.base_path / "users" / "ada.json"
        path.parent.mkdir(parents=True)
        path.write_text("{not json")

        with pytest.raises(StorageError):
            record_store.get("users/ada")

    def test_put_unserializable_raises_storage_error(self, record_store):
        with pytest.raises(StorageError):
            record_store.put("users/ada", {"bad": object()})

        assert record_store.get("users/ada") is None

    def test_delete(self, record_store):
        record_store.put("users/ada", {"v": 1})

        assert record_store.delete("users/ada") is True
        assert record_store.get("users/ada") is None
        assert record_store.delete("users/ada") is False

    def test_list_by_prefix(self, record_store):
        record_store.put("chats/ada/1", {"id": "1"})
        record_store.put("chats/ada/2", {"id": "2"})
        record_store.put("chats/adam/3", {"id": "3"})
        record_store.put("users/ada", {"id": "u"})

        ids = sorted(r["id"] for r in record_store.list("chats/ada/"))
        assert ids == ["1", "2"]

    def test_list_partial_segment_prefix(self, record_store):
        record_store.put("chats/ada/1", {"id": "1"})
        record_store.put("chats/adam/3", {"id": "3"})

        ids = sorted(r["id"] for r in record_store.list("chats/ada"))
        assert ids == ["1", "3"]

    def test_list_missing_prefix(self, record_store):
        assert record_store.list("chats/nobody/") == []

    def test_invalid_key_rejected(self, record_store):
        with pytest.raises(ValueError):
            record_store.put("../escape", {"v": 1})
        with pytest.raises(ValueError):
            record_store.list("chats/../")


@pytest.mark.unit
class TestS3Storage:
    """Test suite for S3Storage with a mocked client"""

    @pytest.fixture
    def s3_client(self):
        return MagicMock()

    @pytest.fixture
    def storage(self, s3_client):
        return S3Storage(bucket_name="records", client=s3_client)

    def test_init_checks_bucket(self, s3_client, storage):
        s3_client.head_bucket.assert_called_once_with(Bucket="records")

    def test_init_inaccessible_bucket(self, s3_client):
        s3_client.head_bucket.side_effect = _client_error("403", "HeadBucket")

        with pytest.raises(StorageError):
            S3Storage(bucket_name="records", client=s3_client)

    def test_put(self, s3_client, storage):
        storage.put("users/ada", {"v": 1})

        kwargs = s3_client.put_object.call_args[1]
        assert kwargs["Bucket"] == "records"
        assert kwargs["Key"] == "users/ada.json"
        assert json.loads(kwargs["Body"]) == {"v": 1}
        assert kwargs["ContentType"] == "application/json"

    def test_get(self, s3_client, storage):
        body = MagicMock()
        body.read.return_value = b'{"v": 1}'
        s3_client.get_object.return_value = {"Body": body}

        assert storage.get("users/ada") == {"v": 1}
        s3_client.get_object.assert_called_once_with(Bucket="records", Key="users/ada.json")

    def test_get_missing_returns_none(self, s3_client, storage):
        s3_client.get_object.side_effect = _client_error("NoSuchKey")

        assert storage.get("users/ada") is None

    def test_get_transport_error(self, s3_client, storage):
        s3_client.get_object.side_effect = _client_error("InternalError")

        with pytest.raises(StorageError):
            storage.get("users/ada")

    def test_delete_existing(self, s3_client, storage):
        assert storage.delete("users/ada") is True
        s3_client.delete_object.assert_called_once_with(Bucket="records", Key="users/ada.json")

    def test_delete_missing(self, s3_client, storage):
        s3_client.head_object.side_effect = _client_error("404", "HeadObject")

        assert storage.delete("users/ada") is False
        s3_client.delete_object.assert_not_called()

    def test_list(self, s3_client, storage):
        paginator = MagicMock()
        paginator.paginate.return_value = [
            {"Contents": [{"Key": "chats/ada/1.json"}, {"Key": "chats/ada/notes.txt"}]},
            {"Contents": [{"Key": "chats/ada/2.json"}]},
        ]
        s3_client.get_paginator.return_value = paginator

        def get_object(Bucket, Key):
            body = MagicMock()
            body.read.return_value = json.dumps({"key": Key}).encode()
            return {"Body": body}

        s3_client.get_object.side_effect = get_object

        results = storage.list("chats/ada/")

        paginator.paginate.assert_called_once_with(Bucket="records", Prefix="chats/ada/")
        assert [r["key"] for r in results] == ["chats/ada/1.json", "chats/ada/2.json"]


@pytest.mark.unit
class TestMongoStorage:
    """Test suite for MongoStorage with a mocked collection"""

    @pytest.fixture
    def storage(self):
        return MongoStorage(database="algosensei", collection="records", client=MagicMock())

    def test_put_upserts(self, storage):
        storage.put("users/ada", {"v": 1})

        storage.collection.replace_one.assert_called_once_with(
            {"_id": "users/ada"},
            {"_id": "users/ada", "value": {"v": 1}},
            upsert=True,
        )

    def test_get(self, storage):
        storage.collection.find_one.return_value = {"_id": "users/ada", "value": {"v": 1}}

        assert storage.get("users/ada") == {"v": 1}

    def test_get_missing(self, storage):
        storage.collection.find_one.return_value = None

        assert storage.get("users/ada") is None

    def test_delete(self, storage):
        storage.collection.delete_one.return_value = MagicMock(deleted_count=1)
        assert storage.delete("users/ada") is True

        storage.collection.delete_one.return_value = MagicMock(deleted_count=0)
        assert storage.delete("users/ada") is False

    def test_list_uses_escaped_prefix(self, storage):
        storage.collection.find.return_value = [{"_id": "chats/a.b/1", "value": {"id": "1"}}]

        assert storage.list("chats/a.b/") == [{"id": "1"}]
        query = storage.collection.find.call_args[0][0]
        assert query == {"_id": {"$regex": r"^chats/a\.b/"}}

    def test_driver_error_becomes_storage_error(self, storage):
        storage.collection.find_one.side_effect = PyMongoError("connection refused")

        with pytest.raises(StorageError):
            storage.get("users/ada")


@pytest.mark.unit
class TestRecordStoreFactory:
    """Backend selection from settings"""

    @patch('algosensei.storage.factory.settings')
    def test_local_backend(self, mock_settings, tmp_path):
        mock_settings.STORAGE_BACKEND = "local"
        mock_settings.STORAGE_DIR = str(tmp_path)

        assert isinstance(create_record_store(), LocalStorage)

    @patch('algosensei.storage.factory.settings')
    def test_s3_backend_requires_bucket(self, mock_settings):
        mock_settings.STORAGE_BACKEND = "s3"
        mock_settings.S3_BUCKET_NAME = ""

        with pytest.raises(ConfigurationError):
            create_record_store()

    @patch('algosensei.storage.s3.boto3')
    @patch('algosensei.storage.factory.settings')
    def test_s3_backend(self, mock_settings, mock_boto3):
        mock_settings.STORAGE_BACKEND = "s3"
        mock_settings.S3_BUCKET_NAME = "records"
        mock_settings.S3_ACCESS_KEY_ID = ""
        mock_settings.S3_SECRET_ACCESS_KEY = ""
        mock_settings.S3_REGION = "eu-west-1"
        mock_settings.S3_ENDPOINT_URL = ""

        store = create_record_store()

        assert isinstance(store, S3Storage)
        mock_boto3.client.assert_called_once_with('s3', region_name="eu-west-1")

    @patch('algosensei.storage.factory.settings')
    def test_mongo_backend_requires_uri(self, mock_settings):
        mock_settings.STORAGE_BACKEND = "mongo"
        mock_settings.MONGODB_URI = ""

        with pytest.raises(ConfigurationError):
            create_record_store()

    @patch('algosensei.storage.factory.settings')
    def test_unknown_backend(self, mock_settings):
        mock_settings.STORAGE_BACKEND = "sqlite"

        with pytest.raises(ConfigurationError):
            create_record_store()

    @patch('algosensei.storage.factory.create_record_store')
    def test_get_record_store_is_cached(self, mock_create):
        get_record_store.cache_clear()
        try:
            first = get_record_store()
            second = get_record_store()
        finally:
            get_record_store.cache_clear()

        assert first is second
        mock_create.assert_called_once()
