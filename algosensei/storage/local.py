"""
Local record storage
Implements RecordStore on the local filesystem, one JSON file per key
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, List, Optional

from algosensei.config import settings
from algosensei.core.exceptions import StorageError
from algosensei.storage.base import RecordStore, validate_key

logger = logging.getLogger(__name__)


class LocalStorage(RecordStore):
    """Local JSON file storage with key-scoped paths"""

    SUFFIX = ".json"

    def __init__(self, base_path: str = settings.STORAGE_DIR):
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _get_record_path(self, key: str) -> Path:
        """Map a record key to its file path under base_path"""
        return self.base_path / f"{validate_key(key)}{self.SUFFIX}"

    def _read(self, path: Path) -> Optional[Any]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read record {path}: {e}")
            raise StorageError(f"Failed to read record: {e}") from e

    def put(self, key: str, value: Any) -> None:
        """Write to a temp file in the same directory, then atomically replace"""
        path = self._get_record_path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(value, f)
                os.replace(tmp_path, path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to write record {key}: {e}")
            raise StorageError(f"Failed to write record: {e}") from e

    def get(self, key: str) -> Optional[Any]:
        return self._read(self._get_record_path(key))

    def delete(self, key: str) -> bool:
        path = self._get_record_path(key)
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error(f"Failed to delete record {key}: {e}")
            raise StorageError(f"Failed to delete record: {e}") from e

    def list(self, prefix: str) -> List[Any]:
        if ".." in prefix.split("/"):
            raise ValueError(f"Invalid record prefix: {prefix!r}")

        # Only walk the deepest directory the prefix fully names
        directory = prefix.rsplit("/", 1)[0] if "/" in prefix else ""
        root = self.base_path / directory if directory else self.base_path
        if not root.is_dir():
            return []

        results = []
        for path in root.rglob(f"*{self.SUFFIX}"):
            key = path.relative_to(self.base_path).as_posix()[: -len(self.SUFFIX)]
            if not key.startswith(prefix):
                continue
            value = self._read(path)
            if value is not None:
                results.append(value)
        return results
