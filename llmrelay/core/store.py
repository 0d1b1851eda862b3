"""Record store. Named collections of flat JSON records.

Every entity collection (users, providers, credentials, conversations,
messages) is a list of dicts loaded and saved as a whole. Services depend on
the ``RecordStore`` interface, never on a file path.
"""

import copy
import json
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import structlog

from llmrelay.core.exceptions import StoreIOError

logger = structlog.get_logger()

USERS = "users"
PROVIDERS = "providers"
USER_API_PROVIDERS = "user_api_providers"
CONVERSATIONS = "conversations"
MESSAGES = "messages"

COLLECTIONS = (USERS, PROVIDERS, USER_API_PROVIDERS, CONVERSATIONS, MESSAGES)


class RecordStore(ABC):
    def __init__(self):
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @abstractmethod
    def load(self, collection: str) -> list[dict]:
        """Return every record of a collection, in stored order."""
        ...

    @abstractmethod
    def save(self, collection: str, records: list[dict]) -> None:
        """Replace a collection with ``records``."""
        ...

    def _lock_for(self, collection: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(collection)
            if lock is None:
                lock = self._locks[collection] = threading.Lock()
            return lock

    @contextmanager
    def transaction(self, collection: str) -> Iterator[list[dict]]:
        """Serialized read-modify-write of one collection.

        The yielded list is saved when the block exits cleanly. If the block
        raises, the collection is left untouched.
        """
        with self._lock_for(collection):
            records = self.load(collection)
            yield records
            self.save(collection, records)


class JsonFileStore(RecordStore):
    """One pretty-printed JSON array per collection under ``data_dir``."""

    def __init__(self, data_dir: str | Path):
        super().__init__()
        self._dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._dir

    def path_for(self, collection: str) -> Path:
        return self._dir / f"{collection}.json"

    def init_directories(self) -> None:
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreIOError(f"Cannot create data directory {self._dir}: {e}")

    def load(self, collection: str) -> list[dict]:
        path = self.path_for(collection)
        try:
            if not path.exists():
                self.init_directories()
                path.write_text("[]", encoding="utf-8")
                logger.info("collection_created", collection=collection, path=str(path))
                return []
            raw = path.read_text(encoding="utf-8")
            data = json.loads(raw or "[]")
        except OSError as e:
            logger.error("collection_read_failed", collection=collection, error=str(e))
            raise StoreIOError(f"Failed to read collection '{collection}'.", details={"path": str(path)})
        except json.JSONDecodeError as e:
            logger.error("collection_corrupt", collection=collection, error=str(e))
            raise StoreIOError(f"Collection '{collection}' is not valid JSON.", details={"path": str(path)})

        if not isinstance(data, list):
            raise StoreIOError(f"Collection '{collection}' is not a JSON array.", details={"path": str(path)})
        return data

    def save(self, collection: str, records: list[dict]) -> None:
        path = self.path_for(collection)
        tmp_name = None
        try:
            self.init_directories()
            payload = json.dumps(records, indent=2)
            # Unique temp name per writer, then an atomic replace
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._dir,
                prefix=f".{collection}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
            os.replace(tmp_name, path)
        except (OSError, TypeError) as e:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            logger.error("collection_write_failed", collection=collection, error=str(e))
            raise StoreIOError(f"Failed to write collection '{collection}'.", details={"path": str(path)})
        logger.debug("collection_saved", collection=collection, count=len(records))


class InMemoryStore(RecordStore):
    """Process-local store. Records are deep-copied in and out."""

    def __init__(self, initial: dict[str, list[dict]] | None = None):
        super().__init__()
        self._collections: dict[str, list[dict]] = copy.deepcopy(initial or {})

    def load(self, collection: str) -> list[dict]:
        return copy.deepcopy(self._collections.get(collection, []))

    def save(self, collection: str, records: list[dict]) -> None:
        self._collections[collection] = copy.deepcopy(records)
