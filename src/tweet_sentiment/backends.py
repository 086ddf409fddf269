"""Storage backends holding the frequency documents.

A backend is a small document store: named collections of documents,
each document a mapping of field names to integer counters. The
frequency store only needs atomic increments, set-if-absent creation and
point reads, so any key-value engine with an atomic increment can serve.

Backends:
- ``MemoryBackend``: in-process dicts, for tests and throwaway runs
- ``JsonFileBackend``: in-process dicts persisted to a lock-guarded JSON file
- ``RedisBackend``: Redis hashes updated with ``HINCRBY``
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from filelock import FileLock

if TYPE_CHECKING:
    from .config import Settings

logger = logging.getLogger(__name__)


class StorageBackend(ABC):
    """Abstract base class for counter document stores.

    Absence is never an error: reads of missing documents return
    ``None`` (or omit them), and increments create what they touch.
    Transport failures of remote backends propagate unchanged.
    """

    name: str = ""

    @abstractmethod
    def increment(self, collection: str, doc_id: str, field: str, amount: int = 1) -> int:
        """Atomically add ``amount`` to a field, creating it if absent.

        Returns:
            The field's value after the increment.
        """
        ...

    @abstractmethod
    def ensure_document(self, collection: str, doc_id: str, defaults: dict[str, int]) -> None:
        """Create a document with ``defaults`` unless it already exists."""
        ...

    @abstractmethod
    def get_document(self, collection: str, doc_id: str) -> Optional[dict[str, int]]:
        """Return a copy of a document, or ``None`` if it does not exist."""
        ...

    @abstractmethod
    def count_documents(self, collection: str) -> int:
        """Number of documents in a collection (0 if it does not exist)."""
        ...

    def get_documents(self, collection: str, doc_ids: Iterable[str]) -> dict[str, dict[str, int]]:
        """Read several documents; missing ids are omitted."""
        found: dict[str, dict[str, int]] = {}
        for doc_id in doc_ids:
            doc = self.get_document(collection, doc_id)
            if doc is not None:
                found[doc_id] = doc
        return found

    def has_documents(self, collection: str) -> bool:
        """Whether a collection exists and holds at least one document."""
        return self.count_documents(collection) > 0

    def close(self) -> None:
        """Release any resources held by the backend."""

    def __enter__(self) -> "StorageBackend":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


# ---------------------------------------------------------------------------
# In-process backends
# ---------------------------------------------------------------------------


class MemoryBackend(StorageBackend):
    """Thread-safe in-memory document store."""

    name = "memory"

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, int]]] = {}
        self._lock = threading.RLock()

    def increment(self, collection: str, doc_id: str, field: str, amount: int = 1) -> int:
        with self._lock:
            doc = self._collections.setdefault(collection, {}).setdefault(doc_id, {})
            doc[field] = doc.get(field, 0) + amount
            return doc[field]

    def ensure_document(self, collection: str, doc_id: str, defaults: dict[str, int]) -> None:
        with self._lock:
            docs = self._collections.setdefault(collection, {})
            if doc_id not in docs:
                docs[doc_id] = dict(defaults)

    def get_document(self, collection: str, doc_id: str) -> Optional[dict[str, int]]:
        with self._lock:
            doc = self._collections.get(collection, {}).get(doc_id)
            return dict(doc) if doc is not None else None

    def count_documents(self, collection: str) -> int:
        with self._lock:
            return len(self._collections.get(collection, {}))

    def collections(self) -> list[str]:
        """Names of all collections, sorted."""
        with self._lock:
            return sorted(self._collections)

    def to_dict(self) -> dict:
        """Snapshot of every collection."""
        with self._lock:
            return {
                name: {doc_id: dict(doc) for doc_id, doc in docs.items()}
                for name, docs in self._collections.items()
            }

    def load_dict(self, data: dict) -> None:
        """Replace the store contents with a snapshot from ``to_dict``."""
        with self._lock:
            self._collections = {
                name: {doc_id: {k: int(v) for k, v in doc.items()} for doc_id, doc in docs.items()}
                for name, docs in data.items()
            }


class JsonFileBackend(MemoryBackend):
    """Memory backend persisted to a JSON file.

    The file is loaded on construction when it exists. With ``autosave``
    every mutation takes an inter-process lock on ``<path>.lock``, reloads
    the file, applies the change and writes the file back, so several
    sessions sharing one model file never lose each other's updates.
    Reads pick up changes written by other sessions. Without ``autosave``
    the backend works on its own snapshot and writes it on ``save()`` or
    ``close()``.

    The file is replaced atomically: a crash mid-write leaves the previous
    contents in place.

    Args:
        path: JSON file holding the collections.
        autosave: Write the file after every mutation.
        lock_timeout: Seconds to wait for the file lock (-1 waits forever).
    """

    name = "json"

    def __init__(self, path: str | Path, autosave: bool = True, lock_timeout: float = 30) -> None:
        super().__init__()
        self.path = Path(path)
        self.autosave = autosave
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file_lock = FileLock(f"{self.path}.lock", timeout=lock_timeout)
        self._stamp: Optional[tuple[int, int]] = None
        if self.path.exists():
            self._reload()
            logger.debug("Loaded %d collections from %s", len(self.collections()), self.path)

    def _file_stamp(self) -> Optional[tuple[int, int]]:
        try:
            stat = self.path.stat()
        except FileNotFoundError:
            return None
        return stat.st_mtime_ns, stat.st_size

    def _reload(self) -> None:
        stamp = self._file_stamp()
        if stamp is None:
            return
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        self.load_dict(data.get("collections", {}))
        self._stamp = stamp

    def _refresh(self) -> None:
        """Reload the file if another session has rewritten it."""
        if self.autosave and self._file_stamp() != self._stamp:
            self._reload()

    def increment(self, collection: str, doc_id: str, field: str, amount: int = 1) -> int:
        if not self.autosave:
            return super().increment(collection, doc_id, field, amount)
        with self._lock, self._file_lock:
            self._reload()
            value = super().increment(collection, doc_id, field, amount)
            self.save()
            return value

    def ensure_document(self, collection: str, doc_id: str, defaults: dict[str, int]) -> None:
        if not self.autosave:
            super().ensure_document(collection, doc_id, defaults)
            return
        with self._lock, self._file_lock:
            self._reload()
            if super().get_document(collection, doc_id) is None:
                super().ensure_document(collection, doc_id, defaults)
                self.save()

    def get_document(self, collection: str, doc_id: str) -> Optional[dict[str, int]]:
        with self._lock:
            self._refresh()
            return super().get_document(collection, doc_id)

    def count_documents(self, collection: str) -> int:
        with self._lock:
            self._refresh()
            return super().count_documents(collection)

    def save(self) -> None:
        """Write all collections to the JSON file, replacing it atomically."""
        with self._lock, self._file_lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump({"version": "1.0", "collections": self.to_dict()}, f, indent=2)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
            self._stamp = self._file_stamp()

    def close(self) -> None:
        self.save()


# ---------------------------------------------------------------------------
# Redis backend
# ---------------------------------------------------------------------------


class RedisBackend(StorageBackend):
    """Document store on Redis hashes.

    Key structure:
    - ``{prefix}:{collection}:{doc_id}`` - hash of counter fields
    - ``{prefix}:{collection}:_ids`` - set of document ids in the collection

    Increments run ``HINCRBY`` and ``SADD`` in one MULTI/EXEC pipeline, so
    concurrent training sessions sharing a server never lose updates.

    Args:
        url: Redis connection URL.
        prefix: Key prefix acting as the database name.
        client: Pre-built ``redis.Redis`` client (overrides ``url``).
    """

    name = "redis"

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        prefix: str = "IPASS",
        client: object | None = None,
    ) -> None:
        if client is None:
            try:
                import redis
            except ImportError as exc:
                raise ImportError(
                    "redis is required for the Redis backend. Install it with: pip install redis"
                ) from exc
            client = redis.Redis.from_url(url, decode_responses=True)
        self._client = client
        self.prefix = prefix

    def _doc_key(self, collection: str, doc_id: str) -> str:
        return f"{self.prefix}:{collection}:{doc_id}"

    def _index_key(self, collection: str) -> str:
        return f"{self.prefix}:{collection}:_ids"

    def ping(self) -> bool:
        """Check connectivity; raises the client's connection error on failure."""
        return bool(self._client.ping())

    def increment(self, collection: str, doc_id: str, field: str, amount: int = 1) -> int:
        pipe = self._client.pipeline(transaction=True)
        pipe.hincrby(self._doc_key(collection, doc_id), field, amount)
        pipe.sadd(self._index_key(collection), doc_id)
        value, _ = pipe.execute()
        return int(value)

    def ensure_document(self, collection: str, doc_id: str, defaults: dict[str, int]) -> None:
        key = self._doc_key(collection, doc_id)
        pipe = self._client.pipeline(transaction=True)
        for field, value in defaults.items():
            pipe.hsetnx(key, field, value)
        pipe.sadd(self._index_key(collection), doc_id)
        pipe.execute()

    def get_document(self, collection: str, doc_id: str) -> Optional[dict[str, int]]:
        raw = self._client.hgetall(self._doc_key(collection, doc_id))
        return _decode_hash(raw) if raw else None

    def get_documents(self, collection: str, doc_ids: Iterable[str]) -> dict[str, dict[str, int]]:
        ids = list(doc_ids)
        if not ids:
            return {}
        pipe = self._client.pipeline(transaction=False)
        for doc_id in ids:
            pipe.hgetall(self._doc_key(collection, doc_id))
        return {doc_id: _decode_hash(raw) for doc_id, raw in zip(ids, pipe.execute()) if raw}

    def count_documents(self, collection: str) -> int:
        return int(self._client.scard(self._index_key(collection)))

    def close(self) -> None:
        self._client.close()


def _decode_hash(raw: dict) -> dict[str, int]:
    decoded: dict[str, int] = {}
    for key, value in raw.items():
        if isinstance(key, bytes):
            key = key.decode("utf-8")
        decoded[key] = int(value)
    return decoded


def create_backend(settings: "Settings") -> StorageBackend:
    """Build the backend named by ``settings.backend``.

    Raises:
        ValueError: If the backend name is unknown.
    """
    name = settings.backend.lower()
    if name == MemoryBackend.name:
        return MemoryBackend()
    if name == JsonFileBackend.name:
        return JsonFileBackend(settings.data_path)
    if name == RedisBackend.name:
        return RedisBackend(url=settings.redis_url, prefix=settings.key_prefix)
    raise ValueError(
        f"Unknown storage backend '{settings.backend}'. Supported: json, memory, redis"
    )
