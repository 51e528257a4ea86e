"""
Document store interface for the ``colorStories`` collection, with local implementations.
"""

from __future__ import annotations

import copy
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Protocol

import yaml

STORIES_COLLECTION = "colorStories"


class _ServerTimestamp:
    """Sentinel replaced by the store's clock when a write is applied."""

    _instance: "_ServerTimestamp | None" = None

    def __new__(cls) -> "_ServerTimestamp":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


class DocumentStore(Protocol):
    """
    Minimal document store contract consumed by the pipeline.

    ``merge`` must preserve fields it does not mention and resolve
    :data:`SERVER_TIMESTAMP` values at write time.
    """

    def new_id(self) -> str: ...

    def create(self, doc_id: str, data: Mapping[str, Any]) -> None: ...

    def get(self, doc_id: str) -> dict[str, Any] | None: ...

    def merge(self, doc_id: str, data: Mapping[str, Any]) -> None: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def resolve_sentinels(data: Mapping[str, Any], *, now: datetime) -> dict[str, Any]:
    """
    Return a deep copy of ``data`` with timestamp sentinels replaced by ``now``.
    """
    resolved: dict[str, Any] = {}
    for key, value in data.items():
        if value is SERVER_TIMESTAMP:
            resolved[key] = now
        elif isinstance(value, Mapping):
            resolved[key] = resolve_sentinels(value, now=now)
        else:
            resolved[key] = copy.deepcopy(value)
    return resolved


class InMemoryDocumentStore:
    """
    Dict-backed store. Every applied write is appended to :attr:`writes`.
    """

    def __init__(self) -> None:
        self._documents: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()
        self.writes: list[tuple[str, dict[str, Any]]] = []

    def new_id(self) -> str:
        return uuid.uuid4().hex

    def create(self, doc_id: str, data: Mapping[str, Any]) -> None:
        with self._lock:
            resolved = resolve_sentinels(data, now=_utcnow())
            self._documents[doc_id] = resolved
            self.writes.append((doc_id, copy.deepcopy(resolved)))

    def get(self, doc_id: str) -> dict[str, Any] | None:
        with self._lock:
            document = self._documents.get(doc_id)
            return copy.deepcopy(document) if document is not None else None

    def merge(self, doc_id: str, data: Mapping[str, Any]) -> None:
        with self._lock:
            resolved = resolve_sentinels(data, now=_utcnow())
            self._documents.setdefault(doc_id, {}).update(resolved)
            self.writes.append((doc_id, copy.deepcopy(resolved)))

    def writes_for(self, doc_id: str) -> list[dict[str, Any]]:
        return [data for target, data in self.writes if target == doc_id]


class YamlDocumentStore:
    """
    Stores each document as ``<root>/<doc_id>.yaml``.
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).expanduser()
        self._root.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    @property
    def root(self) -> Path:
        return self._root

    def new_id(self) -> str:
        return uuid.uuid4().hex

    def create(self, doc_id: str, data: Mapping[str, Any]) -> None:
        with self._lock:
            self._write(doc_id, resolve_sentinels(data, now=_utcnow()))

    def get(self, doc_id: str) -> dict[str, Any] | None:
        with self._lock:
            return self._read(doc_id)

    def merge(self, doc_id: str, data: Mapping[str, Any]) -> None:
        with self._lock:
            document = self._read(doc_id) or {}
            document.update(resolve_sentinels(data, now=_utcnow()))
            self._write(doc_id, document)

    def _path(self, doc_id: str) -> Path:
        if not doc_id or "/" in doc_id or "\\" in doc_id or doc_id.startswith("."):
            raise ValueError(f"Invalid document id {doc_id!r}.")
        return self._root / f"{doc_id}.yaml"

    def _read(self, doc_id: str) -> dict[str, Any] | None:
        path = self._path(doc_id)
        if not path.exists():
            return None
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Document {doc_id!r} must deserialize to a mapping.")
        return data

    def _write(self, doc_id: str, data: Mapping[str, Any]) -> None:
        path = self._path(doc_id)
        path.write_text(
            yaml.safe_dump(dict(data), sort_keys=False, allow_unicode=True),
            encoding="utf-8",
        )
