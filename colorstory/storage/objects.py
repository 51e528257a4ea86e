"""
Object store interface for generated assets, with local implementations.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Protocol


class ObjectStore(Protocol):
    """
    Durable byte storage. Objects are publicly readable as soon as ``store`` returns.
    """

    def store(self, path: str, data: bytes, content_type: str) -> str: ...


def _normalize_object_path(path: str) -> str:
    normalized = PurePosixPath(path.strip().lstrip("/"))
    if not normalized.parts or ".." in normalized.parts:
        raise ValueError(f"Invalid object path {path!r}.")
    return str(normalized)


@dataclass(frozen=True)
class StoredObject:
    data: bytes
    content_type: str


class InMemoryObjectStore:
    """
    Keeps objects in memory and hands out ``memory://`` URLs.
    """

    def __init__(self, bucket: str = "colorstory") -> None:
        self._bucket = bucket
        self.objects: dict[str, StoredObject] = {}

    def store(self, path: str, data: bytes, content_type: str) -> str:
        key = _normalize_object_path(path)
        self.objects[key] = StoredObject(data=bytes(data), content_type=content_type)
        return f"memory://{self._bucket}/{key}"


class LocalObjectStore:
    """
    Writes objects below a root directory.

    Parameters
    ----------
    root:
        Directory that receives the files.
    public_base_url:
        Optional URL prefix under which ``root`` is served. When omitted, ``file://``
        URIs are returned.
    """

    def __init__(self, root: str | Path, *, public_base_url: str | None = None) -> None:
        self._root = Path(root).expanduser().resolve()
        self._root.mkdir(parents=True, exist_ok=True)
        self._public_base_url = public_base_url.rstrip("/") if public_base_url else None

    def store(self, path: str, data: bytes, content_type: str) -> str:
        key = _normalize_object_path(path)
        target = self._root / key
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        if self._public_base_url:
            return f"{self._public_base_url}/{key}"
        return target.as_uri()
