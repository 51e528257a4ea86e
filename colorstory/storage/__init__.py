"""
Storage collaborators: story documents and generated assets.
"""

from .documents import (
    SERVER_TIMESTAMP,
    STORIES_COLLECTION,
    DocumentStore,
    InMemoryDocumentStore,
    YamlDocumentStore,
)
from .objects import InMemoryObjectStore, LocalObjectStore, ObjectStore

__all__ = [
    "SERVER_TIMESTAMP",
    "STORIES_COLLECTION",
    "DocumentStore",
    "InMemoryDocumentStore",
    "YamlDocumentStore",
    "InMemoryObjectStore",
    "LocalObjectStore",
    "ObjectStore",
]
