"""
Storage abstractions.

The core reaches Accounts, Sessions, Groups and Members only through
``DocumentStore`` handles bundled in a ``StorageProvider``.
"""

from gatehouse.storage.base import (
    DocumentStore,
    StorageProvider,
    Collections,
)
from gatehouse.storage.local import InMemoryDocumentStore, create_local_storage

__all__ = [
    "DocumentStore",
    "StorageProvider",
    "Collections",
    "InMemoryDocumentStore",
    "create_local_storage",
]
