"""
Local storage implementations for development and tests.

In-memory document collections that work without any external services.
"""

from __future__ import annotations

import copy
from typing import Any

from gatehouse.storage.base import (
    Collections,
    Document,
    DocumentStore,
    Filter,
    StorageProvider,
)


def _matches(doc: Document, filters: Filter | None) -> bool:
    if not filters:
        return True
    for key, value in filters.items():
        field_value = doc.get(key)
        if isinstance(field_value, list) and not isinstance(value, list):
            if value not in field_value:
                return False
        elif field_value != value:
            return False
    return True


# =============================================================================
# In-Memory Document Storage
# =============================================================================


class InMemoryDocumentStore(DocumentStore):
    """In-memory document collection, keyed by the document's ``id``."""

    def __init__(self, name: str = ""):
        self.name = name
        self._data: dict[str, Document] = {}

    def __len__(self) -> int:
        return len(self._data)

    async def find_one(self, filters: Filter) -> Document | None:
        for doc in self._data.values():
            if _matches(doc, filters):
                return copy.deepcopy(doc)
        return None

    async def find(
        self,
        filters: Filter | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Document]:
        results = [copy.deepcopy(d) for d in self._data.values() if _matches(d, filters)]
        end = offset + limit if limit is not None else None
        return results[offset:end]

    async def insert(self, document: Document) -> Document:
        doc_id = document.get("id")
        if not doc_id:
            raise ValueError(f"Document for {self.name or 'collection'} has no id")
        if doc_id in self._data:
            raise ValueError(f"Duplicate id in {self.name or 'collection'}: {doc_id}")
        self._data[doc_id] = copy.deepcopy(document)
        return copy.deepcopy(document)

    async def update(self, filters: Filter, changes: dict[str, Any]) -> Document | None:
        for doc_id, doc in self._data.items():
            if _matches(doc, filters):
                updated = {**doc, **copy.deepcopy(changes), "id": doc_id}
                self._data[doc_id] = updated
                return copy.deepcopy(updated)
        return None

    async def delete(self, filters: Filter) -> Document | None:
        for doc_id, doc in list(self._data.items()):
            if _matches(doc, filters):
                del self._data[doc_id]
                return doc
        return None


# =============================================================================
# Factory
# =============================================================================


def create_local_storage() -> StorageProvider:
    """Create a StorageProvider with in-memory collections."""
    return StorageProvider(
        accounts=InMemoryDocumentStore(Collections.ACCOUNTS),
        sessions=InMemoryDocumentStore(Collections.SESSIONS),
        groups=InMemoryDocumentStore(Collections.GROUPS),
        members=InMemoryDocumentStore(Collections.MEMBERS),
    )
