"""
Storage abstraction layer.

All persistence goes through these interfaces. The authorization core only
ever sees a document store per entity, reached by filter:

- find_one / find      → lookups
- insert               → new document
- update               → returns the document after the change
- delete               → returns the document as it was before removal

Implementations guarantee single-document atomicity and nothing more.
There is no multi-document transaction.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel


Document = dict[str, Any]
Filter = dict[str, Any]


# =============================================================================
# Storage Interface
# =============================================================================


class DocumentStore(ABC):
    """
    One collection of documents (accounts, sessions, groups, members).

    Filters are equality matches on top-level fields. A scalar filter value
    also matches a list field that contains it, so
    ``{"applications": "app-1"}`` finds accounts listing ``app-1``.

    Local Implementation: in-memory dict
    """

    @abstractmethod
    async def find_one(self, filters: Filter) -> Document | None:
        """First document matching filters, or None."""
        pass

    @abstractmethod
    async def find(
        self,
        filters: Filter | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Document]:
        """All documents matching filters."""
        pass

    @abstractmethod
    async def insert(self, document: Document) -> Document:
        """Store a new document, return it as stored."""
        pass

    @abstractmethod
    async def update(self, filters: Filter, changes: Document) -> Document | None:
        """Apply changes to the first match, return the new value or None."""
        pass

    @abstractmethod
    async def delete(self, filters: Filter) -> Document | None:
        """Remove the first match, return the old value or None."""
        pass

    async def delete_many(self, filters: Filter) -> int:
        """Remove every match, return how many were removed."""
        removed = 0
        while await self.delete(filters) is not None:
            removed += 1
        return removed


# =============================================================================
# Storage Provider (dependency injection container)
# =============================================================================


class StorageProvider(BaseModel):
    """
    Container for the four record collections.

    Initialize once at app startup with appropriate implementations.
    Services receive this and use the interfaces without knowing
    the underlying implementation.
    """

    model_config = {"arbitrary_types_allowed": True}

    accounts: DocumentStore
    sessions: DocumentStore
    groups: DocumentStore
    members: DocumentStore


# =============================================================================
# Collection Names
# =============================================================================


class Collections:
    """Standard collection/table names."""

    ACCOUNTS = "accounts"
    SESSIONS = "sessions"
    GROUPS = "groups"
    MEMBERS = "members"
