"""Kernel ports – State Store (document store used for final-state assertions)."""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

type Document = dict[str, Any]
type Filter = Mapping[str, Any]


@runtime_checkable
class StateStore(Protocol):
    """Port: filter-addressed CRUD over named collections.

    Never consulted by the correlation engine; tests use it after a
    correlation resolves.
    """

    async def find(
        self,
        collection: str,
        filter: Filter | None = None,
        *,
        projection: Mapping[str, Any] | None = None,
        sort: Sequence[tuple[str, int]] | None = None,
        skip: int = 0,
        limit: int = 0,
    ) -> list[Document]: ...

    async def find_one(self, collection: str, filter: Filter | None = None) -> Document | None: ...

    async def insert(self, collection: str, documents: Document | Sequence[Document]) -> list[Any]:
        """Insert one or many documents; return the inserted ids."""
        ...

    async def update(
        self,
        collection: str,
        filter: Filter,
        update: Mapping[str, Any],
        *,
        upsert: bool = False,
        multiple: bool = False,
    ) -> int:
        """Return the number of modified documents."""
        ...

    async def delete(self, collection: str, filter: Filter, *, multiple: bool = False) -> int: ...

    async def count(self, collection: str, filter: Filter | None = None) -> int: ...


__all__ = ["Document", "Filter", "StateStore"]
