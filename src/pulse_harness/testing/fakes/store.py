"""Testing fakes – InMemoryStateStore.

Supports the subset of MongoDB query language the scenario suites use:
equality on dotted paths plus ``$eq``, ``$ne``, ``$gt``, ``$gte``, ``$lt``,
``$lte``, ``$in``, ``$nin`` and ``$exists``; updates with ``$set``,
``$unset``, ``$inc`` and ``$push`` (anything else is a replacement).
"""
from __future__ import annotations

import copy
import operator
import uuid
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from pulse_harness.correlation.predicate import MISSING, resolve_path
from pulse_harness.kernel.errors import ValidationError
from pulse_harness.kernel.ports import Document, Filter, StateStore


_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "$eq": lambda got, want: got is not MISSING and got == want,
    "$ne": lambda got, want: got is MISSING or got != want,
    "$gt": lambda got, want: _ordered(operator.gt, got, want),
    "$gte": lambda got, want: _ordered(operator.ge, got, want),
    "$lt": lambda got, want: _ordered(operator.lt, got, want),
    "$lte": lambda got, want: _ordered(operator.le, got, want),
    "$in": lambda got, want: got is not MISSING and got in want,
    "$nin": lambda got, want: got is MISSING or got not in want,
    "$exists": lambda got, want: (got is not MISSING) == bool(want),
}


def _ordered(op: Callable[[Any, Any], bool], got: Any, want: Any) -> bool:
    if got is MISSING or got is None:
        return False
    try:
        return op(got, want)
    except TypeError:
        return False


def _matches(doc: Document, filter: Filter) -> bool:
    for path, condition in filter.items():
        got = resolve_path(doc, path)
        if isinstance(condition, Mapping) and condition and all(k.startswith("$") for k in condition):
            for op_name, operand in condition.items():
                op = _OPERATORS.get(op_name)
                if op is None:
                    raise ValidationError(f"Unsupported query operator {op_name!r}")
                if not op(got, operand):
                    return False
        elif got is MISSING or got != condition:
            return False
    return True


def _set_path(doc: Document, path: str, value: Any) -> None:
    *parents, leaf = path.split(".")
    for part in parents:
        doc = doc.setdefault(part, {})
    doc[leaf] = value


def _unset_path(doc: Document, path: str) -> None:
    *parents, leaf = path.split(".")
    for part in parents:
        doc = doc.get(part)
        if not isinstance(doc, dict):
            return
    doc.pop(leaf, None)


def _apply_update(doc: Document, update: Mapping[str, Any]) -> Document:
    if not any(k.startswith("$") for k in update):
        return {"_id": doc["_id"], **copy.deepcopy(dict(update))}
    result = copy.deepcopy(doc)
    for op_name, fields in update.items():
        for path, value in fields.items():
            if op_name == "$set":
                _set_path(result, path, copy.deepcopy(value))
            elif op_name == "$unset":
                _unset_path(result, path)
            elif op_name == "$inc":
                current = resolve_path(result, path)
                _set_path(result, path, (0 if current is MISSING else current) + value)
            elif op_name == "$push":
                current = resolve_path(result, path)
                _set_path(result, path, ([] if current is MISSING else list(current)) + [copy.deepcopy(value)])
            else:
                raise ValidationError(f"Unsupported update operator {op_name!r}")
    return result


def _project(doc: Document, projection: Mapping[str, Any] | None) -> Document:
    if not projection:
        return copy.deepcopy(doc)
    include = {k for k, v in projection.items() if v and k != "_id"}
    if include:
        projected = {k: copy.deepcopy(doc[k]) for k in include if k in doc}
        if projection.get("_id", 1) and "_id" in doc:
            projected["_id"] = doc["_id"]
        return projected
    return {k: copy.deepcopy(v) for k, v in doc.items() if k not in projection}


class InMemoryStateStore(StateStore):
    """Dict-of-lists :class:`StateStore` for tests; documents are deep-copied in and out."""

    def __init__(self) -> None:
        self._collections: dict[str, list[Document]] = {}

    async def find(
        self,
        collection: str,
        filter: Filter | None = None,
        *,
        projection: Mapping[str, Any] | None = None,
        sort: Sequence[tuple[str, int]] | None = None,
        skip: int = 0,
        limit: int = 0,
    ) -> list[Document]:
        docs = [d for d in self._collections.get(collection, []) if _matches(d, filter or {})]
        for path, direction in reversed(list(sort or [])):
            docs.sort(key=lambda d, p=path: (resolve_path(d, p) is MISSING, resolve_path(d, p)), reverse=direction < 0)
        docs = docs[skip:]
        if limit:
            docs = docs[:limit]
        return [_project(d, projection) for d in docs]

    async def find_one(self, collection: str, filter: Filter | None = None) -> Document | None:
        found = await self.find(collection, filter, limit=1)
        return found[0] if found else None

    async def insert(self, collection: str, documents: Document | Sequence[Document]) -> list[Any]:
        batch = [documents] if isinstance(documents, Mapping) else list(documents)
        col = self._collections.setdefault(collection, [])
        ids = []
        for doc in batch:
            stored = copy.deepcopy(dict(doc))
            stored.setdefault("_id", uuid.uuid4().hex)
            if any(d["_id"] == stored["_id"] for d in col):
                raise ValidationError(f"Duplicate _id {stored['_id']!r} in '{collection}'")
            col.append(stored)
            ids.append(stored["_id"])
        return ids

    async def update(
        self,
        collection: str,
        filter: Filter,
        update: Mapping[str, Any],
        *,
        upsert: bool = False,
        multiple: bool = False,
    ) -> int:
        col = self._collections.setdefault(collection, [])
        targets = [i for i, doc in enumerate(col) if _matches(doc, filter)]
        if not multiple:
            targets = targets[:1]
        if not targets and upsert:
            seed = {k: copy.deepcopy(v) for k, v in filter.items() if not isinstance(v, Mapping) and "." not in k}
            seed.setdefault("_id", uuid.uuid4().hex)
            col.append(_apply_update(seed, update))
            return 0
        modified = 0
        for i in targets:
            updated = _apply_update(col[i], update)
            if updated != col[i]:
                col[i] = updated
                modified += 1
        return modified

    async def delete(self, collection: str, filter: Filter, *, multiple: bool = False) -> int:
        col = self._collections.get(collection, [])
        doomed = [d for d in col if _matches(d, filter)]
        if not multiple:
            doomed = doomed[:1]
        for doc in doomed:
            col.remove(doc)
        return len(doomed)

    async def count(self, collection: str, filter: Filter | None = None) -> int:
        return sum(1 for d in self._collections.get(collection, []) if _matches(d, filter or {}))

    def clear(self) -> None:
        self._collections.clear()


__all__ = ["InMemoryStateStore"]
