"""Correlation – composable, side-effect-free event predicates.

A predicate sees only the decoded event value (a mapping) and returns a
bool. Helpers address nested fields with dotted paths
(``"metadata.retryCount"``); a missing path is a non-match, never an error.

Example::

    created = field_equals(orderId=order_id, eventType="ORDER_CREATED")
    status = field_equals(orderId=order_id) & field_in(
        "eventType", {"ORDER_STATUS_UPDATED", "ORDER_COMPLETED"}
    )
"""

from __future__ import annotations

import operator
import re
from collections.abc import Callable, Collection, Mapping
from typing import Any

from pulse_harness.kernel.errors import ValidationError

type EventValue = Mapping[str, Any]

MISSING = object()
"""Sentinel returned by :func:`resolve_path` for an absent path."""

_COMPARATORS: dict[str, Callable[[Any, Any], bool]] = {
    "eq": operator.eq,
    "ne": operator.ne,
    "gt": operator.gt,
    "ge": operator.ge,
    "lt": operator.lt,
    "le": operator.le,
}


class Predicate:
    """Callable wrapper with ``&``, ``|`` and ``~`` combinators."""

    __slots__ = ("_func", "name")

    def __init__(self, func: Callable[[EventValue], Any], *, name: str = "") -> None:
        self._func = func
        self.name: str = name or getattr(func, "__name__", "<lambda>")

    def __call__(self, value: EventValue) -> bool:
        return bool(self._func(value))

    def __and__(self, other: Callable[[EventValue], Any]) -> "Predicate":
        right = as_predicate(other)
        return Predicate(lambda v: self(v) and right(v), name=f"({self.name} & {right.name})")

    def __or__(self, other: Callable[[EventValue], Any]) -> "Predicate":
        right = as_predicate(other)
        return Predicate(lambda v: self(v) or right(v), name=f"({self.name} | {right.name})")

    def __invert__(self) -> "Predicate":
        return Predicate(lambda v: not self(v), name=f"~{self.name}")

    def __repr__(self) -> str:
        return f"Predicate({self.name!r})"


def as_predicate(obj: Any) -> Predicate:
    """Coerce a plain callable into a :class:`Predicate`."""
    if isinstance(obj, Predicate):
        return obj
    if callable(obj):
        return Predicate(obj)
    raise ValidationError(
        f"predicate must be callable, got {type(obj).__name__}",
        errors=[{"field": "predicate", "error": "not_callable"}],
    )


def resolve_path(value: Any, path: str) -> Any:
    """Walk a dotted *path*; return :data:`MISSING` when absent.

    Numeric segments index into lists (``"items.0.sku"``).
    """
    current = value
    for part in path.split("."):
        if isinstance(current, Mapping):
            if part not in current:
                return MISSING
            current = current[part]
        elif isinstance(current, list | tuple) and part.lstrip("-").isdigit():
            index = int(part)
            if not -len(current) <= index < len(current):
                return MISSING
            current = current[index]
        else:
            return MISSING
    return current


def where(func: Callable[[EventValue], Any], name: str = "") -> Predicate:
    return Predicate(func, name=name)


def always() -> Predicate:
    return Predicate(lambda _: True, name="always")


def never() -> Predicate:
    return Predicate(lambda _: False, name="never")


def field_equals(fields: Mapping[str, Any] | None = None, /, **kwargs: Any) -> Predicate:
    """Match when every given field equals the expected value.

    Dotted paths must be passed in the positional mapping since they are not
    valid keyword names.
    """
    expected = {**(fields or {}), **kwargs}
    if not expected:
        raise ValidationError("field_equals needs at least one field")
    items = tuple(expected.items())

    def _check(value: EventValue) -> bool:
        for path, want in items:
            got = resolve_path(value, path)
            if got is MISSING or got != want:
                return False
        return True

    return Predicate(_check, name=" & ".join(f"{p}=={w!r}" for p, w in items))


def field_in(path: str, values: Collection[Any]) -> Predicate:
    allowed = tuple(values)

    def _check(value: EventValue) -> bool:
        got = resolve_path(value, path)
        return got is not MISSING and got in allowed

    return Predicate(_check, name=f"{path} in {list(allowed)!r}")


def field_exists(path: str) -> Predicate:
    """Match when *path* is present and not ``None``."""

    def _check(value: EventValue) -> bool:
        got = resolve_path(value, path)
        return got is not MISSING and got is not None

    return Predicate(_check, name=f"exists({path})")


def field_matches(path: str, pattern: str | re.Pattern[str]) -> Predicate:
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern

    def _check(value: EventValue) -> bool:
        got = resolve_path(value, path)
        return isinstance(got, str) and regex.search(got) is not None

    return Predicate(_check, name=f"{path}~/{regex.pattern}/")


def field_compare(path: str, op: str, operand: Any) -> Predicate:
    """Compare a field with ``eq``, ``ne``, ``gt``, ``ge``, ``lt`` or ``le``.

    Incomparable types are a non-match.
    """
    try:
        compare = _COMPARATORS[op]
    except KeyError:
        raise ValidationError(
            f"unknown comparison operator {op!r}",
            errors=[{"field": "op", "allowed": sorted(_COMPARATORS)}],
        ) from None

    def _check(value: EventValue) -> bool:
        got = resolve_path(value, path)
        if got is MISSING or got is None:
            return False
        try:
            return bool(compare(got, operand))
        except TypeError:
            return False

    return Predicate(_check, name=f"{path} {op} {operand!r}")


__all__ = [
    "MISSING",
    "EventValue",
    "Predicate",
    "always",
    "as_predicate",
    "field_compare",
    "field_equals",
    "field_exists",
    "field_in",
    "field_matches",
    "never",
    "resolve_path",
    "where",
]
