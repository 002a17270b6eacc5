"""Correlation – bounded-wait matching of asynchronous events to actions."""
from pulse_harness.correlation.engine import CorrelationEngine, CorrelationHandle
from pulse_harness.correlation.predicate import (
    MISSING,
    Predicate,
    always,
    as_predicate,
    field_compare,
    field_equals,
    field_exists,
    field_in,
    field_matches,
    never,
    resolve_path,
    where,
)
from pulse_harness.correlation.result import (
    Cancelled,
    DecodeError,
    Errored,
    MatchResult,
    Matched,
    MatchedMany,
    NoMatchError,
    TimedOut,
)
from pulse_harness.correlation.subscription import (
    MatchMode,
    Subscription,
    SubscriptionState,
    new_group_id,
)
from pulse_harness.kernel.messaging import Origin

__all__ = [
    "Cancelled",
    "CorrelationEngine",
    "CorrelationHandle",
    "DecodeError",
    "Errored",
    "MISSING",
    "MatchMode",
    "MatchResult",
    "Matched",
    "MatchedMany",
    "NoMatchError",
    "Origin",
    "Predicate",
    "Subscription",
    "SubscriptionState",
    "TimedOut",
    "always",
    "as_predicate",
    "field_compare",
    "field_equals",
    "field_exists",
    "field_in",
    "field_matches",
    "never",
    "new_group_id",
    "resolve_path",
    "where",
]
