"""MongoDB adapter – motor-backed state store."""
from pulse_harness.adapters.mongodb.store import MongoStateStore

__all__ = ["MongoStateStore"]
