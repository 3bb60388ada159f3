"""Session adapters - Per-session attempt state storage."""

from .memory import InMemoryAttemptStateStore

__all__ = ["InMemoryAttemptStateStore"]
