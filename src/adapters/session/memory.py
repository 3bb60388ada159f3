"""
In-memory attempt state store - Implements AttemptStateStore protocol.

Holds one RegistrationAttemptState per client session. State is local
to the process: separate workers do not share counters.

Entries live in a cachetools TTLCache whose TTL is the rate-limit
window. An entry expires one window after its last write, by which time
the window it records has expired too, so eviction never forgets an
active limit. When full, the least recently used sessions are dropped.
"""

import threading
import time
from collections.abc import Callable

from cachetools import TTLCache

from src.domain.models import RegistrationAttemptState

DEFAULT_MAX_SESSIONS = 100_000


class InMemoryAttemptStateStore:
    """
    Implements AttemptStateStore protocol with a TTLCache guarded by a lock.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(
        self,
        window_seconds: int = 300,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._states = TTLCache(maxsize=max_sessions, ttl=window_seconds, timer=timer)
        self._lock = threading.Lock()

    def get(self, session_id: str) -> RegistrationAttemptState:
        with self._lock:
            return self._states.get(session_id, RegistrationAttemptState())

    def put(self, session_id: str, state: RegistrationAttemptState) -> None:
        with self._lock:
            if state == RegistrationAttemptState():
                self._states.pop(session_id, None)
            else:
                self._states[session_id] = state
