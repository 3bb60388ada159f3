"""Unit tests for InMemoryAttemptStateStore."""

from datetime import datetime

from src.adapters.session.memory import InMemoryAttemptStateStore
from src.domain.models import RegistrationAttemptState


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestInMemoryAttemptStateStore:
    """Tests for the per-session attempt store."""

    def test_unknown_session_is_zero_state(self) -> None:
        """A new session starts with no attempts."""
        assert InMemoryAttemptStateStore().get("new") == RegistrationAttemptState()

    def test_put_then_get(self, now: datetime) -> None:
        """Stored state is returned for the same session only."""
        store = InMemoryAttemptStateStore()
        state = RegistrationAttemptState().recorded(now)

        store.put("a", state)

        assert store.get("a") == state
        assert store.get("b") == RegistrationAttemptState()

    def test_reset_state_is_dropped(self, now: datetime) -> None:
        """Storing a zero state forgets the session."""
        store = InMemoryAttemptStateStore()
        store.put("a", RegistrationAttemptState().recorded(now))

        store.put("a", RegistrationAttemptState())

        assert "a" not in store._states
        assert store.get("a") == RegistrationAttemptState()


class TestEviction:
    """Tests for expiry of abandoned sessions."""

    def test_state_kept_inside_window(self, now: datetime) -> None:
        """A session is remembered until its window has passed."""
        clock = FakeClock()
        store = InMemoryAttemptStateStore(window_seconds=300, timer=clock)
        state = RegistrationAttemptState().recorded(now)
        store.put("a", state)

        clock.now = 299.0

        assert store.get("a") == state

    def test_expired_session_evicted(self, now: datetime) -> None:
        """A session that stopped on a failure is dropped after the window."""
        clock = FakeClock()
        store = InMemoryAttemptStateStore(window_seconds=300, timer=clock)
        store.put("a", RegistrationAttemptState().recorded(now))

        clock.now = 301.0
        store.put("b", RegistrationAttemptState().recorded(now))

        assert "a" not in store._states
        assert store.get("a") == RegistrationAttemptState()
        assert len(store._states) == 1

    def test_cookie_dropping_flood_is_bounded(self, now: datetime) -> None:
        """Fresh session ids cannot grow the store past its capacity."""
        store = InMemoryAttemptStateStore(max_sessions=10)
        state = RegistrationAttemptState().recorded(now)

        for i in range(100):
            store.put(f"session-{i}", state)

        assert len(store._states) == 10
