"""
Auth state notifier - Explicit subscription to sign-in/sign-out transitions.

Subscribers are called at most once per actual transition: setting the
same account twice, or clearing an already-empty state, notifies nobody.
"""

from collections.abc import Callable

from .models import Account

AuthStateCallback = Callable[[Account | None], None]
Unsubscribe = Callable[[], None]


class AuthStateNotifier:
    """Holds the current account and notifies subscribers on change."""

    def __init__(self) -> None:
        self._current: Account | None = None
        self._subscribers: list[AuthStateCallback] = []

    @property
    def current(self) -> Account | None:
        return self._current

    def subscribe(self, on_change: AuthStateCallback) -> Unsubscribe:
        """
        Register a callback for auth state transitions.

        Returns:
            Function removing the callback; calling it again is a no-op
        """
        self._subscribers.append(on_change)

        def unsubscribe() -> None:
            if on_change in self._subscribers:
                self._subscribers.remove(on_change)

        return unsubscribe

    def set(self, account: Account | None) -> None:
        """Replace the current account, notifying subscribers if it changed."""
        if account == self._current:
            return
        self._current = account
        for callback in list(self._subscribers):
            callback(account)
