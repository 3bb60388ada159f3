"""
Domain models - Value objects for the waitlist registration workflow.
"""

import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum


@dataclass(frozen=True)
class Account:
    """Account as reported by the identity provider."""

    user_id: str
    email: str
    display_name: str | None = None
    email_verified: bool = False


@dataclass(frozen=True)
class WaitlistEntry:
    """
    Waitlist record for a registered account.

    ``id`` and ``timestamp`` are assigned by the store. Both are None
    when the record could not be written (account exists regardless).
    """

    full_name: str
    email: str
    user_id: str
    created_at: datetime
    id: str | None = None
    timestamp: datetime | None = None


@dataclass(frozen=True)
class RegistrationAttemptState:
    """
    Per-session registration attempt counter.

    Immutable: every transition returns a new state. The caller owns the
    value and hands it back to the next ``register`` call.
    """

    attempt_count: int = 0
    window_started_at: datetime | None = None

    def window_expired(self, now: datetime, window_seconds: int) -> bool:
        """True if a window was started and has run past its duration."""
        if self.window_started_at is None:
            return False
        return now - self.window_started_at > timedelta(seconds=window_seconds)

    def refreshed(self, now: datetime, window_seconds: int) -> "RegistrationAttemptState":
        """Return a zeroed state if the current window expired, else self."""
        if self.window_expired(now, window_seconds):
            return self.reset()
        return self

    def is_limited(self, now: datetime, max_attempts: int, window_seconds: int) -> bool:
        """True if the attempt budget is spent inside an unexpired window."""
        return self.attempt_count >= max_attempts and not self.window_expired(now, window_seconds)

    def recorded(self, now: datetime) -> "RegistrationAttemptState":
        """Count one attempt, opening a window if none is running."""
        if self.attempt_count == 0 or self.window_started_at is None:
            return RegistrationAttemptState(attempt_count=self.attempt_count + 1, window_started_at=now)
        return replace(self, attempt_count=self.attempt_count + 1)

    def retry_after(self, now: datetime, window_seconds: int) -> int:
        """Whole seconds until the current window expires (0 if none is running)."""
        if self.window_started_at is None:
            return 0
        remaining = self.window_started_at + timedelta(seconds=window_seconds) - now
        return max(0, math.ceil(remaining.total_seconds()))

    def reset(self) -> "RegistrationAttemptState":
        return RegistrationAttemptState()


class ProfileOutcome(Enum):
    """Outcome of setting the account display name."""

    UPDATED = "updated"
    FAILED = "failed"


class WaitlistOutcome(Enum):
    """Outcome of the best-effort waitlist write."""

    RECORDED = "recorded"
    WRITE_FAILED = "write_failed"
    NOT_CONFIGURED = "not_configured"


class RegistrationWarning(str, Enum):
    """Non-fatal problems reported alongside a successful registration."""

    PROFILE_UPDATE_FAILED = "ProfileUpdateFailed"
    WAITLIST_WRITE_FAILED = "WaitlistWriteFailed"


@dataclass(frozen=True)
class RegistrationResult:
    """
    Two-phase registration result.

    The account is the primary outcome and always exists on a result.
    Profile and waitlist outcomes are secondary and never undo it.
    """

    account: Account
    entry: WaitlistEntry
    profile: ProfileOutcome
    waitlist: WaitlistOutcome
    attempts: RegistrationAttemptState
    warnings: tuple[RegistrationWarning, ...] = ()
    verification_link: str | None = None

    @property
    def recorded(self) -> bool:
        return self.waitlist is WaitlistOutcome.RECORDED
