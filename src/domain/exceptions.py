"""
Domain exceptions - Semantic error types for the waitlist service.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
"""

from .models import RegistrationAttemptState


class RegistrationError(Exception):
    """
    Base class for terminal registration errors.

    Carries the caller's attempt state as it stands after the failure,
    so the caller can persist it for the next attempt.
    """

    user_message = "Registration failed. Please try again."

    def __init__(self, *args: object, attempts: RegistrationAttemptState | None = None) -> None:
        super().__init__(*args)
        self.attempts = attempts if attempts is not None else RegistrationAttemptState()


class RateLimited(RegistrationError):
    """Too many attempts inside the current rate-limit window."""

    user_message = "Too many registration attempts. Please try again in a few minutes."


class ValidationFailed(RegistrationError):
    """One or more fields failed local validation."""

    user_message = "Please correct the highlighted fields."

    def __init__(
        self, field_errors: dict[str, str], *, attempts: RegistrationAttemptState | None = None
    ) -> None:
        super().__init__(", ".join(sorted(field_errors)), attempts=attempts)
        self.field_errors = dict(field_errors)


class EmailAlreadyInUse(RegistrationError):
    """Identity provider already holds an account for this email."""

    user_message = "This email is already registered"


class WeakPassword(RegistrationError):
    """Identity provider rejected the password."""

    user_message = "Password is too weak"


class InvalidEmailFormat(RegistrationError):
    """Identity provider rejected the email address."""

    user_message = "Invalid email format"


class AccountCreationFailed(RegistrationError):
    """Unrecognised identity provider failure."""

    def __init__(self, detail: str, *, attempts: RegistrationAttemptState | None = None) -> None:
        super().__init__(detail, attempts=attempts)
        self.detail = detail


class ReadError(Exception):
    """Base class for admin read errors."""

    pass


class NotConfigured(ReadError):
    """Waitlist persistence is not configured."""

    pass


class ReadFailed(ReadError):
    """Waitlist query failed."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class AdminAuthError(Exception):
    """Base class for admin sign-in errors."""

    user_message = "Login failed. Please try again."


class InvalidAdminCredentials(AdminAuthError):
    """Credentials do not match the configured admin pair."""

    user_message = "Invalid email or password"


class AdminSignInFailed(AdminAuthError):
    """Identity provider refused the admin sign-in."""

    def __init__(self, user_message: str) -> None:
        super().__init__(user_message)
        self.user_message = user_message


class DispatchError(Exception):
    """Base class for verification email dispatcher errors."""

    pass


class Unauthorized(DispatchError):
    """Shared secret missing or wrong."""

    pass


class BadRequest(DispatchError):
    """Request payload is unusable."""

    pass


class DispatchFailed(DispatchError):
    """Link generation or delivery failed (details are logged, not surfaced)."""

    pass


class InvalidVerificationLink(DispatchError):
    """Verification token is unknown, already used, or expired."""

    pass


# Port-level failures raised by adapters


class IdentityProviderError(Exception):
    """Identity provider failure with a provider error code."""

    def __init__(self, code: str, detail: str | None = None) -> None:
        super().__init__(detail or code)
        self.code = code
        self.detail = detail or code


class WaitlistStoreError(Exception):
    """Waitlist store read or write failure."""

    pass


class VerificationLinkError(Exception):
    """Verification link could not be issued."""

    pass


class EmailDeliveryError(Exception):
    """Outbound email could not be delivered."""

    pass
