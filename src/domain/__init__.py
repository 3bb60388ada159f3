"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core business logic for the Onetalk waitlist:
input sanitization, field validation, the registration workflow, the
admin read path and the verification email dispatcher. It defines its
own port interfaces for infrastructure abstraction.
"""

from .admin import AdminAuthService, AdminReadService
from .auth_state import AuthStateNotifier
from .exceptions import (
    AccountCreationFailed,
    AdminAuthError,
    AdminSignInFailed,
    BadRequest,
    DispatchError,
    DispatchFailed,
    EmailAlreadyInUse,
    InvalidAdminCredentials,
    InvalidEmailFormat,
    InvalidVerificationLink,
    NotConfigured,
    RateLimited,
    ReadError,
    ReadFailed,
    RegistrationError,
    Unauthorized,
    ValidationFailed,
    WeakPassword,
)
from .models import (
    Account,
    ProfileOutcome,
    RegistrationAttemptState,
    RegistrationResult,
    RegistrationWarning,
    WaitlistEntry,
    WaitlistOutcome,
)
from .ports import (
    AttemptStateStore,
    EmailSender,
    IdentityProvider,
    VerificationDispatcher,
    VerificationLinkIssuer,
    WaitlistStore,
)
from .registration import RegistrationService
from .sanitizer import sanitize
from .validators import is_strong_password, is_valid_email, is_valid_name
from .verification import VerificationService

__all__ = [
    "Account",
    "AccountCreationFailed",
    "AdminAuthError",
    "AdminAuthService",
    "AdminReadService",
    "AdminSignInFailed",
    "AttemptStateStore",
    "AuthStateNotifier",
    "BadRequest",
    "DispatchError",
    "DispatchFailed",
    "EmailAlreadyInUse",
    "EmailSender",
    "IdentityProvider",
    "InvalidAdminCredentials",
    "InvalidEmailFormat",
    "InvalidVerificationLink",
    "NotConfigured",
    "ProfileOutcome",
    "RateLimited",
    "ReadError",
    "ReadFailed",
    "RegistrationAttemptState",
    "RegistrationError",
    "RegistrationResult",
    "RegistrationService",
    "RegistrationWarning",
    "Unauthorized",
    "ValidationFailed",
    "VerificationDispatcher",
    "VerificationLinkIssuer",
    "VerificationService",
    "WaitlistEntry",
    "WaitlistOutcome",
    "WaitlistStore",
    "WeakPassword",
    "is_strong_password",
    "is_valid_email",
    "is_valid_name",
    "sanitize",
]
