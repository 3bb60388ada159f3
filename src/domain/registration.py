"""
Registration domain service - Waitlist registration workflow.

Each step is a hard gate, in order:

1. Rate limit      - refuse when the session spent its attempt budget
2. Sanitize        - clean full name and email
3. Validate        - name, email and password, all errors collected
4. Count attempt   - validation failures count toward the limit too
5. Create account  - identity provider; provider codes map to errors
6. Profile name    - non-fatal, reported as a warning
7. Waitlist write  - best effort, reported as a warning
8. Reset attempts  - success clears rate-limit pressure
9. Verification    - fire-and-forget email dispatch

Failure asymmetry: once step 5 succeeds the account is the source of
truth. Nothing after it rolls the account back or fails the result.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime

from .exceptions import (
    AccountCreationFailed,
    DispatchError,
    EmailAlreadyInUse,
    IdentityProviderError,
    InvalidEmailFormat,
    RateLimited,
    ValidationFailed,
    WaitlistStoreError,
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
from .ports import IdentityProvider, IdentityProviderErrorCode, VerificationDispatcher, WaitlistStore
from .sanitizer import sanitize
from .validators import validate_registration

logger = logging.getLogger(__name__)

_PROVIDER_ERRORS = {
    IdentityProviderErrorCode.EMAIL_ALREADY_IN_USE: EmailAlreadyInUse,
    IdentityProviderErrorCode.WEAK_PASSWORD: WeakPassword,
    IdentityProviderErrorCode.INVALID_EMAIL: InvalidEmailFormat,
}


@dataclass
class RegistrationService:
    """
    Domain service for waitlist registration.

    ``waitlist_store`` is None when waitlist persistence is disabled;
    ``dispatcher`` is None when verification emails are not sent.
    """

    identity_provider: IdentityProvider
    waitlist_store: WaitlistStore | None = None
    dispatcher: VerificationDispatcher | None = None
    max_attempts: int = 5
    window_seconds: int = 300

    def register(
        self,
        full_name: str,
        email: str,
        password: str,
        now: datetime,
        attempts: RegistrationAttemptState,
    ) -> RegistrationResult:
        """
        Register a new account and record it on the waitlist.

        Args:
            full_name: Raw full name
            email: Raw email address
            password: Raw password
            now: Current instant (also stored as the entry's created_at)
            attempts: The caller's attempt state

        Returns:
            RegistrationResult carrying the entry, secondary outcomes,
            warnings and the reset attempt state

        Raises:
            RateLimited: Attempt budget spent inside the window
            ValidationFailed: One or more fields invalid
            EmailAlreadyInUse, WeakPassword, InvalidEmailFormat,
            AccountCreationFailed: Identity provider refused the account

            Every raised error carries the updated state in ``attempts``.
        """
        attempts = attempts.refreshed(now, self.window_seconds)
        if attempts.is_limited(now, self.max_attempts, self.window_seconds):
            logger.warning("Registration rate limited after %d attempts", attempts.attempt_count)
            raise RateLimited(attempts=attempts)

        sanitized_name = sanitize(full_name)
        sanitized_email = sanitize(email)
        field_errors = validate_registration(sanitized_name, sanitized_email, password)

        attempts = attempts.recorded(now)
        if field_errors:
            raise ValidationFailed(field_errors, attempts=attempts)

        normalized_email = sanitized_email.lower()
        account = self._create_account(normalized_email, password, attempts)

        warnings: list[RegistrationWarning] = []
        profile = self._update_profile(account, sanitized_name)
        if profile is ProfileOutcome.FAILED:
            warnings.append(RegistrationWarning.PROFILE_UPDATE_FAILED)

        entry = WaitlistEntry(
            full_name=sanitized_name,
            email=normalized_email,
            user_id=account.user_id,
            created_at=now,
        )
        entry, waitlist = self._record_waitlist_entry(entry)
        if waitlist is WaitlistOutcome.WRITE_FAILED:
            warnings.append(RegistrationWarning.WAITLIST_WRITE_FAILED)

        verification_link = self._dispatch_verification(normalized_email, sanitized_name)

        return RegistrationResult(
            account=account,
            entry=entry,
            profile=profile,
            waitlist=waitlist,
            attempts=attempts.reset(),
            warnings=tuple(warnings),
            verification_link=verification_link,
        )

    def _create_account(
        self, email: str, password: str, attempts: RegistrationAttemptState
    ) -> Account:
        """Create the account, mapping provider codes onto registration errors."""
        try:
            return self.identity_provider.create_account(email, password)
        except IdentityProviderError as e:
            error_class = _PROVIDER_ERRORS.get(e.code)
            if error_class is not None:
                raise error_class(e.code, attempts=attempts) from e
            logger.error("Account creation failed: %s", e.detail)
            raise AccountCreationFailed(e.detail, attempts=attempts) from e

    def _update_profile(self, account: Account, display_name: str) -> ProfileOutcome:
        try:
            self.identity_provider.update_profile(account.user_id, display_name)
        except IdentityProviderError:
            logger.warning(
                "Profile update failed for user %s; account kept", account.user_id, exc_info=True
            )
            return ProfileOutcome.FAILED
        return ProfileOutcome.UPDATED

    def _record_waitlist_entry(self, entry: WaitlistEntry) -> tuple[WaitlistEntry, WaitlistOutcome]:
        """Best-effort waitlist write. Never raises."""
        if self.waitlist_store is None:
            logger.warning("Waitlist store not configured; entry for %s not recorded", entry.user_id)
            return entry, WaitlistOutcome.NOT_CONFIGURED

        try:
            entry_id, timestamp = self.waitlist_store.insert(entry)
        except WaitlistStoreError:
            logger.warning(
                "Waitlist write failed for user %s; account kept", entry.user_id, exc_info=True
            )
            return entry, WaitlistOutcome.WRITE_FAILED

        logger.info("User %s registered and added to waitlist", entry.user_id)
        return replace(entry, id=entry_id, timestamp=timestamp), WaitlistOutcome.RECORDED

    def _dispatch_verification(self, email: str, display_name: str) -> str | None:
        """Send the verification email. Failures are logged and ignored."""
        if self.dispatcher is None:
            return None

        try:
            link = self.dispatcher.send_verification(email, display_name=display_name)
        except DispatchError:
            logger.warning("Verification email dispatch failed for %s", email, exc_info=True)
            return None

        if link is not None:
            logger.info("Verification link for %s (email delivery not configured): %s", email, link)
        return link
