"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

import logging
from collections.abc import Generator
from functools import lru_cache

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from psycopg_pool import ConnectionPool

from src.adapters.identity.postgres import PostgresIdentityProvider
from src.adapters.mail.console import ConsoleEmailSender
from src.adapters.mail.ses import SesEmailSender
from src.adapters.repository.postgres import PostgresVerificationLinkIssuer, PostgresWaitlistStore
from src.config.settings import Settings, get_settings
from src.domain.admin import AdminAuthService, AdminReadService
from src.domain.exceptions import AdminAuthError
from src.domain.models import Account
from src.domain.ports import AttemptStateStore, EmailSender
from src.domain.registration import RegistrationService
from src.domain.verification import VerificationService

logger = logging.getLogger(__name__)

# Module-level singleton - ConsoleEmailSender is stateless
_console_email_sender = ConsoleEmailSender()


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_attempt_store(request: Request) -> AttemptStateStore:
    """Get the per-session attempt state store from app state."""
    return request.app.state.attempt_store


def get_identity_provider(
    request: Request, settings: Settings = Depends(get_settings)
) -> PostgresIdentityProvider:
    """Create identity provider with connection pool from app state."""
    return PostgresIdentityProvider(get_pool(request), bcrypt_cost=settings.bcrypt_cost)


def get_waitlist_store(
    request: Request, settings: Settings = Depends(get_settings)
) -> PostgresWaitlistStore | None:
    """Create waitlist store, or None when waitlist persistence is disabled."""
    if not settings.waitlist_enabled:
        return None
    return PostgresWaitlistStore(get_pool(request))


def get_email_sender(settings: Settings = Depends(get_settings)) -> EmailSender | None:
    """
    Select the email sender from settings.

    Returns None when delivery is not configured (backend ``none``, or
    ``ses`` without a sender address).
    """
    if settings.email_backend == "console":
        return _console_email_sender
    if settings.email_backend == "ses":
        if not settings.from_email:
            logger.warning("SES email backend selected but FROM_EMAIL not set")
            return None
        return _get_ses_email_sender(
            settings.from_email,
            settings.aws_ses_region,
            settings.aws_ses_access_key_id,
            settings.aws_ses_secret_access_key,
            settings.network_timeout_seconds,
        )
    return None


@lru_cache
def _get_ses_email_sender(
    from_email: str,
    region: str,
    access_key_id: str | None,
    secret_access_key: str | None,
    timeout: float,
) -> SesEmailSender:
    """One SES client per distinct configuration."""
    return SesEmailSender(
        from_email=from_email,
        region=region,
        access_key_id=access_key_id,
        secret_access_key=secret_access_key,
        timeout=timeout,
    )


def get_verification_service(
    request: Request,
    settings: Settings = Depends(get_settings),
    identity_provider: PostgresIdentityProvider = Depends(get_identity_provider),
    email_sender: EmailSender | None = Depends(get_email_sender),
) -> VerificationService:
    """Wire the verification dispatcher with link issuer and email sender."""
    return VerificationService(
        link_issuer=PostgresVerificationLinkIssuer(get_pool(request)),
        identity_provider=identity_provider,
        public_base_url=settings.public_base_url,
        default_continue_url=settings.continue_url,
        email_sender=email_sender,
        link_ttl_seconds=settings.verification_link_ttl_seconds,
    )


def get_registration_service(
    settings: Settings = Depends(get_settings),
    identity_provider: PostgresIdentityProvider = Depends(get_identity_provider),
    waitlist_store: PostgresWaitlistStore | None = Depends(get_waitlist_store),
    verification_service: VerificationService = Depends(get_verification_service),
) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the identity provider, waitlist store and verification
    dispatcher for the domain service.
    """
    return RegistrationService(
        identity_provider=identity_provider,
        waitlist_store=waitlist_store,
        dispatcher=verification_service if settings.send_verification_on_register else None,
        max_attempts=settings.rate_limit_max_attempts,
        window_seconds=settings.rate_limit_window_seconds,
    )


def get_admin_read_service(
    waitlist_store: PostgresWaitlistStore | None = Depends(get_waitlist_store),
) -> AdminReadService:
    return AdminReadService(waitlist_store=waitlist_store)


def get_admin_auth_service(
    settings: Settings = Depends(get_settings),
    identity_provider: PostgresIdentityProvider = Depends(get_identity_provider),
) -> AdminAuthService:
    """Create a per-request admin session with an audit-logging subscriber."""
    service = AdminAuthService(
        identity_provider=identity_provider,
        admin_email=settings.admin_email,
        admin_password=settings.admin_password,
    )
    service.subscribe(_log_admin_auth_change)
    return service


def _log_admin_auth_change(account: Account | None) -> None:
    if account is None:
        logger.info("Admin signed out")
    else:
        logger.info("Admin signed in: %s", account.email)


# HTTP BASIC AUTH security scheme for OpenAPI documentation
http_basic = HTTPBasic()


def get_admin_account(
    credentials: HTTPBasicCredentials = Depends(http_basic),
    auth: AdminAuthService = Depends(get_admin_auth_service),
) -> Generator[Account, None, None]:
    """
    Sign in as admin for the duration of one request.

    FastAPI's HTTPBasic returns 401 for a missing or malformed header.
    The admin session is signed out once the response is produced.
    """
    try:
        account = auth.sign_in(credentials.username, credentials.password)
    except AdminAuthError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.user_message,
            headers={"WWW-Authenticate": "Basic"},
        ) from None

    try:
        yield account
    finally:
        auth.sign_out()
