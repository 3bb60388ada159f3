"""
API v1 routes.

Defines REST endpoints for the Onetalk waitlist:
- POST /v1/register - Register an account and join the waitlist
- GET /v1/verify-email - Consume a verification link
"""

import secrets
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi.responses import RedirectResponse

from src.api.dependencies import get_attempt_store, get_registration_service, get_verification_service
from src.api.models import (
    ErrorResponse,
    RegisterRequest,
    RegisterResponse,
    RegistrationErrorResponse,
    WaitlistEntryResponse,
)
from src.domain.exceptions import (
    AccountCreationFailed,
    DispatchFailed,
    EmailAlreadyInUse,
    InvalidEmailFormat,
    InvalidVerificationLink,
    RateLimited,
    RegistrationError,
    ValidationFailed,
    WeakPassword,
)
from src.domain.ports import AttemptStateStore
from src.domain.registration import RegistrationService
from src.domain.verification import VerificationService

router = APIRouter(tags=["v1"])

SESSION_COOKIE = "registration_session"

# Starlette renamed the 422 constant; the numeric code is stable
HTTP_422_UNPROCESSABLE = 422


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": RegistrationErrorResponse, "description": "Email already registered"},
        422: {"model": RegistrationErrorResponse, "description": "Invalid fields"},
        429: {"model": RegistrationErrorResponse, "description": "Too many attempts"},
        502: {"model": RegistrationErrorResponse, "description": "Account creation failed"},
    },
    summary="Join the waitlist",
    description="Create an account and add it to the waitlist. "
    "At most 5 attempts per session are accepted in any 5-minute window.",
)
async def register(
    request_data: RegisterRequest,
    request: Request,
    response: Response,
    service: RegistrationService = Depends(get_registration_service),
    attempt_store: AttemptStateStore = Depends(get_attempt_store),
) -> RegisterResponse:
    """
    Register a new account and record it on the waitlist.

    - **fullName**: Letters, spaces, hyphens and apostrophes (2-100 chars)
    - **email**: Valid email address
    - **password**: 8+ characters with uppercase, lowercase and a digit

    Rate-limit state is tracked per session cookie.
    """
    session_id = request.cookies.get(SESSION_COOKIE) or secrets.token_urlsafe(16)
    now = datetime.now(timezone.utc)

    try:
        result = service.register(
            request_data.full_name,
            request_data.email,
            request_data.password,
            now=now,
            attempts=attempt_store.get(session_id),
        )
    except RegistrationError as e:
        attempt_store.put(session_id, e.attempts)
        raise _registration_http_error(e, session_id, now, service.window_seconds) from None

    attempt_store.put(session_id, result.attempts)
    response.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="lax")
    return RegisterResponse(
        message=f"Welcome {result.entry.full_name}! Your account has been created successfully.",
        entry=WaitlistEntryResponse.from_entry(result.entry),
        recorded=result.recorded,
        warnings=[warning.value for warning in result.warnings],
    )


@router.get(
    "/verify-email",
    status_code=status.HTTP_303_SEE_OTHER,
    responses={400: {"model": ErrorResponse, "description": "Invalid or expired link"}},
    summary="Confirm an email address",
    description="Consume a single-use verification link and redirect to its continue URL.",
)
async def verify_email(
    token: str = Query(..., min_length=1),
    service: VerificationService = Depends(get_verification_service),
) -> RedirectResponse:
    try:
        continue_url = service.confirm(token)
    except InvalidVerificationLink:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired verification link",
        ) from None
    except DispatchFailed:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to verify email",
        ) from None
    return RedirectResponse(continue_url, status_code=status.HTTP_303_SEE_OTHER)


def _registration_http_error(
    error: RegistrationError, session_id: str, now: datetime, window_seconds: int
) -> HTTPException:
    """Translate a domain registration error into an HTTP error with a user-facing message."""
    headers = {"Set-Cookie": f"{SESSION_COOKIE}={session_id}; HttpOnly; Path=/; SameSite=lax"}
    field_errors: dict[str, str] = {}

    if isinstance(error, RateLimited):
        status_code = status.HTTP_429_TOO_MANY_REQUESTS
        headers["Retry-After"] = str(error.attempts.retry_after(now, window_seconds))
    elif isinstance(error, ValidationFailed):
        status_code = HTTP_422_UNPROCESSABLE
        field_errors = error.field_errors
    elif isinstance(error, EmailAlreadyInUse):
        status_code = status.HTTP_409_CONFLICT
        field_errors = {"email": error.user_message}
    elif isinstance(error, WeakPassword):
        status_code = HTTP_422_UNPROCESSABLE
        field_errors = {"password": error.user_message}
    elif isinstance(error, InvalidEmailFormat):
        status_code = HTTP_422_UNPROCESSABLE
        field_errors = {"email": error.user_message}
    elif isinstance(error, AccountCreationFailed):
        status_code = status.HTTP_502_BAD_GATEWAY
    else:
        status_code = status.HTTP_400_BAD_REQUEST

    return HTTPException(
        status_code=status_code,
        detail={"message": error.user_message, "fieldErrors": field_errors},
        headers=headers,
    )
