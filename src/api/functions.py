"""
Verification email function - POST /send-verification.

Callable endpoint that mints a verification link for an email address
and delivers it. Protected by a shared secret in the
``X-Function-Secret`` header, checked before the body is read.

Failures never leak internals: every dispatcher error becomes an opaque
500 with a generic message.
"""

import logging
import secrets
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from src.api.dependencies import get_verification_service
from src.api.models import FunctionErrorResponse, SendVerificationRequest, SendVerificationResponse
from src.config.settings import Settings, get_settings
from src.domain.exceptions import BadRequest, DispatchFailed, Unauthorized
from src.domain.verification import VerificationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["functions"])

SECRET_HEADER = "X-Function-Secret"


@router.post(
    "/send-verification",
    response_model=SendVerificationResponse,
    response_model_exclude_none=True,
    responses={
        400: {"model": FunctionErrorResponse, "description": "email is required"},
        401: {"model": FunctionErrorResponse, "description": "Missing or wrong shared secret"},
        500: {"model": FunctionErrorResponse, "description": "Link generation or delivery failed"},
    },
    summary="Send a verification email",
    description="Mint a single-use verification link and email it. "
    "When email delivery is not configured the link is returned instead.",
)
async def send_verification(
    request: Request,
    settings: Settings = Depends(get_settings),
    service: VerificationService = Depends(get_verification_service),
) -> Any:
    try:
        _authorize(request.headers.get(SECRET_HEADER), settings.function_secret)
    except Unauthorized:
        logger.warning("Unauthorized function call attempt")
        return _error(status.HTTP_401_UNAUTHORIZED, "unauthorized")

    payload = await _read_payload(request)
    if payload is None or not payload.email:
        return _error(status.HTTP_400_BAD_REQUEST, "email is required")

    try:
        link = service.send_verification(
            payload.email,
            display_name=payload.display_name,
            continue_url=payload.continue_url,
        )
    except BadRequest:
        return _error(status.HTTP_400_BAD_REQUEST, "email is required")
    except DispatchFailed:
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "failed to create or send verification link")

    return SendVerificationResponse(ok=True, link=link)


def _authorize(provided: str | None, expected: str | None) -> None:
    """Constant-time secret check; an unset server secret matches nothing."""
    if not expected or not provided:
        raise Unauthorized("missing secret")
    if not secrets.compare_digest(provided.encode(), expected.encode()):
        raise Unauthorized("wrong secret")


async def _read_payload(request: Request) -> SendVerificationRequest | None:
    """Parse the JSON body; None when it is not a JSON object of the expected shape."""
    try:
        body = await request.json()
    except ValueError:
        return None
    try:
        return SendVerificationRequest.model_validate(body)
    except ValidationError:
        return None


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})
