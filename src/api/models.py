"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Field names are exposed in camelCase (``fullName``, ``userId``...) via aliases;
models accept either form on input.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.domain.models import WaitlistEntry


class RegisterRequest(BaseModel):
    """
    Request model for waitlist registration.

    Fields are plain strings: sanitization and validation happen in the
    domain so that every invalid field can be reported at once.
    """

    model_config = ConfigDict(populate_by_name=True)

    full_name: str = Field(..., alias="fullName", description="Display name (2-100 letters)")
    email: str = Field(..., description="Email address")
    password: str = Field(..., description="Password (8+ chars, upper, lower and digit)")


class WaitlistEntryResponse(BaseModel):
    """Serialized waitlist entry."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    full_name: str = Field(..., alias="fullName")
    email: str
    user_id: str = Field(..., alias="userId")
    created_at: datetime = Field(..., alias="createdAt")
    timestamp: datetime | None = None

    @classmethod
    def from_entry(cls, entry: WaitlistEntry) -> "WaitlistEntryResponse":
        return cls(
            id=entry.id,
            full_name=entry.full_name,
            email=entry.email,
            user_id=entry.user_id,
            created_at=entry.created_at,
            timestamp=entry.timestamp,
        )


class RegisterResponse(BaseModel):
    """Response model for successful registration."""

    message: str
    entry: WaitlistEntryResponse
    recorded: bool = Field(..., description="False when the waitlist record could not be written")
    warnings: list[str] = Field(default_factory=list)


class WaitlistResponse(BaseModel):
    """Response model for the admin waitlist view."""

    total: int
    entries: list[WaitlistEntryResponse]


class RegistrationErrorDetail(BaseModel):
    """Detail body of a failed registration."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    field_errors: dict[str, str] = Field(default_factory=dict, alias="fieldErrors")


class RegistrationErrorResponse(BaseModel):
    """Error response for registration failures."""

    detail: RegistrationErrorDetail


class SendVerificationRequest(BaseModel):
    """Request model for POST /send-verification."""

    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None
    display_name: str | None = Field(None, alias="displayName")
    continue_url: str | None = Field(None, alias="continueUrl")


class SendVerificationResponse(BaseModel):
    """Response model for POST /send-verification; ``link`` only when not emailed."""

    ok: bool = True
    link: str | None = None


class FunctionErrorResponse(BaseModel):
    """Opaque error body of the verification function."""

    error: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
