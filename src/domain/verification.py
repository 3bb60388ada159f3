"""
Verification email dispatcher - Mint single-use links and deliver them.

When no email sender is configured the minted link is handed back to
the caller instead of failing, so it can be logged or relayed manually.
Every internal failure collapses to DispatchFailed; details go to the
log only.
"""

import html
import logging
from dataclasses import dataclass

from .exceptions import (
    BadRequest,
    DispatchFailed,
    EmailDeliveryError,
    IdentityProviderError,
    InvalidVerificationLink,
    VerificationLinkError,
)
from .ports import EmailSender, IdentityProvider, VerificationLinkIssuer

logger = logging.getLogger(__name__)

VERIFICATION_SUBJECT = "Verify your Onetalk email"


@dataclass
class VerificationService:
    """
    Domain service for email verification.

    ``email_sender`` is None when outbound delivery is not configured.
    """

    link_issuer: VerificationLinkIssuer
    identity_provider: IdentityProvider
    public_base_url: str
    default_continue_url: str
    email_sender: EmailSender | None = None
    link_ttl_seconds: int = 3 * 24 * 60 * 60

    def send_verification(
        self, email: str, display_name: str | None = None, continue_url: str | None = None
    ) -> str | None:
        """
        Mint a verification link and email it.

        Args:
            email: Recipient address
            display_name: Optional name for the greeting
            continue_url: Where to send the user after verifying;
                falls back to the configured default

        Returns:
            The link when delivery is not configured, else None

        Raises:
            BadRequest: email is missing
            DispatchFailed: link generation or delivery failed
        """
        if not email or not email.strip():
            raise BadRequest("email is required")

        email = email.strip().lower()
        try:
            token = self.link_issuer.issue(email, continue_url or self.default_continue_url)
        except VerificationLinkError as e:
            logger.exception("sendVerificationEmail error")
            raise DispatchFailed("failed to create or send verification link") from e

        link = self._build_link(token)
        if self.email_sender is None:
            return link

        try:
            self.email_sender.send_verification_email(
                email,
                VERIFICATION_SUBJECT,
                render_verification_html(link, display_name),
                render_verification_text(link, display_name),
            )
        except EmailDeliveryError as e:
            logger.exception("sendVerificationEmail error")
            raise DispatchFailed("failed to create or send verification link") from e

        logger.info("Verification email sent to %s", email)
        return None

    def confirm(self, token: str) -> str:
        """
        Consume a verification token and mark the email verified.

        Returns:
            The continue URL stored with the token

        Raises:
            InvalidVerificationLink: Token unknown, already used or expired
            DispatchFailed: Token lookup or account update failed
        """
        try:
            consumed = self.link_issuer.consume(token, self.link_ttl_seconds)
        except VerificationLinkError as e:
            logger.error("Verification token lookup failed: %s", e)
            raise DispatchFailed("failed to verify email") from e
        if consumed is None:
            raise InvalidVerificationLink("Invalid or expired verification link")

        email, continue_url = consumed
        try:
            self.identity_provider.mark_email_verified(email)
        except IdentityProviderError as e:
            logger.error("Could not mark %s verified: %s", email, e.detail)
            raise DispatchFailed("failed to verify email") from e
        return continue_url

    def _build_link(self, token: str) -> str:
        return f"{self.public_base_url.rstrip('/')}/v1/verify-email?token={token}"


def render_verification_html(link: str, display_name: str | None) -> str:
    name = html.escape(display_name or "")
    href = html.escape(link, quote=True)
    return (
        f"<p>Hi {name},</p>\n"
        f"<p>Thanks for joining Onetalk. Please <a href=\"{href}\">click here to verify your email</a>.</p>\n"
        "<p>If the button doesn't work, copy and paste this link into your browser:</p>\n"
        f"<p><a href=\"{href}\">{href}</a></p>\n"
        "<hr>\n"
        "<p>If you didn't sign up, you can safely ignore this message.</p>\n"
    )


def render_verification_text(link: str, display_name: str | None) -> str:
    return (
        f"Hi {display_name or ''},\n\n"
        "Thanks for joining Onetalk. Verify your email by opening this link:\n"
        f"{link}\n\n"
        "If you didn't sign up, you can safely ignore this message.\n"
    )
