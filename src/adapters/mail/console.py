"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging verification links to stdout for demo purposes.
"""

import logging
import re

logger = logging.getLogger(__name__)

_LINK_PATTERN = re.compile(r'href="([^"]+)"')


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - prints verification emails to stdout.
    """

    def send_verification_email(self, email: str, subject: str, html: str, text: str) -> None:
        """
        Log the verification email to console (simulates email delivery).

        The link is logged at INFO level to be visible in container logs.

        Args:
            email: Recipient email address
            subject: Subject line
            html: HTML body (the first link in it is logged)
            text: Plain-text body
        """
        match = _LINK_PATTERN.search(html)
        link = match.group(1) if match else "<no link>"
        logger.info("[VERIFICATION] Email: %s Subject: %s Link: %s", email, subject, link)
