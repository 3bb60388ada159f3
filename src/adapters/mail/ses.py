"""
AWS SES email sender adapter - Implements EmailSender protocol.

Delivers verification emails through Amazon SES with boto3. Credentials
are optional: when they are not configured boto3's default credential
chain (environment, shared config, instance role) is used.
"""

import logging

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from src.domain.exceptions import EmailDeliveryError

logger = logging.getLogger(__name__)


class SesEmailSender:
    """
    Implements EmailSender protocol via the SES ``SendEmail`` API.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Connect and read are bounded by ``timeout``; botocore retries are off.
    """

    def __init__(
        self,
        from_email: str,
        region: str = "us-east-1",
        access_key_id: str | None = None,
        secret_access_key: str | None = None,
        timeout: float = 5.0,
    ) -> None:
        self._from_email = from_email
        self._client = boto3.client(
            "ses",
            region_name=region,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            config=Config(
                connect_timeout=timeout,
                read_timeout=timeout,
                retries={"total_max_attempts": 1},
            ),
        )

    def send_verification_email(self, email: str, subject: str, html: str, text: str) -> None:
        """
        Send the verification email as plain text plus HTML.

        Raises:
            EmailDeliveryError: SES rejected the message or could not be reached
        """
        try:
            response = self._client.send_email(
                Source=self._from_email,
                Destination={"ToAddresses": [email]},
                Message={
                    "Subject": {"Data": subject, "Charset": "UTF-8"},
                    "Body": {
                        "Text": {"Data": text, "Charset": "UTF-8"},
                        "Html": {"Data": html, "Charset": "UTF-8"},
                    },
                },
            )
        except (BotoCoreError, ClientError) as e:
            raise EmailDeliveryError(f"SES delivery failed: {e}") from e

        logger.debug("Delivered verification email: %s", response.get("MessageId"))
