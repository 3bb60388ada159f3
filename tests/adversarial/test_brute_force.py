"""
Adversarial tests for registration flooding.

Verifies that the per-session attempt budget stops an attacker from
using the registration form to discover which emails are registered or to
flood the identity provider.

Security rationale:
- Every submitted attempt counts, valid or not, so alternating junk and
  real payloads does not stretch the budget
- The identity provider is never contacted once the budget is spent
- A blocked attempt does not extend the window
"""

from datetime import datetime, timedelta
from unittest.mock import Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.adapters.session.memory import InMemoryAttemptStateStore
from src.api.dependencies import get_registration_service
from src.api.v1 import router
from src.domain.exceptions import EmailAlreadyInUse, IdentityProviderError, RateLimited, ValidationFailed
from src.domain.models import RegistrationAttemptState
from src.domain.registration import RegistrationService

pytestmark = pytest.mark.adversarial

VALID = {"full_name": "Jane Doe", "email": "jane@example.com", "password": "Passw0rd"}


@pytest.fixture
def probing_provider() -> Mock:
    """Identity provider that reports every email as taken."""
    provider = Mock()
    provider.create_account.side_effect = IdentityProviderError("email-already-in-use")
    return provider


class TestEnumerationFlood:
    """
    Adversarial tests simulating email enumeration through registration.

    The attacker submits well-formed payloads for many emails and reads
    the 409 responses to learn which ones exist.
    """

    def test_enumeration_stops_after_budget(self, probing_provider: Mock, now: datetime) -> None:
        """Only five attempts reach the identity provider in one window."""
        service = RegistrationService(identity_provider=probing_provider)
        attempts = RegistrationAttemptState()
        outcomes: list[type[Exception]] = []

        for i in range(50):
            try:
                service.register(
                    "Jane Doe", f"victim{i}@example.com", "Passw0rd", now + timedelta(seconds=i), attempts
                )
            except (EmailAlreadyInUse, RateLimited) as e:
                attempts = e.attempts
                outcomes.append(type(e))

        assert outcomes.count(EmailAlreadyInUse) == 5
        assert outcomes.count(RateLimited) == 45
        assert probing_provider.create_account.call_count == 5

    def test_interleaved_junk_consumes_budget(self, probing_provider: Mock, now: datetime) -> None:
        """Invalid payloads count, so mixing them in gives no extra attempts."""
        service = RegistrationService(identity_provider=probing_provider)
        attempts = RegistrationAttemptState()

        for i in range(5):
            payload = VALID if i % 2 == 0 else {**VALID, "password": "x"}
            with pytest.raises((EmailAlreadyInUse, ValidationFailed)) as exc_info:
                service.register(now=now + timedelta(seconds=i), attempts=attempts, **payload)
            attempts = exc_info.value.attempts

        with pytest.raises(RateLimited):
            service.register(now=now + timedelta(seconds=10), attempts=attempts, **VALID)
        assert probing_provider.create_account.call_count == 3

    def test_blocked_attempts_do_not_extend_window(self, probing_provider: Mock, now: datetime) -> None:
        """Hammering while blocked does not push the reopening time back."""
        service = RegistrationService(identity_provider=probing_provider)
        attempts = RegistrationAttemptState()
        for i in range(5):
            with pytest.raises(EmailAlreadyInUse) as exc_info:
                service.register(now=now + timedelta(seconds=i), attempts=attempts, **VALID)
            attempts = exc_info.value.attempts

        for second in range(10, 300, 10):
            with pytest.raises(RateLimited) as exc_info:
                service.register(now=now + timedelta(seconds=second), attempts=attempts, **VALID)
            attempts = exc_info.value.attempts

        assert attempts.window_started_at == now
        with pytest.raises(EmailAlreadyInUse):
            service.register(now=now + timedelta(seconds=301), attempts=attempts, **VALID)


class TestApiFlood:
    """Adversarial tests against POST /v1/register."""

    @pytest.fixture
    def client(self, probing_provider: Mock) -> TestClient:
        app = FastAPI()
        app.include_router(router, prefix="/v1")
        app.state.attempt_store = InMemoryAttemptStateStore()
        app.dependency_overrides[get_registration_service] = lambda: RegistrationService(
            identity_provider=probing_provider
        )
        return TestClient(app)

    def test_session_flood_rate_limited(self, client: TestClient, probing_provider: Mock) -> None:
        """A session replaying its cookie is limited after five attempts."""
        statuses = [
            client.post(
                "/v1/register",
                json={"fullName": "Jane Doe", "email": f"victim{i}@example.com", "password": "Passw0rd"},
            ).status_code
            for i in range(20)
        ]

        assert statuses[:5] == [409] * 5
        assert statuses[5:] == [429] * 15
        assert probing_provider.create_account.call_count == 5

    def test_forged_session_cookie_is_harmless(self, client: TestClient) -> None:
        """An arbitrary cookie value is just a fresh session."""
        client.cookies.set("registration_session", "../../etc/passwd")

        response = client.post(
            "/v1/register",
            json={"fullName": "Jane Doe", "email": "jane@example.com", "password": "Passw0rd"},
        )

        assert response.status_code == 409
