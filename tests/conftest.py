"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A fixed clock instant
- Mock ports for the domain services
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

from src.domain.models import Account

NOW = datetime(2025, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    """Fixed 'current' instant for workflow tests."""
    return NOW


@pytest.fixture
def identity_provider() -> Mock:
    """Identity provider mock that creates 'uid-123' accounts."""
    provider = Mock()
    provider.create_account.side_effect = lambda email, password: Account(
        user_id="uid-123", email=email
    )
    provider.update_profile.return_value = None
    return provider


@pytest.fixture
def waitlist_store() -> Mock:
    """Waitlist store mock assigning id 'entry-1' and a server timestamp."""
    store = Mock()
    store.insert.return_value = ("entry-1", NOW + timedelta(milliseconds=250))
    store.list_ordered.return_value = []
    return store


@pytest.fixture
def dispatcher() -> Mock:
    """Verification dispatcher mock reporting delivered emails (no link)."""
    mock = Mock()
    mock.send_verification.return_value = None
    return mock
