"""Shared test fixtures for moments."""

import sys
from datetime import date, datetime, timedelta
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from moments.commands import MomentService
from moments.models import ActiveMoment
from moments.reminders import ConsoleNotifier, ReminderLedger, ReminderScheduler
from moments.repository import MomentRepository
from moments.storage import KeyValueStore, MomentStorage
from shared_types import MomentType, Priority

NOW = datetime(2026, 3, 10, 9, 30)
TODAY = NOW.date()


def days_from_today(n: int) -> date:
    return TODAY + timedelta(days=n)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def store(tmp_path):
    return KeyValueStore(tmp_path / "moments.db")


@pytest.fixture
def storage(store):
    return MomentStorage(store)


@pytest.fixture
def repository(storage):
    return MomentRepository(storage)


@pytest.fixture
def notifier(store):
    """Console notifier with permission already granted and output mocked."""
    n = ConsoleNotifier(store, console=MagicMock())
    n.request_permission()
    return n


@pytest.fixture
def scheduler(notifier, store):
    return ReminderScheduler(notifier, ReminderLedger(store))


@pytest.fixture
def service(storage, scheduler):
    return MomentService(storage, scheduler, clock=lambda: NOW)


@pytest.fixture
def make_moment():
    """Factory for active moments dated relative to TODAY."""

    def _make(title="Exam", days=10, priority=Priority.MEDIUM, moment_type=MomentType.STUDY, **kwargs):
        return ActiveMoment(
            title=title,
            date=days_from_today(days),
            priority=priority,
            type=moment_type,
            created_at=NOW,
            **kwargs,
        )

    return _make


@pytest.fixture
def mock_anthropic(monkeypatch):
    """Mock Claude API responses."""
    mock_client = MagicMock()
    mock_response = MagicMock()
    mock_response.content = [MagicMock(text="This is a mocked AI response.")]

    mock_client.messages.create.return_value = mock_response

    monkeypatch.setattr("anthropic.Anthropic", lambda **kwargs: mock_client)
    return mock_client
