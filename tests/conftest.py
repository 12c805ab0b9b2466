"""Shared fixtures for FakeMail Watcher tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from fakemail_watcher.config.settings import WatcherSettings
from fakemail_watcher.core.models import Mail

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to the test fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def inbox_html() -> str:
    """Listing page with three entries: alice, bob, alice."""
    return (FIXTURES_DIR / "inbox.html").read_text()


@pytest.fixture
def inbox_empty_html() -> str:
    """Listing page whose email list has no entries."""
    return (FIXTURES_DIR / "inbox_empty.html").read_text()


@pytest.fixture
def inbox_malformed_html() -> str:
    """Listing page whose second entry has a sender without an address."""
    return (FIXTURES_DIR / "inbox_malformed.html").read_text()


@pytest.fixture
def inbox_missing_list_html() -> str:
    """Page without an email list at all."""
    return (FIXTURES_DIR / "inbox_missing_list.html").read_text()


@pytest.fixture
def message_html() -> str:
    """Body served for a single message."""
    return (FIXTURES_DIR / "message.html").read_text()


@pytest.fixture
def settings() -> WatcherSettings:
    """Settings with the production base URL, ignoring any .env file."""
    return WatcherSettings(
        base_url="http://www.fakemailgenerator.com",
        interval_ms=5000,
        _env_file=None,
    )


@pytest.fixture
def sample_mail(message_html: str) -> Mail:
    """A sample received mail."""
    return Mail(
        message_id="aaa111",
        sender="alice@example.com",
        subject="Your verification code",
        body=message_html,
    )
