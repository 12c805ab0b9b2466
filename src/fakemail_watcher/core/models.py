"""Frozen dataclasses for the FakeMail Watcher domain model."""

from __future__ import annotations

from dataclasses import dataclass

# Tick outcomes
TICK_IDLE = "idle"
TICK_BUSY = "busy"
TICK_EMPTY = "empty"
TICK_OK = "ok"
TICK_FAILED = "failed"

VALID_TICK_STATUSES = {TICK_IDLE, TICK_BUSY, TICK_EMPTY, TICK_OK, TICK_FAILED}


@dataclass(frozen=True)
class InboxEntry:
    """One row of the inbox listing page."""

    message_id: str
    sender: str
    subject: str


@dataclass(frozen=True)
class Mail:
    """A received mail with its fetched body."""

    message_id: str
    sender: str
    subject: str
    body: str


@dataclass(frozen=True)
class TickResult:
    """Outcome of one poll of the inbox."""

    status: str
    mails: tuple[Mail, ...] = ()
    error: str = ""

    def __post_init__(self) -> None:
        if self.status not in VALID_TICK_STATUSES:
            raise ValueError(f"Invalid tick status: {self.status}")

    @property
    def ok(self) -> bool:
        return self.status != TICK_FAILED
