"""Custom exceptions for the FakeMail Watcher."""


class FakeMailWatcherError(Exception):
    """Base exception for all FakeMail Watcher errors."""


class FetchError(FakeMailWatcherError):
    """HTTP request to the inbox provider failed or returned a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ParseError(FakeMailWatcherError):
    """Inbox listing page did not have the expected structure."""


class WatcherClosedError(FakeMailWatcherError):
    """Operation attempted on a watcher that has been closed."""
