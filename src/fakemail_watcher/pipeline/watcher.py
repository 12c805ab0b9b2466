"""Inbox watcher: poll the listing page, skip seen mail, fetch new bodies, notify."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from fakemail_watcher.config.settings import WatcherSettings
from fakemail_watcher.core.exceptions import WatcherClosedError
from fakemail_watcher.core.inbox_client import InboxClient
from fakemail_watcher.core.models import (
    TICK_BUSY,
    TICK_EMPTY,
    TICK_FAILED,
    TICK_IDLE,
    TICK_OK,
    Mail,
    TickResult,
)
from fakemail_watcher.core.parser import InboxPageParser
from fakemail_watcher.pipeline.timer import RepeatingTimer

logger = logging.getLogger(__name__)

MailCallback = Callable[["MailWatcher", Mail], None]
TickObserver = Callable[[TickResult], None]


class MailWatcher:
    """Watches one disposable inbox and reports each new mail once.

    Lifecycle: start() and stop() toggle watching and may be repeated;
    close() is terminal.

    Each tick:
    1. Fetch the inbox listing page.
    2. Walk its entries top to bottom, skipping other senders (when a sender
       filter is set) and ids already received.
    3. Fetch the body of every new entry, record it and invoke the callback.

    Any failure aborts the rest of the tick. It is logged and reported to the
    tick observer, never raised into the timer thread.
    """

    def __init__(
        self,
        domain: str,
        name: str,
        sender_filter: str | None = "",
        interval: int | None = None,
        *,
        settings: WatcherSettings | None = None,
        client: InboxClient | None = None,
        parser: InboxPageParser | None = None,
    ) -> None:
        self._settings = settings or WatcherSettings()
        interval = self._settings.interval_ms if interval is None else interval
        if interval <= 0:
            raise ValueError(f"Interval must be positive, got {interval}")

        self._domain = domain
        self._name = name
        self._uri = self._settings.inbox_url(domain, name)
        self._interval = interval
        self.sender_filter = sender_filter

        self._client = client or InboxClient(
            timeout_seconds=self._settings.request_timeout_seconds,
            user_agent=self._settings.user_agent,
        )
        self._parser = parser or InboxPageParser()
        self._timer = RepeatingTimer(self.tick, name=f"mail-watcher-{name}@{domain}")

        self._received: list[Mail] = []
        self._received_lock = threading.Lock()
        self._tick_lock = threading.Lock()
        self._on_mail_received: MailCallback | None = None
        self._on_tick: TickObserver | None = None
        self._watching = False
        self._closed = False

    def __enter__(self) -> MailWatcher:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    @property
    def uri(self) -> str:
        return self._uri

    @property
    def domain(self) -> str:
        return self._domain

    @property
    def name(self) -> str:
        return self._name

    @property
    def sender_filter(self) -> str:
        return self._sender_filter

    @sender_filter.setter
    def sender_filter(self, value: str | None) -> None:
        self._sender_filter = value or ""

    @property
    def interval(self) -> int:
        """Milliseconds between ticks."""
        return self._interval

    @interval.setter
    def interval(self, value: int) -> None:
        self._ensure_open()
        if value <= 0:
            raise ValueError(f"Interval must be positive, got {value}")
        self._interval = value
        if self._watching:
            self._timer.change(value, value)
            logger.debug("Rescheduled %s every %d ms", self._uri, value)

    @property
    def is_watching(self) -> bool:
        return self._watching

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def received_mails(self) -> list[Mail]:
        """Snapshot of received mails in detection order."""
        with self._received_lock:
            return list(self._received)

    @property
    def on_tick(self) -> TickObserver | None:
        return self._on_tick

    @on_tick.setter
    def on_tick(self, observer: TickObserver | None) -> None:
        self._on_tick = observer

    def on_mail_received(self, callback: MailCallback) -> MailWatcher:
        """Set the callback invoked once per new mail, replacing any previous one.

        Returns:
            The watcher itself, for chaining.
        """
        self._on_mail_received = callback
        return self

    def start(self) -> None:
        """Start polling: one tick right away, then one per interval."""
        self._ensure_open()
        if self._watching:
            return

        self._watching = True
        self._timer.change(0, self._interval)
        logger.info("Watching %s every %d ms", self._uri, self._interval)

    def stop(self) -> None:
        """Stop polling. A tick already running still completes."""
        if not self._watching:
            return

        self._watching = False
        self._timer.disarm()
        logger.info("Stopped watching %s", self._uri)

    def tick(self) -> TickResult:
        """Poll the inbox once. Never raises.

        Returns immediately with status 'busy' if another tick is running.
        """
        if not self._tick_lock.acquire(blocking=False):
            logger.debug("Previous tick for %s still running, skipping", self._uri)
            return self._report(TickResult(status=TICK_BUSY))

        try:
            result = self._poll()
        finally:
            self._tick_lock.release()

        return self._report(result)

    def close(self) -> None:
        """Release the HTTP session and timer and forget all state."""
        if self._closed:
            return

        self._watching = False
        self._timer.cancel()
        self._client.close()
        with self._received_lock:
            self._received.clear()
        self._on_mail_received = None
        self._on_tick = None
        self._interval = 0
        self._closed = True
        logger.debug("Closed watcher for %s", self._uri)

    def _poll(self) -> TickResult:
        callback = self._on_mail_received
        if not self._watching or callback is None:
            return TickResult(status=TICK_IDLE)

        delivered: list[Mail] = []
        listed = 0

        try:
            html = self._client.fetch_inbox(self._uri)

            for entry in self._parser.iter_entries(html):
                listed += 1

                if self._sender_filter and entry.sender != self._sender_filter:
                    logger.debug("Skipping %s from %s (filtered)", entry.message_id, entry.sender)
                    continue

                if self._already_received(entry.message_id):
                    continue

                body = self._client.fetch_message_body(
                    self._settings.message_url(self._domain, self._name, entry.message_id)
                )
                mail = Mail(
                    message_id=entry.message_id,
                    sender=entry.sender,
                    subject=entry.subject,
                    body=body,
                )
                with self._received_lock:
                    self._received.append(mail)
                delivered.append(mail)

                logger.info("New mail %s from %s: %s", mail.message_id, mail.sender, mail.subject)
                callback(self, mail)

        except Exception as e:
            logger.warning(
                "Tick for %s aborted after %d new mail(s): %s", self._uri, len(delivered), e
            )
            return TickResult(status=TICK_FAILED, mails=tuple(delivered), error=str(e))

        if listed == 0:
            return TickResult(status=TICK_EMPTY)

        return TickResult(status=TICK_OK, mails=tuple(delivered))

    def _already_received(self, message_id: str) -> bool:
        with self._received_lock:
            return any(m.message_id == message_id for m in self._received)

    def _report(self, result: TickResult) -> TickResult:
        """Send the tick result to the observer if registered."""
        observer = self._on_tick
        if observer:
            try:
                observer(result)
            except Exception:
                logger.exception("Tick observer raised")
        return result

    def _ensure_open(self) -> None:
        if self._closed:
            raise WatcherClosedError(f"Watcher for {self._uri} has been closed")
