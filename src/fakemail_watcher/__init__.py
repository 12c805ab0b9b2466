"""FakeMail Watcher - Poll a disposable inbox and get notified of new mail."""

from fakemail_watcher.config.settings import WatcherSettings
from fakemail_watcher.core.models import InboxEntry, Mail, TickResult
from fakemail_watcher.core.parser import InboxPageParser
from fakemail_watcher.pipeline.watcher import MailWatcher

__all__ = [
    "InboxEntry",
    "InboxPageParser",
    "Mail",
    "MailWatcher",
    "TickResult",
    "WatcherSettings",
]
