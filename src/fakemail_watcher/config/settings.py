"""Configuration via pydantic-settings with .env support."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class WatcherSettings(BaseSettings):
    """Watcher defaults loaded from environment variables and .env file.

    Constructor arguments of MailWatcher take precedence over these values.
    """

    model_config = SettingsConfigDict(
        env_prefix="FAKEMAIL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Inbox provider
    base_url: str = "http://www.fakemailgenerator.com"

    # Polling
    interval_ms: int = 5000

    # HTTP
    request_timeout_seconds: float | None = None
    user_agent: str = "fakemail-watcher"

    def inbox_url(self, domain: str, name: str) -> str:
        """URL of the inbox listing page for one mailbox."""
        return f"{self.base_url.rstrip('/')}/inbox/{domain}/{name}"

    def message_url(self, domain: str, name: str, message_id: str) -> str:
        """URL serving the raw body of one message."""
        return f"{self.base_url.rstrip('/')}/email/{domain}/{name}/message-{message_id}/"
