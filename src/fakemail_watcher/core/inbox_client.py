"""HTTP client for the inbox listing page and message bodies."""

from __future__ import annotations

import logging

import requests

from fakemail_watcher.core.exceptions import FetchError

logger = logging.getLogger(__name__)


class InboxClient:
    """Thin wrapper around a requests Session for one provider."""

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        timeout_seconds: float | None = None,
        user_agent: str | None = None,
    ) -> None:
        self._session = session or requests.Session()
        self._timeout = timeout_seconds
        if user_agent:
            self._session.headers["User-Agent"] = user_agent

    def _get(self, url: str, context: str, *, check_status: bool = True) -> str:
        """GET a URL and return its body as text.

        Args:
            url: Absolute URL to fetch.
            context: Description for log and error messages (e.g. "fetch inbox").
            check_status: Treat a non-2xx status as a failure.

        Returns:
            The decoded response body.

        Raises:
            FetchError: On transport failure, or a non-2xx status when check_status is set.
        """
        try:
            response = self._session.get(url, timeout=self._timeout)
            if check_status:
                response.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise FetchError(f"Failed to {context}: HTTP {status}", status_code=status) from e
        except requests.RequestException as e:
            raise FetchError(f"Failed to {context}: {e}") from e

        logger.debug("%s: %d bytes from %s", context, len(response.text), url)
        return response.text

    def fetch_inbox(self, url: str) -> str:
        """Fetch the HTML of an inbox listing page."""
        return self._get(url, "fetch inbox")

    def fetch_message_body(self, url: str) -> str:
        """Fetch the raw body of one message, returned verbatim whatever its status."""
        return self._get(url, "fetch message body", check_status=False)

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()
