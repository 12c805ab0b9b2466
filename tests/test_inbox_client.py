"""Tests for InboxClient with a mocked requests Session."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from fakemail_watcher.core.exceptions import FetchError
from fakemail_watcher.core.inbox_client import InboxClient

INBOX_URL = "http://www.fakemailgenerator.com/inbox/gustr.com/ghactr"
BODY_URL = "http://www.fakemailgenerator.com/email/gustr.com/ghactr/message-aaa111/"


@pytest.fixture
def mock_session() -> MagicMock:
    """Mocked requests.Session."""
    return MagicMock()


@pytest.fixture
def client(mock_session: MagicMock) -> InboxClient:
    return InboxClient(mock_session, timeout_seconds=3.0)


def _response(text: str = "", status_code: int = 200) -> MagicMock:
    response = MagicMock()
    response.text = text
    response.status_code = status_code
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(
            f"{status_code} Error", response=response
        )
    return response


class TestFetchInbox:
    def test_returns_body_text(
        self, client: InboxClient, mock_session: MagicMock, inbox_html: str
    ) -> None:
        mock_session.get.return_value = _response(inbox_html)

        assert client.fetch_inbox(INBOX_URL) == inbox_html
        mock_session.get.assert_called_once_with(INBOX_URL, timeout=3.0)

    def test_error_status_raises_fetch_error(
        self, client: InboxClient, mock_session: MagicMock
    ) -> None:
        mock_session.get.return_value = _response(status_code=503)

        with pytest.raises(FetchError, match="HTTP 503") as exc_info:
            client.fetch_inbox(INBOX_URL)
        assert exc_info.value.status_code == 503

    def test_connection_error_raises_fetch_error(
        self, client: InboxClient, mock_session: MagicMock
    ) -> None:
        mock_session.get.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(FetchError, match="connection refused") as exc_info:
            client.fetch_inbox(INBOX_URL)
        assert exc_info.value.status_code is None

    def test_timeout_raises_fetch_error(
        self, client: InboxClient, mock_session: MagicMock
    ) -> None:
        mock_session.get.side_effect = requests.Timeout("read timed out")

        with pytest.raises(FetchError):
            client.fetch_inbox(INBOX_URL)


class TestFetchMessageBody:
    def test_returns_body_verbatim(
        self, client: InboxClient, mock_session: MagicMock, message_html: str
    ) -> None:
        mock_session.get.return_value = _response(message_html)

        assert client.fetch_message_body(BODY_URL) == message_html
        mock_session.get.assert_called_once_with(BODY_URL, timeout=3.0)

    def test_error_status_body_returned_verbatim(
        self, client: InboxClient, mock_session: MagicMock
    ) -> None:
        response = _response("<h1>Message not found</h1>", status_code=404)
        mock_session.get.return_value = response

        assert client.fetch_message_body(BODY_URL) == "<h1>Message not found</h1>"
        response.raise_for_status.assert_not_called()

    def test_connection_error_raises_fetch_error(
        self, client: InboxClient, mock_session: MagicMock
    ) -> None:
        mock_session.get.side_effect = requests.ConnectionError("connection reset")

        with pytest.raises(FetchError, match="fetch message body"):
            client.fetch_message_body(BODY_URL)


class TestSession:
    def test_default_timeout_is_none(self, mock_session: MagicMock) -> None:
        client = InboxClient(mock_session)
        mock_session.get.return_value = _response("ok")

        client.fetch_inbox(INBOX_URL)

        mock_session.get.assert_called_once_with(INBOX_URL, timeout=None)

    def test_user_agent_header_set(self, mock_session: MagicMock) -> None:
        InboxClient(mock_session, user_agent="watcher-test")
        mock_session.headers.__setitem__.assert_called_once_with("User-Agent", "watcher-test")

    def test_close_closes_session(self, client: InboxClient, mock_session: MagicMock) -> None:
        client.close()
        mock_session.close.assert_called_once()
