"""Inbox listing parser: finds the message list and extracts one entry per row.

Expected markup (fakemailgenerator.com)::

    <ul id="email-list">
      <li>
        <a href="/inbox/<domain>/<name>/message-<id>/">
          <div>
            <p>Display Name &lt;sender@example.com&gt;</p>
            <p>Subject line</p>
          </div>
        </a>
      </li>
    </ul>
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator

from bs4 import BeautifulSoup, Tag

from fakemail_watcher.core.exceptions import ParseError
from fakemail_watcher.core.models import InboxEntry

logger = logging.getLogger(__name__)

EMAIL_LIST_ID = "email-list"

# Entities are already decoded by the HTML parser, so the address is in plain <...>
SENDER_PATTERN = re.compile(r"[^<]+ <([^>]+)>")
MESSAGE_ID_PATTERN = re.compile(r"/inbox/[^/]+/[^/]+/message-([^ /]+)/")


def _child_tags(node: Tag) -> list[Tag]:
    return [child for child in node.children if isinstance(child, Tag)]


class InboxPageParser:
    """Parses inbox listing HTML into InboxEntry objects, in document order."""

    def iter_entries(self, html: str) -> Iterator[InboxEntry]:
        """Yield one InboxEntry per listed message, lazily.

        A malformed row raises when it is reached, so rows before it have
        already been yielded and rows after it are never produced.

        Args:
            html: Listing page HTML.

        Yields:
            InboxEntry objects, top to bottom.

        Raises:
            ParseError: If the list container or any row is malformed.
        """
        soup = BeautifulSoup(html, "html.parser")
        container = soup.find(id=EMAIL_LIST_ID)
        if not isinstance(container, Tag):
            raise ParseError(f"No element with id '{EMAIL_LIST_ID}' on inbox page")

        rows = _child_tags(container)
        logger.debug("Inbox page lists %d entries", len(rows))

        for index, row in enumerate(rows):
            yield self._parse_row(row, index)

    def parse(self, html: str) -> list[InboxEntry]:
        """Parse every row eagerly. Raises ParseError on the first malformed row."""
        return list(self.iter_entries(html))

    def _parse_row(self, row: Tag, index: int) -> InboxEntry:
        link = row.find("a", recursive=False)
        if not isinstance(link, Tag):
            raise ParseError(f"Entry {index} has no link")

        wrappers = _child_tags(link)
        fields = _child_tags(wrappers[0]) if wrappers else []
        if len(fields) < 2:
            raise ParseError(f"Entry {index} is missing sender or subject")

        sender_text = fields[0].get_text()
        match = SENDER_PATTERN.search(sender_text)
        if match is None:
            raise ParseError(f"Entry {index} sender does not look like 'Name <address>': {sender_text!r}")
        sender = match.group(1)

        subject = fields[1].get_text().strip()

        href = link.get("href")
        if not isinstance(href, str):
            raise ParseError(f"Entry {index} link has no href")
        match = MESSAGE_ID_PATTERN.search(href)
        if match is None:
            raise ParseError(f"Entry {index} href has no message id: {href!r}")

        return InboxEntry(message_id=match.group(1), sender=sender, subject=subject)
