"""Two-phase commit message parsing: local identifiers, then server-side field parsing."""

import re

from diff_submitter.core.application.exceptions import MessageParseError
from diff_submitter.core.application.ports import ReviewServicePort
from diff_submitter.core.domain.message import ReviewMessage

_COMMENT_LINE_RE = re.compile(r"^\s*#.*$", re.MULTILINE)


def strip_comment_lines(text: str) -> str:
    """Blank out ``#`` guidance lines added to editor templates."""
    return _COMMENT_LINE_RE.sub("", text)


class CommitMessageParser:
    def __init__(self, service: ReviewServicePort) -> None:
        self._service = service

    async def parse(self, corpus: str) -> ReviewMessage:
        """Return a message with a complete field set or raise ``MessageParseError``."""
        message = ReviewMessage.from_raw_corpus(corpus)
        parsed = await self._service.parse_commit_message(corpus)
        errors = [str(error) for error in parsed.get("errors") or []]
        if errors:
            raise MessageParseError(errors)
        message.fields = dict(parsed.get("fields") or {})
        return message
