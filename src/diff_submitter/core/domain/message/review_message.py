"""Review message: raw commit-message corpus plus the fields the review service parsed from it."""

import re
from dataclasses import dataclass, field
from typing import Any

_REVISION_LINE_RE = re.compile(r"^Differential Revision:\s*(.+?)\s*$", re.MULTILINE)
_REVISION_ID_RE = re.compile(r"(?:^|/)D?(\d+)$")
_GIT_SVN_RE = re.compile(r"^git-svn-id:\s*(\S+)@(\d+)\s+(\S+)\s*$", re.MULTILINE)

REVIEWERS_FIELD = "reviewerPHIDs"
SYNCED_FIELDS = ("title", "summary", "testPlan")


@dataclass(kw_only=True)
class ReviewMessage:
    raw_corpus: str
    fields: dict[str, Any] = field(default_factory=dict)
    revision_id: int | None = None
    git_svn_base_path: str | None = None
    git_svn_base_revision: str | None = None
    git_svn_uuid: str | None = None

    @classmethod
    def from_raw_corpus(cls, corpus: str) -> "ReviewMessage":
        """Local half of parsing: extract identifiers embedded in the text itself."""
        message = cls(raw_corpus=corpus)
        revision_line = _REVISION_LINE_RE.search(corpus)
        if revision_line:
            match = _REVISION_ID_RE.search(revision_line.group(1))
            if match:
                message.revision_id = int(match.group(1))
        git_svn = _GIT_SVN_RE.search(corpus)
        if git_svn:
            message.git_svn_base_path = git_svn.group(1)
            message.git_svn_base_revision = git_svn.group(2)
            message.git_svn_uuid = git_svn.group(3)
        return message

    def get_field(self, name: str) -> Any:
        return self.fields.get(name)

    def set_field(self, name: str, value: Any) -> None:
        self.fields[name] = value

    @property
    def reviewers(self) -> list[str]:
        return list(self.fields.get(REVIEWERS_FIELD) or [])

    @property
    def title_line(self) -> str:
        stripped = self.raw_corpus.strip()
        return stripped.split("\n", 1)[0] if stripped else ""
