"""File-level unit of difference owned by the submission pipeline for one run."""

import re
from dataclasses import dataclass, field
from typing import Any

from diff_submitter.core.domain.change.value_objects.change_type import ChangeKind, FileType
from diff_submitter.core.domain.change.value_objects.hunk import Hunk
from diff_submitter.core.domain.change.value_objects.uploaded_artifact import UploadedArtifact

_IMAGE_MIME_RE = re.compile(r"^image/")

_SUMMARY_SYMBOLS: dict[ChangeKind, str] = {
    ChangeKind.ADD: "A",
    ChangeKind.CHANGE: "M",
    ChangeKind.DELETE: "D",
    ChangeKind.MOVE_AWAY: "V",
    ChangeKind.COPY_AWAY: "P",
    ChangeKind.MOVE_HERE: "V",
    ChangeKind.COPY_HERE: "P",
    ChangeKind.MULTICOPY: "P",
    ChangeKind.MESSAGE: "*",
    ChangeKind.CHILD: "*",
}


@dataclass(kw_only=True)
class Change:
    """Path identity is fixed; file type, hunks and metadata evolve during normalization."""

    current_path: str
    old_path: str | None = None
    kind: ChangeKind = ChangeKind.CHANGE
    file_type: FileType = FileType.TEXT
    hunks: list[Hunk] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    commit_hash: str | None = None

    @property
    def is_binary(self) -> bool:
        return self.file_type == FileType.BINARY

    def hunk_corpus_size(self) -> int:
        return sum(hunk.byte_size for hunk in self.hunks)

    def convert_to_binary(self) -> None:
        """Reclassify as binary; binary changes carry payload artifacts, not hunks."""
        self.file_type = FileType.BINARY
        self.hunks = []

    def attach_artifact(self, side: str, artifact: UploadedArtifact) -> None:
        """Record upload results under ``old:*`` or ``new:*`` metadata keys."""
        if artifact.artifact_id:
            self.metadata[f"{side}:binary-phid"] = artifact.artifact_id
        self.metadata[f"{side}:file:size"] = artifact.byte_size
        self.metadata[f"{side}:file:mime-type"] = artifact.mime_type

    def promote_to_image_if(self, mime_type: str | None) -> None:
        if mime_type and _IMAGE_MIME_RE.match(mime_type):
            self.file_type = FileType.IMAGE

    def render_text_summary(self) -> str:
        symbol = _SUMMARY_SYMBOLS.get(self.kind, "?")
        if self.kind in (ChangeKind.MOVE_HERE, ChangeKind.COPY_HERE) and self.old_path:
            return f"{symbol} {self.old_path} -> {self.current_path}"
        return f"{symbol} {self.current_path}"

    def to_dictionary(self) -> dict[str, Any]:
        return {
            "metadata": dict(self.metadata),
            "oldPath": self.old_path,
            "currentPath": self.current_path,
            "awayPaths": [],
            "oldProperties": {},
            "newProperties": {},
            "type": int(self.kind),
            "fileType": int(self.file_type),
            "commitHash": self.commit_hash,
            "hunks": [hunk.to_dictionary() for hunk in self.hunks],
        }
