"""Turns unified diff text into ``Change`` entities with ``unidiff.PatchSet``.

Diff bytes are decoded with ``surrogateescape`` so that hunk corpora can be
re-encoded to exactly the bytes the VCS produced, whatever their encoding.
"""

from unidiff import PatchSet
from unidiff.errors import UnidiffParseError
from unidiff.patch import PatchedFile

from diff_submitter.core.application.ports.common.exceptions import RepositoryError
from diff_submitter.core.application.ports.diff_parser_port import DiffParserPort
from diff_submitter.core.domain.change import Change, ChangeKind, FileType, Hunk

_DEV_NULL = "/dev/null"
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


class UnidiffParser(DiffParserPort):
    def parse(self, diff: bytes) -> list[Change]:
        if not diff.strip():
            return []
        try:
            patch = PatchSet(diff.decode(_ENCODING, errors=_ERRORS))
        except UnidiffParseError as exc:
            raise RepositoryError("diff parse", str(exc)) from exc
        return [self._to_change(patched_file) for patched_file in patch]

    def _to_change(self, patched_file: PatchedFile) -> Change:
        old_path = _strip_prefix(patched_file.source_file)
        new_path = _strip_prefix(patched_file.target_file)

        if patched_file.is_added_file:
            change = Change(current_path=new_path or old_path, kind=ChangeKind.ADD)
        elif patched_file.is_removed_file:
            change = Change(current_path=old_path or new_path, old_path=old_path, kind=ChangeKind.DELETE)
        elif old_path and new_path and old_path != new_path:
            kind = ChangeKind.MOVE_HERE if patched_file.is_rename else ChangeKind.COPY_HERE
            change = Change(current_path=new_path, old_path=old_path, kind=kind)
        else:
            path = new_path or old_path
            change = Change(current_path=path, old_path=path, kind=ChangeKind.CHANGE)

        if patched_file.is_binary_file:
            change.file_type = FileType.BINARY
            return change

        change.hunks = [
            Hunk(
                corpus="".join(str(line) for line in hunk).encode(_ENCODING, errors=_ERRORS),
                old_offset=hunk.source_start,
                old_length=hunk.source_length,
                new_offset=hunk.target_start,
                new_length=hunk.target_length,
            )
            for hunk in patched_file
        ]
        return change


def _strip_prefix(path: str | None) -> str | None:
    if not path or path == _DEV_NULL:
        return None
    if path.startswith(("a/", "b/")):
        return path[2:]
    return path
