"""Git binding: the relative local commit model.

The change set is the diff between the merge base of the selected range and
the working tree. Commits in the range are the message candidates.
"""

from pathlib import Path
from typing import Any

import structlog

from diff_submitter.core.application.ports.common.exceptions import RepositoryError
from diff_submitter.core.application.ports.repository_port import RelativeCommitPort
from diff_submitter.core.domain.message import CommitCandidate
from diff_submitter.core.domain.paths import PathStatus
from diff_submitter.infrastructure.tools.vcs.git.git_command_runner import GitCommandRunner

logger = structlog.get_logger()

FULL_CONTEXT_LINES = 32767
HISTORY_DEPTH = 100
EMPTY_TREE = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"

_RECORD = "\x01"
_FIELD = "\x00"
_NAME_STATUS = {
    "A": PathStatus.ADDED,
    "D": PathStatus.DELETED,
}


class GitRepositoryAdapter(RelativeCommitPort):
    def __init__(self, runner: GitCommandRunner, lines_of_context: int | None = None) -> None:
        self._git = runner
        self._lines_of_context = lines_of_context
        self._relative_commit: str | None = None

    # ── Capabilities ──

    @property
    def source_control_system(self) -> str:
        return "git"

    def supports_amend(self) -> bool:
        return True

    # ── Shared ──

    def set_diff_lines_of_context(self, lines: int) -> None:
        self._lines_of_context = lines

    async def get_untracked_paths(self) -> list[str]:
        result = await self._git.run("ls-files", "--others", "--exclude-standard", "-z")
        return [path for path in result.stdout_text().split(_FIELD) if path]

    async def get_original_file_data(self, path: str) -> bytes:
        result = await self._git.run(
            "cat-file", "blob", f"{self._require_relative_commit()}:{path}", check=False
        )
        return result.stdout if result.ok else b""

    async def get_current_file_data(self, path: str) -> bytes:
        target = self._git.root / path
        return target.read_bytes() if target.is_file() else b""

    def get_path(self) -> str:
        return str(self._git.root)

    async def get_branch_name(self) -> str | None:
        result = await self._git.run("symbolic-ref", "--quiet", "--short", "HEAD", check=False)
        return result.stdout_text().strip() or None

    async def get_source_control_base_revision(self) -> str | None:
        return self._relative_commit

    async def get_source_control_path(self) -> str | None:
        return None

    async def get_repository_uuid(self) -> str | None:
        return None

    async def get_local_commit_information(self) -> list[dict[str, Any]]:
        output = await self._git.text(
            "log",
            f"{self._require_relative_commit()}..HEAD",
            "--format=%H%x00%T%x00%P%x00%at%x00%an%x00%ae%x00%s%x00%B%x01",
        )
        commits = []
        for record in _records(output):
            parts = record.split(_FIELD, 7)
            if len(parts) != 8:
                continue
            commit, tree, parents, timestamp, author, email, summary, message = parts
            commits.append(
                {
                    "commit": commit,
                    "tree": tree,
                    "parents": parents.split(),
                    "time": timestamp,
                    "author": author,
                    "authorEmail": email,
                    "summary": summary,
                    "message": message,
                }
            )
        return commits

    # ── Relative local commit model ──

    async def set_relative_commit(self, spec: list[str]) -> None:
        if len(spec) > 1:
            raise RepositoryError(
                "git merge-base", "Specify at most one commit to diff against: " + " ".join(spec)
            )
        if not await self.has_commits():
            self._relative_commit = EMPTY_TREE
            return

        if spec:
            target = spec[0]
        else:
            parent = await self._git.run("rev-parse", "--verify", "--quiet", "HEAD^", check=False)
            target = "HEAD^" if parent.ok else EMPTY_TREE
        if target == EMPTY_TREE:
            self._relative_commit = EMPTY_TREE
        else:
            self._relative_commit = await self._git.text("merge-base", target, "HEAD")
        logger.info("Resolved relative commit", relative_spec=target, relative_commit=self._relative_commit)

    def get_relative_commit(self) -> str | None:
        return self._relative_commit

    async def get_affected_paths(self) -> dict[str, PathStatus]:
        result = await self._git.run(
            "diff", "--no-renames", "--name-status", "-z", self._require_relative_commit(), "--"
        )
        fields = [item for item in result.stdout_text().split(_FIELD) if item]
        paths: dict[str, PathStatus] = {}
        for status, path in zip(fields[::2], fields[1::2]):
            paths[path] = _NAME_STATUS.get(status[:1], PathStatus.MODIFIED)
        for path in await self.get_untracked_paths():
            paths[path] = paths.get(path, PathStatus.NONE) | PathStatus.UNTRACKED
        return paths

    async def get_full_diff(self) -> bytes:
        context = self._lines_of_context if self._lines_of_context is not None else FULL_CONTEXT_LINES
        result = await self._git.run(
            "diff",
            "--no-ext-diff",
            "--no-textconv",
            "--no-color",
            "-M",
            "-C",
            "--src-prefix=a/",
            "--dst-prefix=b/",
            f"-U{context}",
            self._require_relative_commit(),
            "--",
        )
        return result.stdout

    async def get_commit_log(self) -> list[CommitCandidate]:
        relative = self._require_relative_commit()
        if relative == EMPTY_TREE:
            return await self._log("HEAD") if await self.has_commits() else []
        return await self._log(f"{relative}..HEAD")

    async def get_history_log(self) -> list[CommitCandidate]:
        relative = self._require_relative_commit()
        if relative == EMPTY_TREE:
            return []
        return await self._log(relative, f"-n{HISTORY_DEPTH}")

    async def get_commit_message(self, revision: str) -> str:
        return await self._git.text("log", "-n1", "--format=%B", revision)

    async def has_commits(self) -> bool:
        result = await self._git.run("rev-parse", "--verify", "--quiet", "HEAD", check=False)
        return result.ok

    async def amend_head_commit(self, message: str) -> None:
        await self._git.run("commit", "--amend", "--allow-empty", "-F", "-", stdin=message.encode("utf-8"))
        logger.info("Amended head commit message")

    # ── Private Helpers ──

    def _require_relative_commit(self) -> str:
        if self._relative_commit is None:
            raise RepositoryError("git", "No relative commit has been resolved yet")
        return self._relative_commit

    async def _log(self, *selection: str) -> list[CommitCandidate]:
        output = await self._git.text("log", *selection, "--format=%H%x00%B%x01")
        candidates = []
        for record in _records(output):
            commit_hash, _, message = record.partition(_FIELD)
            candidates.append(CommitCandidate(commit_hash=commit_hash, message=message.strip()))
        return candidates


def _records(output: str) -> list[str]:
    return [record.strip("\n") for record in output.split(_RECORD) if record.strip()]
