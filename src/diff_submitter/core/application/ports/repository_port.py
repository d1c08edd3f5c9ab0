"""Capability interface for version-control bindings.

The pipeline never inspects a binding's concrete type. It asks which change
model the binding supports and calls the matching operations. A binding
implements exactly one model:

- ``WorkingCopyStatusPort``: centralized, no mutable local history;
- ``RelativeCommitPort``: a commit range diffed against a merge base.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from diff_submitter.core.domain.message import CommitCandidate
from diff_submitter.core.domain.paths import PathStatus


@dataclass(frozen=True)
class PathInfo:
    """Per-path metadata from the working copy; revision 0 marks a brand-new path."""

    path: str
    base_revision: int


class RepositoryPort(ABC):
    # ── Capabilities ──

    @property
    @abstractmethod
    def source_control_system(self) -> str:
        """Short VCS name reported to the review service (``git``, ``svn``...)."""

    @abstractmethod
    def supports_working_copy_status(self) -> bool:
        """True for the unordered-change model."""

    @abstractmethod
    def supports_relative_local_commits(self) -> bool:
        """True for the linear commit-range model."""

    @abstractmethod
    def supports_amend(self) -> bool:
        """True when the head commit message can be rewritten after submission."""

    # ── Shared ──

    @abstractmethod
    def set_diff_lines_of_context(self, lines: int) -> None: ...

    @abstractmethod
    async def get_untracked_paths(self) -> list[str]: ...

    @abstractmethod
    async def get_original_file_data(self, path: str) -> bytes:
        """Content before the change; empty when the path did not exist."""

    @abstractmethod
    async def get_current_file_data(self, path: str) -> bytes:
        """Content after the change; empty when the path was removed."""

    @abstractmethod
    def get_path(self) -> str:
        """Absolute working-copy root."""

    @abstractmethod
    async def get_branch_name(self) -> str | None: ...

    @abstractmethod
    async def get_source_control_base_revision(self) -> str | None: ...

    @abstractmethod
    async def get_source_control_path(self) -> str | None: ...

    @abstractmethod
    async def get_repository_uuid(self) -> str | None: ...

    @abstractmethod
    async def get_local_commit_information(self) -> list[dict[str, Any]]: ...


class WorkingCopyStatusPort(RepositoryPort):
    def supports_working_copy_status(self) -> bool:
        return True

    def supports_relative_local_commits(self) -> bool:
        return False

    @abstractmethod
    async def get_working_copy_status(self, include_externals: bool = True) -> dict[str, PathStatus]:
        """Flat status of every changed path in the working copy."""

    @abstractmethod
    async def fetch_path_diff(self, path: str) -> bytes:
        """Diff text for one path."""

    @abstractmethod
    async def fetch_path_info(self, path: str) -> PathInfo:
        """Base revision metadata for one path."""

    @abstractmethod
    def override_base_revision(self, revision: int) -> None:
        """Adopt ``revision`` as the effective base for the whole change set."""


class RelativeCommitPort(RepositoryPort):
    def supports_working_copy_status(self) -> bool:
        return False

    def supports_relative_local_commits(self) -> bool:
        return True

    @abstractmethod
    async def set_relative_commit(self, spec: list[str]) -> None:
        """Resolve a user-specified range against the current position."""

    @abstractmethod
    def get_relative_commit(self) -> str | None: ...

    @abstractmethod
    async def get_affected_paths(self) -> dict[str, PathStatus]:
        """Union of paths touched by commits in the resolved range."""

    @abstractmethod
    async def get_full_diff(self) -> bytes:
        """Complete diff for the resolved range."""

    @abstractmethod
    async def get_commit_log(self) -> list[CommitCandidate]:
        """Commits in the resolved range, newest first."""

    @abstractmethod
    async def get_history_log(self) -> list[CommitCandidate]:
        """Commits at and below the range base, newest first."""

    @abstractmethod
    async def get_commit_message(self, revision: str) -> str: ...

    @abstractmethod
    async def has_commits(self) -> bool: ...

    @abstractmethod
    async def amend_head_commit(self, message: str) -> None: ...
