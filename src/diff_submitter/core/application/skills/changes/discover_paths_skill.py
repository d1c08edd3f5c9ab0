"""Determine which paths the pending change touches."""

import posixpath
from dataclasses import dataclass

import structlog

from diff_submitter.core.application.exceptions import AbortedByUser, UnsupportedVcsError
from diff_submitter.core.application.ports import RepositoryPort, UserInteractionPort
from diff_submitter.core.application.skills.skill import BaseSkill
from diff_submitter.core.domain.paths import DiscoveryContext, PathStatus
from diff_submitter.core.domain.submission import SubmissionRequest

logger = structlog.get_logger()


@dataclass(frozen=True)
class DiscoverPathsInput:
    request: SubmissionRequest
    context: DiscoveryContext


class DiscoverPathsSkill(BaseSkill[DiscoverPathsInput, dict[str, PathStatus]]):
    """Maps each affected path to its change mask, minus untracked and externals."""

    def __init__(self, repository: RepositoryPort | None, interaction: UserInteractionPort) -> None:
        self._repository = repository
        self._interaction = interaction

    async def execute(self, input_data: DiscoverPathsInput) -> dict[str, PathStatus]:
        if input_data.request.is_raw or self._repository is None:
            return {}

        if self._repository.supports_working_copy_status():
            paths = await self._discover_working_copy(input_data)
        elif self._repository.supports_relative_local_commits():
            await self._repository.set_relative_commit(list(input_data.request.paths))
            paths = await self._repository.get_affected_paths()
        else:
            raise UnsupportedVcsError(
                f"Repository type '{self._repository.source_control_system}' is not supported.",
                context={"vcs": self._repository.source_control_system},
            )

        discovered = {
            path: mask for path, mask in paths.items() if not mask & PathStatus.UNTRACKED
        }
        logger.info("Affected paths discovered", path_count=len(discovered))
        return discovered

    async def _discover_working_copy(self, input_data: DiscoverPathsInput) -> dict[str, PathStatus]:
        """Filter working-copy status by the allow-list and drop externals."""
        status = await self._repository.get_working_copy_status(include_externals=True)
        allowed = [_normalize(path) for path in input_data.request.paths]
        paths = {path: mask for path, mask in status.items() if _is_allowed(path, allowed)}

        modified_externals = [
            path
            for path, mask in paths.items()
            if mask & PathStatus.EXTERNALS and mask.has_modification
        ]
        paths = {path: mask for path, mask in paths.items() if not mask & PathStatus.EXTERNALS}

        if modified_externals and not input_data.context.externals_acknowledged:
            self._confirm_externals(modified_externals)
            input_data.context.externals_acknowledged = True
        return paths

    def _confirm_externals(self, externals: list[str]) -> None:
        logger.warning("Modified externals excluded from diff", externals=externals)
        self._interaction.notify(
            "The working copy includes changes to externally-managed paths. These changes "
            "will not be included in the diff because they can not be committed alongside "
            "normal changes.\n\nModified externals:\n\n"
            + "\n".join(f"        {path}" for path in externals)
        )
        if not self._interaction.confirm("Generate a diff (with just local changes) anyway?"):
            raise AbortedByUser("Aborted: modified externals.", context={"externals": externals})


def _normalize(path: str) -> str:
    return posixpath.normpath(path.replace("\\", "/")).lstrip("/")


def _is_allowed(path: str, allowed: list[str]) -> bool:
    """An allow-list entry admits itself and everything beneath it; no entries admit all."""
    if not allowed:
        return True
    candidate = _normalize(path)
    return any(
        entry in (".", "") or candidate == entry or candidate.startswith(entry + "/")
        for entry in allowed
    )
