"""Turn version-control output into structured changes and enforce size policy."""

import asyncio
from dataclasses import dataclass

import structlog

from diff_submitter.core.application.exceptions import (
    AbortedBySize,
    ChangeTooLargeError,
    InconsistentBaseRevision,
    NoChangesError,
    UnsupportedVcsError,
)
from diff_submitter.core.application.ports import (
    DiffParserPort,
    PathInfo,
    RawDiffSourcePort,
    RepositoryPort,
    UserInteractionPort,
)
from diff_submitter.core.application.skills.skill import BaseSkill
from diff_submitter.core.domain.change import Change, ChangeKind
from diff_submitter.core.domain.paths import PathStatus

logger = structlog.get_logger()

MAX_CHANGE_COUNT = 250
MAX_CHANGE_BYTES = 4 * 1024 * 1024


@dataclass(frozen=True)
class BuildChangeSetInput:
    paths: dict[str, PathStatus]
    raw: bool = False


class BuildChangeSetSkill(BaseSkill[BuildChangeSetInput, list[Change]]):
    def __init__(
        self,
        repository: RepositoryPort | None,
        parser: DiffParserPort,
        interaction: UserInteractionPort,
        raw_source: RawDiffSourcePort | None = None,
    ) -> None:
        self._repository = repository
        self._parser = parser
        self._interaction = interaction
        self._raw_source = raw_source

    async def execute(self, input_data: BuildChangeSetInput) -> list[Change]:
        if input_data.raw:
            return await self._build_from_raw()

        if self._repository is None:
            raise UnsupportedVcsError("A working copy is required to build a change set.")
        if self._repository.supports_working_copy_status():
            changes = await self._build_from_working_copy(input_data.paths)
        elif self._repository.supports_relative_local_commits():
            changes = await self._build_from_commit_range()
        else:
            raise UnsupportedVcsError(
                f"Repository type '{self._repository.source_control_system}' is not supported."
            )

        self._check_change_count(changes)
        self._check_change_sizes(changes)
        logger.info("Change set built", change_count=len(changes))
        return changes

    # ── Sources ──

    async def _build_from_raw(self) -> list[Change]:
        if self._raw_source is None:
            raise UnsupportedVcsError("Raw mode requires a raw diff source.")
        changes = self._parser.parse(await self._raw_source.read_diff())
        return [change for change in changes if change.kind != ChangeKind.MESSAGE]

    async def _build_from_working_copy(self, paths: dict[str, PathStatus]) -> list[Change]:
        diffs, infos = await self._prime_working_copy_data(list(paths))
        self._adopt_consistent_base_revision(infos)
        changes: list[Change] = []
        for path in paths:
            changes.extend(self._parser.parse(diffs[path]))
        return changes

    async def _build_from_commit_range(self) -> list[Change]:
        diff = await self._repository.get_full_diff()
        if not diff.strip():
            raise NoChangesError("No changes found. (Did you specify the wrong commit range?)")
        return self._parser.parse(diff)

    async def _prime_working_copy_data(
        self, paths: list[str]
    ) -> tuple[dict[str, bytes], dict[str, PathInfo]]:
        """Issue a diff and an info request per path before awaiting any of them.

        The first failure cancels the requests still in flight and propagates as is.
        """
        try:
            async with asyncio.TaskGroup() as group:
                tasks = []
                for path in paths:
                    tasks.append(group.create_task(self._repository.fetch_path_diff(path)))
                    tasks.append(group.create_task(self._repository.fetch_path_info(path)))
        except BaseExceptionGroup as failures:
            raise failures.exceptions[0] from None
        results = [task.result() for task in tasks]

        diffs: dict[str, bytes] = {}
        infos: dict[str, PathInfo] = {}
        for index, path in enumerate(paths):
            diffs[path] = results[2 * index]
            infos[path] = results[2 * index + 1]
        return diffs, infos

    def _adopt_consistent_base_revision(self, infos: dict[str, PathInfo]) -> None:
        """All non-new paths must share one base revision, which becomes the effective base."""
        bases = {path: info.base_revision for path, info in infos.items() if info.base_revision}
        if not bases:
            return
        reference = next(iter(bases.values()))
        if any(revision != reference for revision in bases.values()):
            raise InconsistentBaseRevision(bases)
        self._repository.override_base_revision(reference)
        logger.info("Effective base revision adopted", base_revision=reference)

    # ── Size policy ──

    def _check_change_count(self, changes: list[Change]) -> None:
        if len(changes) <= MAX_CHANGE_COUNT:
            return
        prompt = (
            f"This diff has a very large number of changes ({len(changes):,}). Review works "
            "best for changes which will receive detailed human review, and not as well for "
            "large automated changes or bulk checkins. Continue anyway?"
        )
        if not self._interaction.confirm(prompt):
            raise AbortedBySize(
                "Aborted generation of gigantic diff.", context={"change_count": len(changes)}
            )

    def _check_change_sizes(self, changes: list[Change]) -> None:
        for change in changes:
            size = change.hunk_corpus_size()
            if size > MAX_CHANGE_BYTES:
                self._handle_oversized_change(change, size)

    def _handle_oversized_change(self, change: Change, size: int) -> None:
        warning = (
            f"Diff for '{change.current_path}' with context is {size:,} bytes in length. "
            "Generally, source changes should not be this large. If this file is a huge "
            "text file, try using the '--less-context' flag."
        )
        context = {"path": change.current_path, "size": size}
        if self._repository.supports_working_copy_status():
            raise ChangeTooLargeError(
                f"{warning} If the file is not a text file, mark it as binary with:\n\n"
                "  $ svn propset svn:mime-type application/octet-stream <filename>\n",
                context=context,
            )
        confirm = (
            f"{warning} If the file is not a text file, you can mark it 'binary'. "
            "Mark this file as 'binary' and continue?"
        )
        if not self._interaction.confirm(confirm):
            raise AbortedBySize("Aborted generation of gigantic diff.", context=context)
        logger.info("Oversized change converted to binary", path=change.current_path, size=size)
        change.convert_to_binary()
