"""Assemble the create-diff payload: changes, check statuses and environment fields."""

import socket
from dataclasses import dataclass

import structlog

from diff_submitter.core.application.ports import RepositoryPort
from diff_submitter.core.application.skills.skill import BaseSkill
from diff_submitter.core.domain.change import Change
from diff_submitter.core.domain.message import ReviewMessage
from diff_submitter.core.domain.submission import EnvironmentFields, SubmissionSpec

logger = structlog.get_logger()


@dataclass(frozen=True)
class BuildDiffSpecificationInput:
    changes: list[Change]
    lint_status: str
    unit_status: str
    author_phid: str | None
    project_id: str | None = None


@dataclass
class ParentLogInfo:
    parent: int | None = None
    base_revision: str | None = None
    base_path: str | None = None
    uuid: str | None = None


class BuildDiffSpecificationSkill(BaseSkill[BuildDiffSpecificationInput, SubmissionSpec]):
    def __init__(self, repository: RepositoryPort | None, hostname: str | None = None) -> None:
        self._repository = repository
        self._hostname = hostname or socket.gethostname()

    async def execute(self, input_data: BuildDiffSpecificationInput) -> SubmissionSpec:
        environment = await self._build_environment(input_data)
        spec = SubmissionSpec.build(
            changes=[change.to_dictionary() for change in input_data.changes],
            lint_status=input_data.lint_status,
            unit_status=input_data.unit_status,
            environment=environment,
        )
        logger.info(
            "Diff specification built",
            change_count=len(spec.changes),
            lint_status=spec.lint_status,
            unit_status=spec.unit_status,
        )
        return spec

    async def _build_environment(
        self, input_data: BuildDiffSpecificationInput
    ) -> EnvironmentFields:
        repository = self._repository
        if repository is None:
            return EnvironmentFields(
                source_machine=self._hostname,
                project_id=input_data.project_id,
                author_phid=input_data.author_phid,
            )

        base_revision = await repository.get_source_control_base_revision()
        base_path = await repository.get_source_control_path()
        uuid = await repository.get_repository_uuid()
        parent = None
        if repository.supports_relative_local_commits():
            info = await self.read_parent_log_info()
            parent = info.parent
            base_revision = info.base_revision or base_revision
            base_path = info.base_path or base_path
            uuid = info.uuid or uuid

        return EnvironmentFields(
            source_machine=self._hostname,
            source_path=repository.get_path(),
            branch=await repository.get_branch_name(),
            source_control_system=repository.source_control_system,
            source_control_path=base_path,
            source_control_base_revision=base_revision,
            parent_revision_id=parent,
            repository_uuid=uuid,
            project_id=input_data.project_id,
            author_phid=input_data.author_phid,
        )

    async def read_parent_log_info(self) -> ParentLogInfo:
        """Walk history below the range for a parent review and git-svn base data."""
        info = ParentLogInfo()
        history = await self._repository.get_history_log()
        for commit in history:
            message = ReviewMessage.from_raw_corpus(commit.message)
            if message.revision_id and info.parent is None:
                info.parent = message.revision_id
            if message.git_svn_base_revision and info.base_revision is None:
                info.base_revision = message.git_svn_base_revision
                info.base_path = message.git_svn_base_path
            if message.git_svn_uuid:
                info.uuid = message.git_svn_uuid
            if info.parent and info.base_revision:
                break
        return info
