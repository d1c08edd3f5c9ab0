"""Functional DI container: builds a fully-wired submission workflow for one run."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import structlog

from diff_submitter.core.application.ports import (
    RawDiffSourcePort,
    RepositoryPort,
    UserInteractionPort,
)
from diff_submitter.core.application.skills.changes.build_change_set_skill import BuildChangeSetSkill
from diff_submitter.core.application.skills.changes.discover_paths_skill import DiscoverPathsSkill
from diff_submitter.core.application.skills.changes.normalize_content_skill import (
    NormalizeContentSkill,
)
from diff_submitter.core.application.skills.changes.upload_artifacts_skill import (
    UploadArtifactsSkill,
)
from diff_submitter.core.application.skills.checks.run_checks_skill import RunChecksSkill
from diff_submitter.core.application.skills.message.commit_message_parser import (
    CommitMessageParser,
)
from diff_submitter.core.application.skills.message.reconcile_message_skill import (
    ReconcileMessageSkill,
)
from diff_submitter.core.application.skills.message.resolve_update_note_skill import (
    ResolveUpdateNoteSkill,
)
from diff_submitter.core.application.skills.submission.build_diff_specification_skill import (
    BuildDiffSpecificationSkill,
)
from diff_submitter.core.application.skills.submission.publish_diff_properties_skill import (
    PublishDiffPropertiesSkill,
)
from diff_submitter.core.application.workflows.submit.submission_deterministic_workflow import (
    SubmissionDeterministicWorkflow,
)
from diff_submitter.core.domain.submission import SubmissionRequest
from diff_submitter.infrastructure.configuration.main_settings import Settings
from diff_submitter.infrastructure.tools.checks.command_check_runner import (
    CommandLintRunner,
    CommandUnitRunner,
)
from diff_submitter.infrastructure.tools.conduit.conduit_http_client import ConduitHttpClient
from diff_submitter.infrastructure.tools.conduit.conduit_review_service import (
    ConduitReviewService,
)
from diff_submitter.infrastructure.tools.diff.unidiff_parser import UnidiffParser
from diff_submitter.infrastructure.tools.interaction.console_user_interaction import (
    ConsoleUserInteraction,
)
from diff_submitter.infrastructure.tools.mime.file_command_mime_detector import FileCommandMimeDetector
from diff_submitter.infrastructure.tools.raw.raw_diff_source import (
    CommandDiffSource,
    StdinDiffSource,
)
from diff_submitter.infrastructure.tools.vcs.git.git_command_runner import GitCommandRunner
from diff_submitter.infrastructure.tools.vcs.git.git_repository_adapter import (
    GitRepositoryAdapter,
)

logger = structlog.get_logger()


async def build_repository(
    request: SubmissionRequest, settings: Settings, cwd: Path | None = None
) -> RepositoryPort | None:
    """Raw submissions have no working copy; everything else binds to git."""
    if request.is_raw:
        return None
    runner = await GitCommandRunner.discover(cwd or Path.cwd())
    return GitRepositoryAdapter(runner, lines_of_context=settings.lines_of_context)


def build_raw_source(request: SubmissionRequest) -> RawDiffSourcePort | None:
    if request.raw_command:
        return CommandDiffSource(request.raw_command)
    if request.raw:
        return StdinDiffSource()
    return None


def build_workflow(
    *,
    request: SubmissionRequest,
    settings: Settings,
    client: ConduitHttpClient,
    repository: RepositoryPort | None,
    interaction: UserInteractionPort,
) -> SubmissionDeterministicWorkflow:
    service = ConduitReviewService(client)
    parser = CommitMessageParser(service)
    root = Path(repository.get_path()) if repository is not None else None

    return SubmissionDeterministicWorkflow(
        service=service,
        interaction=interaction,
        repository=repository,
        message_parser=parser,
        discover_paths=DiscoverPathsSkill(repository, interaction),
        reconcile_message=ReconcileMessageSkill(service, parser, interaction, repository),
        run_checks=RunChecksSkill(
            CommandLintRunner(settings.lint_command, root),
            CommandUnitRunner(settings.unit_command, root),
            interaction,
        ),
        build_change_set=BuildChangeSetSkill(
            repository, UnidiffParser(), interaction, build_raw_source(request)
        ),
        normalize_content=NormalizeContentSkill(
            service,
            interaction,
            encoding=request.encoding or settings.encoding,
            project_id=settings.project_id,
        ),
        upload_artifacts=UploadArtifactsSkill(service, FileCommandMimeDetector(), interaction, repository),
        build_diff_specification=BuildDiffSpecificationSkill(repository),
        publish_diff_properties=PublishDiffPropertiesSkill(service),
        resolve_update_note=ResolveUpdateNoteSkill(interaction, repository),
        project_id=settings.project_id,
        history_immutable=settings.history_immutable,
    )


@asynccontextmanager
async def submission_workflow(
    request: SubmissionRequest,
    settings: Settings,
    interaction: UserInteractionPort | None = None,
) -> AsyncIterator[SubmissionDeterministicWorkflow]:
    """Yield a wired workflow; the RPC client is closed on exit."""
    repository = await build_repository(request, settings)
    async with ConduitHttpClient(settings.conduit) as client:
        logger.debug("Workflow wired", raw=request.is_raw, conduit_uri=settings.conduit.uri)
        yield build_workflow(
            request=request,
            settings=settings,
            client=client,
            repository=repository,
            interaction=interaction or ConsoleUserInteraction(editor=settings.editor),
        )
