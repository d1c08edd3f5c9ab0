"""Deterministic submission pipeline: discover, reconcile, check, prepare, submit."""

from uuid import uuid4

import structlog
from structlog.contextvars import bind_contextvars

from diff_submitter.core.application.exceptions import (
    AbortedByUser,
    ApplicationError,
    NoChangesError,
    UserAbort,
    WorkflowExecutionError,
)
from diff_submitter.core.application.ports import (
    RepositoryPort,
    ReviewServicePort,
    UserInteractionPort,
)
from diff_submitter.core.application.ports.common.exceptions import (
    RepositoryError,
    ReviewServiceError,
)
from diff_submitter.core.application.skills.changes.build_change_set_skill import (
    BuildChangeSetInput,
    BuildChangeSetSkill,
)
from diff_submitter.core.application.skills.changes.discover_paths_skill import (
    DiscoverPathsInput,
    DiscoverPathsSkill,
)
from diff_submitter.core.application.skills.changes.normalize_content_skill import (
    NormalizeContentSkill,
)
from diff_submitter.core.application.skills.changes.upload_artifacts_skill import (
    UploadArtifactsSkill,
)
from diff_submitter.core.application.skills.checks.run_checks_skill import (
    ChecksOutcome,
    RunChecksInput,
    RunChecksSkill,
)
from diff_submitter.core.application.skills.message.commit_message_parser import (
    CommitMessageParser,
)
from diff_submitter.core.application.skills.message.reconcile_message_skill import (
    ReconcileMessageInput,
    ReconcileMessageSkill,
)
from diff_submitter.core.application.skills.message.resolve_update_note_skill import (
    ResolveUpdateNoteSkill,
)
from diff_submitter.core.application.skills.submission.build_diff_specification_skill import (
    BuildDiffSpecificationInput,
    BuildDiffSpecificationSkill,
)
from diff_submitter.core.application.skills.submission.publish_diff_properties_skill import (
    PublishDiffPropertiesInput,
    PublishDiffPropertiesSkill,
)
from diff_submitter.core.application.workflows.base_workflow import BaseWorkflow
from diff_submitter.core.domain.change import Change
from diff_submitter.core.domain.message import SYNCED_FIELDS, ReviewMessage
from diff_submitter.core.domain.paths import DiscoveryContext, PathStatus
from diff_submitter.core.domain.submission import (
    OutcomeStatus,
    RunOutcome,
    SubmissionRequest,
    lint_status,
    unit_status,
)

logger = structlog.get_logger()

LESS_CONTEXT_LINES = 3


class SubmissionDeterministicWorkflow(BaseWorkflow):
    """Sequences the pipeline and decides between diff-only, create and update.

    Nothing reaches the review service until paths, message, checks and change
    normalization have all completed, so a declined confirmation never leaves a
    partial diff behind.
    """

    def __init__(
        self,
        *,
        service: ReviewServicePort,
        interaction: UserInteractionPort,
        repository: RepositoryPort | None,
        message_parser: CommitMessageParser,
        discover_paths: DiscoverPathsSkill,
        reconcile_message: ReconcileMessageSkill,
        run_checks: RunChecksSkill,
        build_change_set: BuildChangeSetSkill,
        normalize_content: NormalizeContentSkill,
        upload_artifacts: UploadArtifactsSkill,
        build_diff_specification: BuildDiffSpecificationSkill,
        publish_diff_properties: PublishDiffPropertiesSkill,
        resolve_update_note: ResolveUpdateNoteSkill,
        project_id: str | None = None,
        history_immutable: bool = False,
    ) -> None:
        self._service = service
        self._interaction = interaction
        self._repository = repository
        self._message_parser = message_parser
        self._discover_paths = discover_paths
        self._reconcile_message = reconcile_message
        self._run_checks = run_checks
        self._build_change_set = build_change_set
        self._normalize_content = normalize_content
        self._upload_artifacts = upload_artifacts
        self._build_diff_specification = build_diff_specification
        self._publish_diff_properties = publish_diff_properties
        self._resolve_update_note = resolve_update_note
        self._project_id = project_id
        self._history_immutable = history_immutable

    async def execute(self, request: SubmissionRequest) -> RunOutcome:
        """Run the pipeline; a declined confirmation yields a cancelled outcome."""
        bind_contextvars(run_id=uuid4().hex, event_type="workflow.diff_submit")
        logger.info("Submission workflow started", raw=request.is_raw)
        try:
            return await self._run_pipeline(request)
        except UserAbort as abort:
            logger.info(
                "Submission workflow cancelled by user",
                abort_type=type(abort).__name__,
                reason=abort.message,
            )
            return RunOutcome.cancelled(abort.message or type(abort).__name__)
        except ApplicationError as exc:
            self._log_failure(exc)
            raise
        except (ReviewServiceError, RepositoryError) as exc:
            self._log_failure(exc)
            raise WorkflowExecutionError(
                str(exc), context={"error_type": type(exc).__name__}
            ) from exc

    # ── Decisions ──

    def should_only_create_diff(self, request: SubmissionRequest) -> bool:
        """True when the run ends at "diff created" instead of touching a review."""
        if request.create or request.update or request.use_commit_message:
            return False
        if request.is_raw:
            return True
        repository = self._repository
        if repository is None or not repository.supports_relative_local_commits():
            return True
        if not repository.supports_amend():
            return True
        if self._history_immutable:
            return True
        return request.preview or request.only

    def should_amend(self, request: SubmissionRequest) -> bool:
        return not self._history_immutable and not request.no_amend

    # ── Pipeline ──

    async def _run_pipeline(self, request: SubmissionRequest) -> RunOutcome:
        only_diff = self.should_only_create_diff(request)
        if request.less_context and self._repository is not None:
            self._repository.set_diff_lines_of_context(LESS_CONTEXT_LINES)

        user_phid = await self._step_1_identify_user()
        await self._step_2_require_clean_working_copy(request)
        paths = await self._step_3_discover_paths(request)
        message = await self._step_4_reconcile_message(request, only_diff, user_phid)
        checks = await self._step_5_run_checks(request, paths)
        changes = await self._step_6_prepare_changes(request, paths)
        diff_id, diff_uri = await self._step_7_create_diff(changes, checks, user_phid)
        await self._step_8_publish_properties(request, diff_id, checks)

        summaries = [change.render_text_summary() for change in changes]
        if only_diff or message is None:
            logger.info("Created a new diff", diff_id=diff_id, diff_uri=diff_uri)
            return RunOutcome(
                status=OutcomeStatus.CREATED_DIFF,
                diff_id=diff_id,
                diff_uri=diff_uri,
                change_summaries=summaries,
            )
        if message.revision_id:
            result = await self._step_9_update_revision(request, message, diff_id)
            status = OutcomeStatus.UPDATED_REVIEW
        else:
            result = await self._step_9_create_revision(request, message, diff_id, user_phid)
            status = OutcomeStatus.CREATED_REVIEW

        logger.info("Submission workflow completed", status=str(status), revision_uri=result["uri"])
        return RunOutcome(
            status=status,
            diff_id=diff_id,
            diff_uri=diff_uri,
            revision_id=result.get("revisionid"),
            revision_uri=result["uri"],
            change_summaries=summaries,
        )

    # ── Step Methods ──

    async def _step_1_identify_user(self) -> str | None:
        user = await self._service.whoami()
        bind_contextvars(actor_id=user.get("userName"))
        return user.get("phid")

    async def _step_2_require_clean_working_copy(self, request: SubmissionRequest) -> None:
        """Untracked files must be acknowledged unless explicitly allowed."""
        if request.is_raw or request.allow_untracked or self._repository is None:
            return
        untracked = await self._repository.get_untracked_paths()
        if not untracked:
            return
        logger.warning("Working copy has untracked files", untracked_count=len(untracked))
        self._interaction.notify(
            "You have untracked files in this working copy.\n\n"
            + "\n".join(f"    {path}" for path in untracked)
        )
        if not self._interaction.confirm("Ignore these untracked files and continue?"):
            raise AbortedByUser("Aborted: untracked files.", context={"untracked": untracked})

    async def _step_3_discover_paths(self, request: SubmissionRequest) -> dict[str, PathStatus]:
        logger.info("Step 3: Discovering affected paths")
        return await self._discover_paths.execute(
            DiscoverPathsInput(request=request, context=DiscoveryContext())
        )

    async def _step_4_reconcile_message(
        self, request: SubmissionRequest, only_diff: bool, user_phid: str | None
    ) -> ReviewMessage | None:
        logger.info("Step 4: Reconciling review message", only_diff=only_diff)
        message = await self._reconcile_message.execute(
            ReconcileMessageInput(request=request, only_diff=only_diff, user_phid=user_phid)
        )
        if message is not None:
            logger.info("Review message selected", revision_id=message.revision_id)
        return message

    async def _step_5_run_checks(
        self, request: SubmissionRequest, paths: dict[str, PathStatus]
    ) -> ChecksOutcome:
        logger.info("Step 5: Running lint and unit checks")
        relative_commit = None
        if self._repository is not None and self._repository.supports_relative_local_commits():
            relative_commit = self._repository.get_relative_commit()
        return await self._run_checks.execute(
            RunChecksInput(request=request, paths=list(paths), relative_commit=relative_commit)
        )

    async def _step_6_prepare_changes(
        self, request: SubmissionRequest, paths: dict[str, PathStatus]
    ) -> list[Change]:
        logger.info("Step 6: Building and normalizing change set")
        changes = await self._build_change_set.execute(
            BuildChangeSetInput(paths=paths, raw=request.is_raw)
        )
        if not changes:
            raise NoChangesError("There are no changes to generate a diff from!")
        changes = await self._normalize_content.execute(changes)
        return await self._upload_artifacts.execute(changes)

    async def _step_7_create_diff(
        self, changes: list[Change], checks: ChecksOutcome, user_phid: str | None
    ) -> tuple[int, str]:
        logger.info("Step 7: Creating diff", change_count=len(changes))
        spec = await self._build_diff_specification.execute(
            BuildDiffSpecificationInput(
                changes=changes,
                lint_status=lint_status(checks.lint_result),
                unit_status=unit_status(checks.unit_result),
                author_phid=user_phid,
                project_id=self._project_id,
            )
        )
        diff_info = await self._service.create_diff(spec.to_dictionary())
        bind_contextvars(diff_id=diff_info["diffid"])
        return int(diff_info["diffid"]), diff_info["uri"]

    async def _step_8_publish_properties(
        self, request: SubmissionRequest, diff_id: int, checks: ChecksOutcome
    ) -> None:
        local_commits = []
        if not request.is_raw and self._repository is not None:
            local_commits = await self._repository.get_local_commit_information()
        await self._publish_diff_properties.execute(
            PublishDiffPropertiesInput(
                diff_id=diff_id,
                lint_findings=checks.lint_findings,
                test_results=checks.test_results,
                local_commits=local_commits,
            )
        )

    async def _step_9_update_revision(
        self, request: SubmissionRequest, message: ReviewMessage, diff_id: int
    ) -> dict:
        """Overlay client-owned fields on the server's current fields, then update."""
        revision_id = message.revision_id
        logger.info("Step 9: Updating existing revision", revision_id=revision_id)
        remote_corpus = await self._service.get_commit_message(revision_id, edit=True, fields={})
        remote = await self._message_parser.parse(remote_corpus)
        for name in SYNCED_FIELDS:
            remote.set_field(name, message.get_field(name))
        fields = remote.fields

        if request.edit:
            seeded = await self._service.get_commit_message(
                revision_id, edit=True, fields=message.fields
            )
            edited = self._interaction.edit(seeded, name="differential-edit-revision-info")
            fields = (await self._message_parser.parse(edited)).fields

        note = await self._resolve_update_note.execute(request)
        return await self._service.update_revision(revision_id, diff_id, fields, note)

    async def _step_9_create_revision(
        self,
        request: SubmissionRequest,
        message: ReviewMessage,
        diff_id: int,
        user_phid: str | None,
    ) -> dict:
        logger.info("Step 9: Creating new revision", diff_id=diff_id)
        result = await self._service.create_revision(diff_id, message.fields, user_phid)
        revised = await self._service.get_commit_message(result["revisionid"])
        repository = self._repository
        if repository is not None and repository.supports_amend() and self.should_amend(request):
            logger.info("Updating commit message", revision_id=result["revisionid"])
            await repository.amend_head_commit(revised)
        return result

    # ── Private Helpers ──

    @staticmethod
    def _log_failure(error: Exception) -> None:
        logger.error(
            "Submission workflow failed",
            processing_status="ERROR",
            error_type=type(error).__name__,
            error_details=str(error),
            error_retryable=getattr(error, "retryable", False),
        )
