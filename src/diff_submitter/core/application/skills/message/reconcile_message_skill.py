"""Select exactly one review message for the run.

Entry states, chosen by caller intent and mutually exclusive:

- explicit commit (``--use-commit-message``)
- file (``--create --message-file``)
- interactive template (``--create``, or "none" when choosing among commits)
- existing review (``--update``), fetched from the server without validation
- commit range (default for local-commit bindings when not diff-only)
"""

import tempfile
from dataclasses import dataclass
from pathlib import Path

import structlog

from diff_submitter.core.application.exceptions import (
    AbortedByUser,
    MessageFormatError,
    MessageParseError,
    NoChangesError,
    SelfReviewError,
    UsageError,
)
from diff_submitter.core.application.ports import (
    RelativeCommitPort,
    RepositoryPort,
    ReviewServicePort,
    UserInteractionPort,
)
from diff_submitter.core.application.skills.message.commit_message_parser import (
    CommitMessageParser,
    strip_comment_lines,
)
from diff_submitter.core.application.skills.skill import BaseSkill
from diff_submitter.core.domain.message import CommitCandidate, ReviewMessage
from diff_submitter.core.domain.submission import SubmissionRequest

logger = structlog.get_logger()

TITLE_WIDTH = 64
USER_GUIDE_URI = "http://phabricator.com/docs/phabricator/article/Arcanist_User_Guide.html"


@dataclass(frozen=True)
class ReconcileMessageInput:
    request: SubmissionRequest
    only_diff: bool
    user_phid: str | None


class ReconcileMessageSkill(BaseSkill[ReconcileMessageInput, ReviewMessage | None]):
    def __init__(
        self,
        service: ReviewServicePort,
        parser: CommitMessageParser,
        interaction: UserInteractionPort,
        repository: RepositoryPort | None = None,
        scratch_dir: Path | None = None,
    ) -> None:
        self._service = service
        self._parser = parser
        self._interaction = interaction
        self._repository = repository
        self._scratch_dir = scratch_dir

    async def execute(self, input_data: ReconcileMessageInput) -> ReviewMessage | None:
        request, user_phid = input_data.request, input_data.user_phid

        if request.use_commit_message:
            return await self._from_explicit_commit(request.use_commit_message, user_phid)
        if request.create:
            if request.message_file:
                return await self._from_file(request.message_file, user_phid)
            return await self._from_interactive_template(user_phid)
        if request.update:
            return await self._from_existing_review(request.update)
        if request.is_raw or input_data.only_diff:
            return None
        return await self._from_commit_range(user_phid)

    # ── Entry states ──

    async def _from_explicit_commit(self, revision: str, user_phid: str | None) -> ReviewMessage:
        corpus = await self._require_commit_history().get_commit_message(revision)
        message = await self._parser.parse(corpus)
        self.validate(message, user_phid)
        return message

    async def _from_file(self, path: Path, user_phid: str | None) -> ReviewMessage:
        message = await self._parser.parse(Path(path).read_text(encoding="utf-8"))
        self.validate(message, user_phid)
        return message

    async def _from_interactive_template(self, user_phid: str | None) -> ReviewMessage:
        template = await self._service.get_commit_message(None, edit=True)
        template = f"{template}\n\n# Describe this revision.\n"
        text = strip_comment_lines(self._interaction.edit(template, name="new-commit"))
        try:
            message = await self._parser.parse(text)
            self.validate(message, user_phid)
        except Exception:
            saved = self._save_raw_text(text)
            self._interaction.notify(
                f"\nException while parsing commit message! Message saved to '{saved}'. "
                "Use -F <file> to specify a commit message file.\n"
            )
            raise
        return message

    async def _from_existing_review(self, revision: str) -> ReviewMessage:
        revision_id = normalize_revision_id(revision)
        corpus = await self._service.get_commit_message(revision_id, edit=False)
        message = await self._parser.parse(corpus)
        message.revision_id = revision_id
        return message

    async def _from_commit_range(self, user_phid: str | None) -> ReviewMessage | None:
        repository = self._require_commit_history()
        commits = await repository.get_commit_log()
        if not commits:
            await self._raise_empty_range(repository)

        valid: list[tuple[CommitCandidate, ReviewMessage]] = []
        problems: dict[str, list[str]] = {}
        for commit in commits:
            try:
                valid.append((commit, await self._parser.parse(commit.message)))
            except MessageParseError as exc:
                problems[commit.commit_hash] = exc.problems

        if not valid:
            raise self._format_error(problems)
        if len(valid) == 1:
            blessed = valid[0][1]
        else:
            chosen = self._choose_among(valid)
            if chosen is None:
                return await self._from_interactive_template(user_phid)
            blessed = chosen

        self.validate(blessed, user_phid)
        return blessed

    # ── Validation ──

    def validate(self, message: ReviewMessage, user_phid: str | None) -> None:
        """Freshly authored messages need reviewers, and never the author."""
        reviewers = message.reviewers
        if not reviewers:
            if not self._interaction.confirm(
                "You have not specified any reviewers. Continue anyway?"
            ):
                raise AbortedByUser("Specify reviewers and retry.")
        elif user_phid and user_phid in reviewers:
            raise SelfReviewError("You can not be a reviewer for your own revision.")

    # ── Helpers ──

    def _choose_among(
        self, valid: list[tuple[CommitCandidate, ReviewMessage]]
    ) -> ReviewMessage | None:
        """Block until the user picks one commit by hash prefix, or ``none``."""
        listing = "\n".join(
            f"    {commit.short_hash}  {_shorten(message.title_line, TITLE_WIDTH)}"
            for commit, message in valid
        )
        self._interaction.notify(
            "Changes in the specified commit range include more than one commit with a valid "
            "template commit message. Choose the message you want to use (you can also use "
            f"the -C flag).\n\n{listing}\n    none     Edit a blank template."
        )
        while True:
            choice = self._interaction.prompt("Use which commit message [none]?").strip()
            if choice in ("", "none"):
                return None
            matches = [message for commit, message in valid if commit.commit_hash.startswith(choice)]
            if len(matches) == 1:
                return matches[0]
            logger.info("Commit choice did not match exactly one commit", choice=choice)

    @staticmethod
    def _format_error(problems: dict[str, list[str]]) -> MessageFormatError:
        flat = [problem for commit_problems in problems.values() for problem in commit_problems]
        description = "\n".join(flat)
        if len(problems) > 1:
            return MessageFormatError(
                "All changes between the specified commits have template parsing problems:"
                f"\n\n{description}\n\nIf you only want to create a diff (not a revision), "
                "use --preview to ignore commit messages.",
                flat,
            )
        return MessageFormatError(
            f"Commit message is not properly formatted:\n\n{description}\n\n"
            "You should use the standard git commit template to provide a commit message. "
            "If you only want to create a diff (not a revision), use --preview to ignore "
            "commit messages.\n\nSee this document for instructions on configuring the "
            f"commit template:\n\n    {USER_GUIDE_URI}\n",
            flat,
        )

    @staticmethod
    async def _raise_empty_range(repository: RelativeCommitPort) -> None:
        if not await repository.has_commits():
            raise NoChangesError(
                "This repository doesn't have any commits yet. You need to commit something "
                "before you can diff against it."
            )
        raise NoChangesError(
            "The commit range doesn't include any commits. (Did you diff against the wrong "
            "commit?)"
        )

    def _save_raw_text(self, text: str) -> str:
        handle = tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            prefix="arc-commit-message-",
            suffix=".txt",
            dir=self._scratch_dir,
            delete=False,
        )
        with handle:
            handle.write(text)
        logger.warning("Commit message saved after parse failure", saved_path=handle.name)
        return handle.name

    def _require_commit_history(self) -> RelativeCommitPort:
        if self._repository is None:
            raise UsageError("This operation requires a working copy.")
        if not isinstance(self._repository, RelativeCommitPort):
            raise UsageError(
                f"{self._repository.source_control_system} working copies have no local commits to read messages from."
            )
        return self._repository


def normalize_revision_id(revision: str) -> int:
    """Accept ``123`` or ``D123``."""
    value = revision.strip()
    if value[:1] in ("D", "d"):
        value = value[1:]
    if not value.isdigit():
        raise UsageError(f"Invalid revision id '{revision}'.", context={"revision": revision})
    return int(value)


def _shorten(text: str, width: int) -> str:
    if len(text) <= width:
        return text
    return text[: width - 3].rstrip() + "..."
