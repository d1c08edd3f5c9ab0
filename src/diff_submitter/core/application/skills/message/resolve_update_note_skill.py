import structlog

from diff_submitter.core.application.exceptions import AbortedNoMessage
from diff_submitter.core.application.ports import RepositoryPort, UserInteractionPort
from diff_submitter.core.application.skills.message.commit_message_parser import (
    strip_comment_lines,
)
from diff_submitter.core.application.skills.skill import BaseSkill
from diff_submitter.core.domain.message import ReviewMessage
from diff_submitter.core.domain.submission import SubmissionRequest

logger = structlog.get_logger()

UPDATE_NOTE_GUIDANCE = "# Enter a brief description of the changes included in this update."


class ResolveUpdateNoteSkill(BaseSkill[SubmissionRequest, str]):
    """Find the note attached to a review update.

    An explicit ``--message`` wins. Otherwise the editor opens, seeded with the
    newest local commit message when it is not a template message (no revision id).
    """

    def __init__(self, interaction: UserInteractionPort, repository: RepositoryPort | None) -> None:
        self._interaction = interaction
        self._repository = repository

    async def execute(self, input_data: SubmissionRequest) -> str:
        if input_data.message and input_data.message.strip():
            return input_data.message

        seed = await self._local_update_message()
        if seed:
            logger.info("Seeding update note with latest local commit message")
        template = f"{seed or ''}\n\n{UPDATE_NOTE_GUIDANCE}\n"
        note = strip_comment_lines(
            self._interaction.edit(template, name="differential-update-comments")
        ).rstrip()
        if not note.strip():
            raise AbortedNoMessage("Aborted: no update message given.")
        return note

    async def _local_update_message(self) -> str | None:
        repository = self._repository
        if repository is None or not repository.supports_relative_local_commits():
            return None
        commits = await repository.get_commit_log()
        if not commits:
            return None
        head = ReviewMessage.from_raw_corpus(commits[0].message)
        if head.revision_id:
            return None
        return head.raw_corpus.strip() or None
