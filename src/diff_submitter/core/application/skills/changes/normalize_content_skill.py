"""Make every text hunk valid UTF-8, or reclassify its change as binary."""

import structlog

from diff_submitter.core.application.exceptions import AbortedEncoding
from diff_submitter.core.application.ports import ReviewServicePort, UserInteractionPort
from diff_submitter.core.application.ports.common.exceptions import ReviewServiceError
from diff_submitter.core.application.skills.skill import BaseSkill
from diff_submitter.core.domain.change import Change, Hunk

logger = structlog.get_logger()

UNKNOWN_PROJECT_ERROR = "ERR-BAD-ARCANIST-PROJECT"


class NormalizeContentSkill(BaseSkill[list[Change], list[Change]]):
    """Re-encodes non-UTF-8 hunks when a source encoding is known.

    Anything that still is not valid UTF-8 is collected and the user decides
    once, for the whole batch, whether those files become binary.
    """

    def __init__(
        self,
        service: ReviewServicePort,
        interaction: UserInteractionPort,
        encoding: str | None = None,
        project_id: str | None = None,
    ) -> None:
        self._service = service
        self._interaction = interaction
        self._encoding = encoding
        self._project_id = project_id

    async def execute(self, input_data: list[Change]) -> list[Change]:
        encoding = self._encoding
        encoding_resolved = bool(encoding)
        problems: list[Change] = []

        for change in input_data:
            for hunk in change.hunks:
                if hunk.is_valid_utf8():
                    continue
                if not hunk.looks_binary():
                    if not encoding_resolved:
                        encoding = await self._lookup_project_encoding()
                        encoding_resolved = True
                    if encoding and _convert_hunk(hunk, encoding):
                        logger.info(
                            "Converted hunk to UTF-8",
                            path=change.current_path,
                            source_encoding=encoding,
                        )
                        continue
                problems.append(change)
                break

        if problems:
            self._confirm_binary_conversion(problems)
        return input_data

    async def _lookup_project_encoding(self) -> str | None:
        """Ask the review service for the project's declared encoding, once per run."""
        try:
            project_info = await self._service.get_project_info(self._project_id)
        except ReviewServiceError as exc:
            if exc.error_code != UNKNOWN_PROJECT_ERROR:
                raise
            logger.warning(
                "Lookup of encoding in project failed",
                project_id=self._project_id,
                error_code=exc.error_code,
                error_details=exc.message,
            )
            return None
        return project_info.get("encoding") or None

    def _confirm_binary_conversion(self, problems: list[Change]) -> None:
        if len(problems) == 1:
            warning = (
                "This diff includes a file which is not valid UTF-8 (it has invalid byte "
                "sequences). You can either stop this workflow and fix it, or continue. If "
                "you continue, this file will be marked as binary.\n\n    AFFECTED FILE\n"
            )
            confirm = "Do you want to mark this file as binary and continue?"
        else:
            warning = (
                "This diff includes files which are not valid UTF-8 (they contain invalid "
                "byte sequences). You can either stop this workflow and fix these files, or "
                "continue. If you continue, these files will be marked as binary.\n\n"
                "    AFFECTED FILES\n"
            )
            confirm = "Do you want to mark these files as binary and continue?"

        paths = [change.current_path for change in problems]
        logger.warning("Invalid content encoding (non-UTF-8)", paths=paths)
        self._interaction.notify(warning + "\n".join(f"    {path}" for path in paths))
        if not self._interaction.confirm(confirm, default=True):
            raise AbortedEncoding("Aborted workflow to fix UTF-8.", context={"paths": paths})
        for change in problems:
            change.convert_to_binary()


def _convert_hunk(hunk: Hunk, encoding: str) -> bool:
    """Rewrite the hunk corpus as UTF-8 when it decodes cleanly from ``encoding``."""
    try:
        converted = hunk.corpus.decode(encoding).encode("utf-8")
    except (UnicodeDecodeError, LookupError):
        return False
    hunk.corpus = converted
    return hunk.is_valid_utf8()
