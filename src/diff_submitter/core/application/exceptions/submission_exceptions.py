"""Application-layer exception hierarchy for a submission run.

``UsageError`` subclasses are fatal and user-facing. ``UserAbort`` subclasses
mean the user declined a confirmation; the workflow boundary turns them into a
cancelled outcome instead of a crash.
"""

from typing import Any


class ApplicationError(Exception):
    """Base exception for all application-layer errors."""

    def __init__(self, message: str = "", *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = context or {}


class WorkflowExecutionError(ApplicationError):
    """Raised when a collaborator failure stops the submission workflow."""


# ── Usage errors ──


class UsageError(ApplicationError):
    """Fatal, user-facing; retrying without changing input will fail the same way."""


class UnsupportedVcsError(UsageError):
    """The repository binding exposes neither working-copy status nor local commit ranges."""


class InconsistentBaseRevision(UsageError):
    """Changed paths are at different base revisions."""

    def __init__(self, revisions: dict[str, int]) -> None:
        listing = "\n".join(f"    Revision {rev}, {path}" for path, rev in revisions.items())
        super().__init__(
            "Base revisions of changed paths are mismatched. Update all paths to the same "
            f"base revision before creating a diff:\n\n{listing}",
            context={"revisions": dict(revisions)},
        )
        self.revisions = dict(revisions)


class NoChangesError(UsageError):
    """Nothing to diff, or nothing in the commit range."""


class ChangeTooLargeError(UsageError):
    """A single change exceeds the hunk size limit and cannot be reclassified here."""


class SelfReviewError(UsageError):
    """The submitting user listed themselves as a reviewer."""


class MessageParseError(UsageError):
    """A commit message could not be parsed into review fields."""

    def __init__(self, problems: list[str]) -> None:
        super().__init__(
            "Commit message has parse problems: " + "; ".join(problems),
            context={"problems": list(problems)},
        )
        self.problems = list(problems)


class MessageFormatError(UsageError):
    """No commit in the range carries a usable review message."""

    def __init__(self, message: str, problems: list[str]) -> None:
        super().__init__(message, context={"problems": list(problems)})
        self.problems = list(problems)


# ── User aborts ──


class UserAbort(ApplicationError):
    """The user declined a confirmation. Nothing has been submitted."""


class AbortedByUser(UserAbort):
    """Generic decline (externals, reviewers, lint, unit, untracked files)."""


class AbortedBySize(UserAbort):
    """Declined to continue with a very large change set or change."""


class AbortedEncoding(UserAbort):
    """Declined to mark non-UTF-8 files as binary."""


class AbortedUpload(UserAbort):
    """Declined to continue after a binary upload failed."""


class AbortedNoMessage(UserAbort):
    """Refused to provide an update note."""
