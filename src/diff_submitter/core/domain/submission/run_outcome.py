from dataclasses import dataclass, field
from enum import StrEnum


class OutcomeStatus(StrEnum):
    CREATED_DIFF = "created_diff"
    CREATED_REVIEW = "created_review"
    UPDATED_REVIEW = "updated_review"
    CANCELLED = "cancelled"


@dataclass(frozen=True, kw_only=True)
class RunOutcome:
    """Terminal result of a submission run; ``CANCELLED`` is the user-abort variant."""

    status: OutcomeStatus
    diff_id: int | None = None
    diff_uri: str | None = None
    revision_id: int | None = None
    revision_uri: str | None = None
    change_summaries: list[str] = field(default_factory=list)
    reason: str | None = None

    @property
    def is_cancelled(self) -> bool:
        return self.status == OutcomeStatus.CANCELLED

    @property
    def exit_code(self) -> int:
        return 1 if self.is_cancelled else 0

    @classmethod
    def cancelled(cls, reason: str) -> "RunOutcome":
        return cls(status=OutcomeStatus.CANCELLED, reason=reason)
