from diff_submitter.core.domain.message.review_message import (
    REVIEWERS_FIELD,
    SYNCED_FIELDS,
    ReviewMessage,
)
from diff_submitter.core.domain.message.value_objects.commit_candidate import CommitCandidate

__all__ = ["REVIEWERS_FIELD", "SYNCED_FIELDS", "CommitCandidate", "ReviewMessage"]
