from abc import ABC, abstractmethod

from diff_submitter.core.domain.submission import RunOutcome, SubmissionRequest


class BaseWorkflow(ABC):
    """Abstract base for deterministic submission pipelines."""

    @abstractmethod
    async def execute(self, request: SubmissionRequest) -> RunOutcome:
        """Run the full pipeline for one request."""
