from diff_submitter.core.domain.submission.run_outcome import OutcomeStatus, RunOutcome
from diff_submitter.core.domain.submission.submission_request import SubmissionRequest
from diff_submitter.core.domain.submission.submission_spec import EnvironmentFields, SubmissionSpec
from diff_submitter.core.domain.submission.value_objects.check_results import (
    LintFinding,
    LintReport,
    LintResult,
    UnitReport,
    UnitResult,
    UnitTestResult,
    lint_status,
    unit_status,
)

__all__ = [
    "EnvironmentFields",
    "LintFinding",
    "LintReport",
    "LintResult",
    "OutcomeStatus",
    "RunOutcome",
    "SubmissionRequest",
    "SubmissionSpec",
    "UnitReport",
    "UnitResult",
    "UnitTestResult",
    "lint_status",
    "unit_status",
]
