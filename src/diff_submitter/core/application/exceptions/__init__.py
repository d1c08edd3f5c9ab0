from diff_submitter.core.application.exceptions.submission_exceptions import (
    AbortedBySize,
    AbortedByUser,
    AbortedEncoding,
    AbortedNoMessage,
    AbortedUpload,
    ApplicationError,
    ChangeTooLargeError,
    InconsistentBaseRevision,
    MessageFormatError,
    MessageParseError,
    NoChangesError,
    SelfReviewError,
    UnsupportedVcsError,
    UsageError,
    UserAbort,
    WorkflowExecutionError,
)

__all__ = [
    "AbortedBySize",
    "AbortedByUser",
    "AbortedEncoding",
    "AbortedNoMessage",
    "AbortedUpload",
    "ApplicationError",
    "ChangeTooLargeError",
    "InconsistentBaseRevision",
    "MessageFormatError",
    "MessageParseError",
    "NoChangesError",
    "SelfReviewError",
    "UnsupportedVcsError",
    "UsageError",
    "UserAbort",
    "WorkflowExecutionError",
]
