from diff_submitter.core.application.ports.check_runner_port import LintRunnerPort, UnitRunnerPort
from diff_submitter.core.application.ports.diff_parser_port import DiffParserPort
from diff_submitter.core.application.ports.mime_detector_port import MimeDetectorPort
from diff_submitter.core.application.ports.raw_diff_source_port import RawDiffSourcePort
from diff_submitter.core.application.ports.repository_port import (
    PathInfo,
    RelativeCommitPort,
    RepositoryPort,
    WorkingCopyStatusPort,
)
from diff_submitter.core.application.ports.review_service_port import ReviewServicePort
from diff_submitter.core.application.ports.user_interaction_port import UserInteractionPort

__all__ = [
    "DiffParserPort",
    "LintRunnerPort",
    "MimeDetectorPort",
    "PathInfo",
    "RawDiffSourcePort",
    "RelativeCommitPort",
    "RepositoryPort",
    "ReviewServicePort",
    "UnitRunnerPort",
    "UserInteractionPort",
    "WorkingCopyStatusPort",
]
