import argparse
from pathlib import Path

from diff_submitter.core.application.exceptions import UsageError
from diff_submitter.core.domain.submission import SubmissionRequest

# flag -> flags it cannot be combined with
CONFLICTS: dict[str, tuple[str, ...]] = {
    "create": ("update", "only", "preview", "edit", "raw", "raw_command"),
    "raw": ("edit", "raw_command"),
    "raw_command": ("edit",),
    "only": ("preview", "message", "edit"),
    "update": ("use_commit_message",),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="diff-submit",
        description="Generate a diff of local changes and submit it for code review.",
    )
    parser.add_argument("paths", nargs="*", help="Paths to include, or a commit to diff against")

    message = parser.add_argument_group("revision message")
    message.add_argument("-m", "--message", help="Update note when updating an existing revision")
    message.add_argument("-F", "--message-file", type=Path, help="Read revision information from this file")
    message.add_argument("-C", "--use-commit-message", metavar="COMMIT", help="Read revision information from a specific commit")
    message.add_argument("--edit", action="store_true", help="Edit revision information before updating")
    message.add_argument("--create", action="store_true", help="Always create a new revision")
    message.add_argument("--update", metavar="REVISION", help="Always update a specific revision")

    source = parser.add_argument_group("diff source")
    source.add_argument("--raw", action="store_true", help="Read the diff from stdin")
    source.add_argument("--raw-command", metavar="COMMAND", help="Generate the diff by running a shell command")
    source.add_argument("--less-context", action="store_true", help="Send less surrounding context")
    source.add_argument("--encoding", help="Source encoding to try when content is not UTF-8")
    source.add_argument("--allow-untracked", action="store_true", help="Skip the untracked files check")

    flow = parser.add_argument_group("flow")
    flow.add_argument("--only", action="store_true", help="Only create a diff; skip lint, unit and message")
    flow.add_argument("--preview", action="store_true", help="Create a diff only, without a revision")
    flow.add_argument("--nolint", action="store_true", help="Do not run lint")
    flow.add_argument("--nounit", action="store_true", help="Do not run unit tests")
    flow.add_argument("--no-amend", action="store_true", help="Never amend the local commit message")
    flow.add_argument("--json", dest="json_output", action="store_true", help="Print a machine-readable result")
    return parser


def check_conflicts(args: argparse.Namespace) -> None:
    for flag, others in CONFLICTS.items():
        if not getattr(args, flag):
            continue
        for other in others:
            if getattr(args, other):
                raise UsageError(f"Arguments --{_dashed(flag)} and --{_dashed(other)} are mutually exclusive.")


def request_from_args(args: argparse.Namespace) -> SubmissionRequest:
    check_conflicts(args)
    return SubmissionRequest(
        paths=tuple(args.paths),
        message=args.message,
        message_file=args.message_file,
        use_commit_message=args.use_commit_message,
        edit=args.edit,
        raw=args.raw,
        raw_command=args.raw_command,
        create=args.create,
        update=args.update,
        nounit=args.nounit,
        nolint=args.nolint,
        only=args.only,
        preview=args.preview,
        encoding=args.encoding,
        less_context=args.less_context,
        no_amend=args.no_amend,
        allow_untracked=args.allow_untracked,
        json_output=args.json_output,
    )


def _dashed(name: str) -> str:
    return name.replace("_", "-")
