from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, kw_only=True)
class SubmissionRequest:
    """Caller intent for one submission run, as collected from the command line."""

    paths: tuple[str, ...] = ()
    message: str | None = None
    message_file: Path | None = None
    use_commit_message: str | None = None
    edit: bool = False
    raw: bool = False
    raw_command: str | None = None
    create: bool = False
    update: str | None = None
    nounit: bool = False
    nolint: bool = False
    only: bool = False
    preview: bool = False
    encoding: str | None = None
    less_context: bool = False
    no_amend: bool = False
    allow_untracked: bool = False
    json_output: bool = False

    @property
    def is_raw(self) -> bool:
        return self.raw or bool(self.raw_command)
