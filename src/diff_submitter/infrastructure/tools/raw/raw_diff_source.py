import sys
from typing import BinaryIO

from diff_submitter.core.application.ports.common.exceptions import RepositoryError
from diff_submitter.core.application.ports.raw_diff_source_port import RawDiffSourcePort
from diff_submitter.infrastructure.common.process.command_runner import run_shell


class StdinDiffSource(RawDiffSourcePort):
    """Reads a complete diff from standard input (``--raw``)."""

    def __init__(self, stream: BinaryIO | None = None) -> None:
        self._stream = stream or sys.stdin.buffer

    async def read_diff(self) -> bytes:
        return self._stream.read()


class CommandDiffSource(RawDiffSourcePort):
    """Runs a shell command and uses its stdout as the diff (``--raw-command``)."""

    def __init__(self, command: str) -> None:
        self._command = command

    async def read_diff(self) -> bytes:
        result = await run_shell(self._command)
        if not result.ok:
            raise RepositoryError(self._command, result.stderr_text() or "command failed", result.exit_code)
        return result.stdout
