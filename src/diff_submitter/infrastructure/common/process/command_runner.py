import asyncio
from dataclasses import dataclass
from pathlib import Path

import structlog

logger = structlog.get_logger()


@dataclass(frozen=True)
class CommandResult:
    command: str
    exit_code: int
    stdout: bytes
    stderr: bytes

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def stdout_text(self) -> str:
        return self.stdout.decode("utf-8", errors="replace")

    def stderr_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace").strip()


async def run_command(
    argv: list[str],
    *,
    cwd: Path | None = None,
    stdin: bytes | None = None,
    timeout: float | None = None,
) -> CommandResult:
    """Run an executable to completion and capture its output.

    Raises ``FileNotFoundError`` when the executable is missing and
    ``TimeoutError`` when ``timeout`` elapses (the process is killed first).
    """
    logger.debug("Running command", command=argv[0], arg_count=len(argv) - 1)
    proc = await asyncio.create_subprocess_exec(
        *argv,
        cwd=cwd,
        stdin=asyncio.subprocess.PIPE if stdin is not None else asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    return await _collect(argv[0], proc, stdin, timeout)


async def run_shell(
    command: str, *, cwd: Path | None = None, timeout: float | None = None
) -> CommandResult:
    """Run a user-supplied shell command line."""
    logger.debug("Running shell command", command=command)
    proc = await asyncio.create_subprocess_shell(
        command,
        cwd=cwd,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    return await _collect(command, proc, None, timeout)


async def _collect(
    command: str,
    proc: asyncio.subprocess.Process,
    stdin: bytes | None,
    timeout: float | None,
) -> CommandResult:
    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(stdin), timeout=timeout)
    except TimeoutError:
        proc.kill()
        await proc.wait()
        raise
    return CommandResult(command, proc.returncode or 0, stdout, stderr)
