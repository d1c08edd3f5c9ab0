from pathlib import Path

from diff_submitter.core.application.ports.common.exceptions import RepositoryError
from diff_submitter.infrastructure.common.process.command_runner import CommandResult, run_command


class GitCommandRunner:
    """Runs ``git`` inside one working copy and turns failures into ``RepositoryError``."""

    def __init__(self, root: Path, executable: str = "git", timeout: float = 120.0) -> None:
        self.root = root
        self._executable = executable
        self._timeout = timeout

    async def run(self, *args: str, stdin: bytes | None = None, check: bool = True) -> CommandResult:
        command = f"git {args[0]}" if args else "git"
        try:
            result = await run_command(
                [self._executable, *args], cwd=self.root, stdin=stdin, timeout=self._timeout
            )
        except FileNotFoundError as exc:
            raise RepositoryError(command, "git executable not found") from exc
        except TimeoutError as exc:
            raise RepositoryError(command, f"timed out after {self._timeout}s") from exc
        if check and not result.ok:
            raise RepositoryError(command, result.stderr_text() or "command failed", result.exit_code)
        return result

    async def text(self, *args: str) -> str:
        return (await self.run(*args)).stdout_text().strip()

    @classmethod
    async def discover(cls, start: Path) -> "GitCommandRunner":
        """Locate the working-copy root containing ``start``."""
        locator = cls(start)
        root = await locator.text("rev-parse", "--show-toplevel")
        return cls(Path(root))
