"""Lint and unit runners that shell out to project-configured commands.

Lint output is read as ``path:line[:col]: CODE message`` (flake8, ruff,
pylint --output-format=parseable). Unit output is read from pytest's verbose
``node::id PASSED`` lines when present; otherwise the whole run is reported as
a single result.
"""

import re
import shlex
from pathlib import Path

import structlog

from diff_submitter.core.application.ports.check_runner_port import LintRunnerPort, UnitRunnerPort
from diff_submitter.core.domain.submission import (
    LintFinding,
    LintReport,
    LintResult,
    UnitReport,
    UnitResult,
    UnitTestResult,
)
from diff_submitter.infrastructure.common.process.command_runner import CommandResult, run_command

logger = structlog.get_logger()

_LINT_LINE_RE = re.compile(
    r"^(?P<path>[^:\n]+):(?P<line>\d+):(?:(?P<char>\d+):)?\s*(?P<code>[A-Z]+\d+)\s+(?P<description>.*)$",
    re.MULTILINE,
)
_PYTEST_LINE_RE = re.compile(r"^(?P<name>\S+::\S+)\s+(?P<status>PASSED|FAILED|ERROR|SKIPPED|XFAIL|XPASS)", re.MULTILINE)
_PYTEST_RESULTS = {
    "PASSED": "pass",
    "FAILED": "fail",
    "ERROR": "broken",
    "SKIPPED": "skip",
    "XFAIL": "pass",
    "XPASS": "unsound",
}
_USERDATA_LIMIT = 4000


class CommandLintRunner(LintRunnerPort):
    def __init__(self, command: str | None, root: Path | None = None, timeout: float = 600.0) -> None:
        self._command = command
        self._root = root
        self._timeout = timeout

    async def run(self, paths: list[str], relative_commit: str | None) -> LintReport | None:
        if not self._command or not paths:
            return None
        result = await _execute(self._command, paths, self._root, self._timeout)
        findings = [_finding_from_match(match) for match in _LINT_LINE_RE.finditer(result.stdout_text())]
        if not result.ok or any(finding.severity == "error" for finding in findings):
            outcome = LintResult.ERRORS
        elif findings:
            outcome = LintResult.WARNINGS
        else:
            outcome = LintResult.OKAY
        logger.info("Lint command finished", exit_code=result.exit_code, finding_count=len(findings))
        return LintReport(result=outcome, findings=findings)


class CommandUnitRunner(UnitRunnerPort):
    def __init__(self, command: str | None, root: Path | None = None, timeout: float = 1800.0) -> None:
        self._command = command
        self._root = root
        self._timeout = timeout

    async def run(self, paths: list[str], relative_commit: str | None) -> UnitReport | None:
        if not self._command:
            return None
        result = await _execute(self._command, [], self._root, self._timeout)
        output = result.stdout_text()
        tests = [
            UnitTestResult(name=match["name"], result=_PYTEST_RESULTS[match["status"]])
            for match in _PYTEST_LINE_RE.finditer(output)
        ]
        if not tests:
            tests = [
                UnitTestResult(
                    name=self._command,
                    result="pass" if result.ok else "fail",
                    userdata=output[-_USERDATA_LIMIT:],
                )
            ]

        if not result.ok or any(test.result in ("fail", "broken") for test in tests):
            outcome = UnitResult.FAIL
        elif any(test.result == "unsound" for test in tests):
            outcome = UnitResult.UNSOUND
        else:
            outcome = UnitResult.OKAY
        logger.info("Unit command finished", exit_code=result.exit_code, test_count=len(tests))
        return UnitReport(result=outcome, tests=tests)


async def _execute(command: str, paths: list[str], root: Path | None, timeout: float) -> CommandResult:
    return await run_command([*shlex.split(command), *paths], cwd=root, timeout=timeout)


def _finding_from_match(match: re.Match) -> LintFinding:
    code = match["code"]
    return LintFinding(
        path=match["path"],
        line=int(match["line"]),
        char=int(match["char"]) if match["char"] else None,
        code=code,
        severity="warning" if code.startswith(("W", "C")) else "error",
        name=code,
        description=match["description"].strip(),
    )
