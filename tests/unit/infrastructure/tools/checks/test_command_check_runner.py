import pytest

from diff_submitter.core.domain.submission import LintResult, UnitResult
from diff_submitter.infrastructure.common.process.command_runner import CommandResult
from diff_submitter.infrastructure.tools.checks.command_check_runner import (
    CommandLintRunner,
    CommandUnitRunner,
)

RUNNER_MODULE = "diff_submitter.infrastructure.tools.checks.command_check_runner.run_command"


@pytest.fixture
def fake_command(monkeypatch):
    """Replaces process execution; returns the list of argv the runners asked for."""
    calls: list[list[str]] = []
    outputs: list[CommandResult] = []

    async def fake_run_command(argv, **kwargs):
        calls.append(list(argv))
        return outputs.pop(0)

    monkeypatch.setattr(RUNNER_MODULE, fake_run_command)

    def respond(stdout: str, exit_code: int = 0) -> list[list[str]]:
        outputs.append(CommandResult("cmd", exit_code, stdout.encode(), b""))
        return calls

    return respond


# ── Lint ──


class TestCommandLintRunner:
    @pytest.mark.asyncio
    async def test_unconfigured_runner_reports_nothing(self):
        assert await CommandLintRunner(None).run(["a.py"], None) is None

    @pytest.mark.asyncio
    async def test_no_paths_reports_nothing(self):
        assert await CommandLintRunner("ruff check").run([], None) is None

    @pytest.mark.asyncio
    async def test_clean_run_is_okay(self, fake_command):
        calls = fake_command("")

        report = await CommandLintRunner("ruff check --quiet").run(["a.py", "b.py"], "abc")

        assert report.result == LintResult.OKAY
        assert calls == [["ruff", "check", "--quiet", "a.py", "b.py"]]

    @pytest.mark.asyncio
    async def test_warning_codes_only_yield_warnings(self, fake_command):
        fake_command("a.py:3:1: W291 trailing whitespace\na.py:9: C901 too complex\n")

        report = await CommandLintRunner("flake8").run(["a.py"], None)

        assert report.result == LintResult.WARNINGS
        first, second = report.findings
        assert (first.path, first.line, first.char, first.code, first.severity) == ("a.py", 3, 1, "W291", "warning")
        assert second.char is None
        assert second.description == "too complex"

    @pytest.mark.asyncio
    async def test_error_code_yields_errors(self, fake_command):
        fake_command("a.py:1:1: E999 SyntaxError\n", exit_code=1)

        report = await CommandLintRunner("flake8").run(["a.py"], None)

        assert report.result == LintResult.ERRORS
        assert report.findings[0].severity == "error"

    @pytest.mark.asyncio
    async def test_failing_exit_without_findings_is_an_error(self, fake_command):
        fake_command("crashed", exit_code=2)

        report = await CommandLintRunner("flake8").run(["a.py"], None)

        assert report.result == LintResult.ERRORS
        assert report.findings == []


# ── Unit ──


class TestCommandUnitRunner:
    @pytest.mark.asyncio
    async def test_unconfigured_runner_reports_nothing(self):
        assert await CommandUnitRunner(None).run(["a.py"], None) is None

    @pytest.mark.asyncio
    async def test_pytest_verbose_lines_become_results(self, fake_command):
        calls = fake_command(
            "tests/test_a.py::test_one PASSED  [ 50%]\ntests/test_a.py::test_two SKIPPED [100%]\n"
        )

        report = await CommandUnitRunner("pytest -v").run(["a.py"], None)

        assert calls == [["pytest", "-v"]]
        assert report.result == UnitResult.OKAY
        assert [(t.name, t.result) for t in report.tests] == [
            ("tests/test_a.py::test_one", "pass"),
            ("tests/test_a.py::test_two", "skip"),
        ]

    @pytest.mark.asyncio
    async def test_failed_test_fails_the_run(self, fake_command):
        fake_command("tests/test_a.py::test_one FAILED\n", exit_code=1)

        report = await CommandUnitRunner("pytest -v").run([], None)

        assert report.result == UnitResult.FAIL

    @pytest.mark.asyncio
    async def test_xpass_is_unsound(self, fake_command):
        fake_command("tests/test_a.py::test_flaky XPASS\n")

        report = await CommandUnitRunner("pytest -v").run([], None)

        assert report.result == UnitResult.UNSOUND

    @pytest.mark.asyncio
    async def test_unstructured_output_is_one_aggregate_result(self, fake_command):
        fake_command("all good\n")

        report = await CommandUnitRunner("make test").run([], None)

        [test] = report.tests
        assert test.name == "make test"
        assert test.result == "pass"
        assert test.userdata == "all good\n"
        assert report.result == UnitResult.OKAY
