"""Lint and unit test steps that run before anything is submitted."""

from dataclasses import dataclass, field

import structlog

from diff_submitter.core.application.exceptions import AbortedByUser
from diff_submitter.core.application.ports import (
    LintRunnerPort,
    UnitRunnerPort,
    UserInteractionPort,
)
from diff_submitter.core.application.skills.skill import BaseSkill
from diff_submitter.core.domain.submission import (
    LintFinding,
    LintResult,
    SubmissionRequest,
    UnitResult,
    UnitTestResult,
)

logger = structlog.get_logger()


@dataclass(frozen=True)
class RunChecksInput:
    request: SubmissionRequest
    paths: list[str]
    relative_commit: str | None = None


@dataclass(frozen=True)
class ChecksOutcome:
    lint_result: LintResult | None
    unit_result: UnitResult | None
    lint_findings: list[LintFinding] = field(default_factory=list)
    test_results: list[UnitTestResult] = field(default_factory=list)


class RunChecksSkill(BaseSkill[RunChecksInput, ChecksOutcome]):
    def __init__(
        self,
        lint_runner: LintRunnerPort,
        unit_runner: UnitRunnerPort,
        interaction: UserInteractionPort,
    ) -> None:
        self._lint_runner = lint_runner
        self._unit_runner = unit_runner
        self._interaction = interaction

    async def execute(self, input_data: RunChecksInput) -> ChecksOutcome:
        lint_result, findings = await self._run_lint(input_data)
        unit_result, tests = await self._run_unit(input_data)
        return ChecksOutcome(
            lint_result=lint_result,
            unit_result=unit_result,
            lint_findings=findings,
            test_results=tests,
        )

    async def _run_lint(
        self, input_data: RunChecksInput
    ) -> tuple[LintResult | None, list[LintFinding]]:
        request = input_data.request
        if request.nolint or request.only or request.is_raw:
            return LintResult.SKIP, []

        logger.info("Linting", path_count=len(input_data.paths))
        report = await self._lint_runner.run(input_data.paths, input_data.relative_commit)
        if report is None:
            logger.info("No lint engine configured for this project")
            return None, []

        if report.result == LintResult.OKAY:
            logger.info("Lint okay")
        elif report.result == LintResult.WARNINGS:
            self._confirm_or_abort("Lint issued unresolved warnings. Ignore them?")
        elif report.result == LintResult.ERRORS:
            logger.warning("Lint raised errors", finding_count=len(report.findings))
            self._confirm_or_abort("Lint issued unresolved errors! Ignore lint errors?")
        return report.result, list(report.findings)

    async def _run_unit(
        self, input_data: RunChecksInput
    ) -> tuple[UnitResult | None, list[UnitTestResult]]:
        request = input_data.request
        if request.nounit or request.only or request.is_raw:
            return UnitResult.SKIP, []

        logger.info("Running unit tests", path_count=len(input_data.paths))
        report = await self._unit_runner.run(input_data.paths, input_data.relative_commit)
        if report is None:
            logger.info("No unit test engine configured for this project")
            return None, []

        if report.result == UnitResult.OKAY:
            logger.info("Unit tests okay")
        elif report.result == UnitResult.UNSOUND:
            self._confirm_or_abort(
                "Unit test results included failures, but all failing tests are known to be "
                "unsound. Ignore unsound test failures?"
            )
        elif report.result == UnitResult.FAIL:
            logger.warning("Unit testing raised errors", test_count=len(report.tests))
            self._confirm_or_abort("Unit test results include failures! Ignore test failures?")
        return report.result, list(report.tests)

    def _confirm_or_abort(self, prompt: str) -> None:
        if not self._interaction.confirm(prompt):
            raise AbortedByUser(prompt)
