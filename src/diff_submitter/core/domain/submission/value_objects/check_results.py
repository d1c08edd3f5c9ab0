"""Lint and unit-test results as reported by external runners."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class LintResult(StrEnum):
    OKAY = "okay"
    WARNINGS = "warnings"
    ERRORS = "errors"
    SKIP = "skip"


class UnitResult(StrEnum):
    OKAY = "okay"
    FAIL = "fail"
    UNSOUND = "unsound"
    SKIP = "skip"
    POSTPONED = "postponed"


_LINT_STATUS = {
    LintResult.OKAY: "okay",
    LintResult.ERRORS: "fail",
    LintResult.WARNINGS: "warn",
    LintResult.SKIP: "skip",
}

_UNIT_STATUS = {
    UnitResult.OKAY: "okay",
    UnitResult.FAIL: "fail",
    UnitResult.UNSOUND: "warn",
    UnitResult.SKIP: "skip",
    UnitResult.POSTPONED: "postponed",
}


def lint_status(result: LintResult | None) -> str:
    """Collapse a lint result into the status string the review service stores."""
    return _LINT_STATUS.get(result, "none") if result is not None else "none"


def unit_status(result: UnitResult | None) -> str:
    """Collapse a unit result into the status string the review service stores."""
    return _UNIT_STATUS.get(result, "none") if result is not None else "none"


@dataclass(frozen=True, kw_only=True)
class LintFinding:
    path: str
    line: int | None = None
    char: int | None = None
    code: str = ""
    severity: str = "error"
    name: str = ""
    description: str = ""

    def to_dictionary(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "line": self.line,
            "char": self.char,
            "code": self.code,
            "severity": self.severity,
            "name": self.name,
            "description": self.description,
        }


@dataclass(frozen=True, kw_only=True)
class UnitTestResult:
    name: str
    result: str
    userdata: str = ""
    coverage: dict[str, str] | None = None

    def to_dictionary(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "result": self.result,
            "userdata": self.userdata,
            "coverage": self.coverage,
        }


@dataclass(frozen=True, kw_only=True)
class LintReport:
    result: LintResult
    findings: list[LintFinding]


@dataclass(frozen=True, kw_only=True)
class UnitReport:
    result: UnitResult
    tests: list[UnitTestResult]
