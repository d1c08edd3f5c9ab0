from abc import ABC, abstractmethod

from diff_submitter.core.domain.submission import LintReport, UnitReport


class LintRunnerPort(ABC):
    @abstractmethod
    async def run(self, paths: list[str], relative_commit: str | None) -> LintReport | None:
        """Lint ``paths``. ``None`` means no engine is configured or nothing to lint."""


class UnitRunnerPort(ABC):
    @abstractmethod
    async def run(self, paths: list[str], relative_commit: str | None) -> UnitReport | None:
        """Run tests for ``paths``. ``None`` means no engine is configured or nothing to run."""
