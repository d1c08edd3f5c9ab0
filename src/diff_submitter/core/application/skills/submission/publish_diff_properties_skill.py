import json
from dataclasses import dataclass, field
from typing import Any

import structlog

from diff_submitter.core.application.ports import ReviewServicePort
from diff_submitter.core.application.skills.skill import BaseSkill
from diff_submitter.core.domain.submission import LintFinding, UnitTestResult

logger = structlog.get_logger()

LINT_PROPERTY = "arc:lint"
UNIT_PROPERTY = "arc:unit"
LOCAL_COMMITS_PROPERTY = "local:commits"


@dataclass(frozen=True)
class PublishDiffPropertiesInput:
    diff_id: int
    lint_findings: list[LintFinding] = field(default_factory=list)
    test_results: list[UnitTestResult] = field(default_factory=list)
    local_commits: list[dict[str, Any]] = field(default_factory=list)


class PublishDiffPropertiesSkill(BaseSkill[PublishDiffPropertiesInput, list[str]]):
    """Persists lint findings, test results and local commits as JSON diff properties.

    Empty collections are skipped. Returns the names of the properties written.
    """

    def __init__(self, service: ReviewServicePort) -> None:
        self._service = service

    async def execute(self, input_data: PublishDiffPropertiesInput) -> list[str]:
        properties = {
            LINT_PROPERTY: [finding.to_dictionary() for finding in input_data.lint_findings],
            UNIT_PROPERTY: [test.to_dictionary() for test in input_data.test_results],
            LOCAL_COMMITS_PROPERTY: list(input_data.local_commits),
        }
        written: list[str] = []
        for name, data in properties.items():
            if not data:
                continue
            await self._service.set_diff_property(input_data.diff_id, name, json.dumps(data))
            written.append(name)
        logger.info("Diff properties updated", diff_id=input_data.diff_id, properties=written)
        return written
