from collections import deque
from dataclasses import dataclass, field
from unittest.mock import AsyncMock, MagicMock, create_autospec

import pytest

from diff_submitter.core.application.ports import (
    RelativeCommitPort,
    ReviewServicePort,
    UserInteractionPort,
    WorkingCopyStatusPort,
)
from diff_submitter.infrastructure.configuration.conduit_settings import ConduitSettings
from diff_submitter.infrastructure.configuration.main_settings import Settings


@dataclass
class ScriptedUserInteraction(UserInteractionPort):
    """Answers prompts from pre-loaded queues and records everything it was asked.

    An exhausted ``confirms`` queue answers with the prompt's default.
    """

    confirms: deque = field(default_factory=deque)
    edits: deque = field(default_factory=deque)
    answers: deque = field(default_factory=deque)
    confirm_prompts: list[str] = field(default_factory=list)
    edited_texts: list[tuple[str, str]] = field(default_factory=list)
    prompts: list[str] = field(default_factory=list)
    notices: list[str] = field(default_factory=list)

    def confirm(self, prompt: str, default: bool = False) -> bool:
        self.confirm_prompts.append(prompt)
        return self.confirms.popleft() if self.confirms else default

    def edit(self, text: str, name: str) -> str:
        self.edited_texts.append((name, text))
        return self.edits.popleft() if self.edits else text

    def prompt(self, question: str) -> str:
        self.prompts.append(question)
        return self.answers.popleft() if self.answers else ""

    def notify(self, text: str) -> None:
        self.notices.append(text)


@pytest.fixture
def interaction() -> ScriptedUserInteraction:
    return ScriptedUserInteraction()


@pytest.fixture
def settings(tmp_path, monkeypatch) -> Settings:
    monkeypatch.chdir(tmp_path)
    return Settings(
        conduit=ConduitSettings(uri="https://review.example.com", token="cli-testtoken", max_retry_attempts=1),
        project_id="demo",
    )


def _make_repository(*, working_copy: bool) -> MagicMock:
    port = WorkingCopyStatusPort if working_copy else RelativeCommitPort
    repository = create_autospec(port, instance=True)
    repository.source_control_system = "svn" if working_copy else "git"
    repository.supports_working_copy_status.return_value = working_copy
    repository.supports_relative_local_commits.return_value = not working_copy
    repository.supports_amend.return_value = not working_copy
    repository.get_path.return_value = "/work/project"
    repository.get_untracked_paths.return_value = []
    repository.get_local_commit_information.return_value = []
    if not working_copy:
        repository.get_relative_commit.return_value = "abc123"
        repository.get_history_log.return_value = []
    return repository


@pytest.fixture
def working_copy_repository() -> MagicMock:
    """Repository binding with the unordered working-copy status model."""
    return _make_repository(working_copy=True)


@pytest.fixture
def commit_range_repository() -> MagicMock:
    """Repository binding with the linear relative-commit model."""
    return _make_repository(working_copy=False)


@pytest.fixture
def review_service() -> AsyncMock:
    return create_autospec(ReviewServicePort, instance=True)
