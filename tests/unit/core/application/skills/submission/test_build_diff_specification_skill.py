"""Unit tests: BuildDiffSpecificationSkill."""

import pytest

from diff_submitter.core.application.skills.submission.build_diff_specification_skill import (
    BuildDiffSpecificationInput,
    BuildDiffSpecificationSkill,
)
from diff_submitter.core.domain.change import Change
from diff_submitter.core.domain.message import CommitCandidate

GIT_SVN = "git-svn-id: https://svn.example.com/repo/trunk@{rev} 1111-2222\n"


def _input(**overrides) -> BuildDiffSpecificationInput:
    values = {
        "changes": [Change(current_path="a.py")],
        "lint_status": "okay",
        "unit_status": "skip",
        "author_phid": "PHID-USER-me",
        "project_id": "demo",
    }
    values.update(overrides)
    return BuildDiffSpecificationInput(**values)


@pytest.mark.asyncio
async def test_raw_mode_has_minimal_environment() -> None:
    spec = await BuildDiffSpecificationSkill(None, hostname="buildbox").execute(_input())

    data = spec.to_dictionary()
    assert data["sourceMachine"] == "buildbox"
    assert data["sourceControlSystem"] is None
    assert data["arcanistProject"] == "demo"
    assert data["changes"][0]["currentPath"] == "a.py"


@pytest.mark.asyncio
async def test_working_copy_environment(working_copy_repository) -> None:
    working_copy_repository.get_source_control_base_revision.return_value = "42"
    working_copy_repository.get_source_control_path.return_value = "/trunk"
    working_copy_repository.get_repository_uuid.return_value = "uuid-1"
    working_copy_repository.get_branch_name.return_value = None

    spec = await BuildDiffSpecificationSkill(working_copy_repository, hostname="h").execute(_input())

    env = spec.environment
    assert env.source_control_system == "svn"
    assert env.source_control_base_revision == "42"
    assert env.source_control_path == "/trunk"
    assert env.repository_uuid == "uuid-1"
    assert env.parent_revision_id is None
    assert not hasattr(working_copy_repository, "get_history_log")


@pytest.mark.asyncio
async def test_history_supplies_parent_and_git_svn_base(commit_range_repository) -> None:
    commit_range_repository.get_source_control_base_revision.return_value = "deadbeef"
    commit_range_repository.get_source_control_path.return_value = None
    commit_range_repository.get_repository_uuid.return_value = None
    commit_range_repository.get_branch_name.return_value = "feature"
    commit_range_repository.get_history_log.return_value = [
        CommitCandidate("c3", "Newest\n\nDifferential Revision: D12\n"),
        CommitCandidate("c2", "Older\n\nDifferential Revision: D11\n\n" + GIT_SVN.format(rev=900)),
        CommitCandidate("c1", "Oldest\n\n" + GIT_SVN.format(rev=800)),
    ]

    spec = await BuildDiffSpecificationSkill(commit_range_repository, hostname="h").execute(_input())

    env = spec.environment
    assert env.parent_revision_id == 12
    assert env.source_control_base_revision == "900"
    assert env.source_control_path == "https://svn.example.com/repo/trunk"
    assert env.repository_uuid == "1111-2222"
    assert env.branch == "feature"


@pytest.mark.asyncio
async def test_plain_git_history_keeps_repository_base(commit_range_repository) -> None:
    commit_range_repository.get_source_control_base_revision.return_value = "deadbeef"
    commit_range_repository.get_source_control_path.return_value = None
    commit_range_repository.get_repository_uuid.return_value = None
    commit_range_repository.get_branch_name.return_value = "main"
    commit_range_repository.get_history_log.return_value = [CommitCandidate("c1", "Plain commit")]

    spec = await BuildDiffSpecificationSkill(commit_range_repository, hostname="h").execute(_input())

    assert spec.environment.source_control_base_revision == "deadbeef"
    assert spec.environment.parent_revision_id is None
