"""Unit tests: NormalizeContentSkill."""

import pytest

from diff_submitter.core.application.exceptions import AbortedEncoding
from diff_submitter.core.application.ports.common.exceptions import ReviewServiceError
from diff_submitter.core.application.skills.changes.normalize_content_skill import (
    UNKNOWN_PROJECT_ERROR,
    NormalizeContentSkill,
)
from diff_submitter.core.domain.change import Change, FileType, Hunk

LATIN1_HUNK = "+café au lait\n".encode("latin-1")


def _change(path: str, *corpora: bytes) -> Change:
    return Change(current_path=path, hunks=[Hunk(corpus=corpus) for corpus in corpora])


class TestEncodingConversion:
    @pytest.mark.asyncio
    async def test_explicit_encoding_converts_without_lookup(self, review_service, interaction) -> None:
        change = _change("menu.txt", LATIN1_HUNK)
        skill = NormalizeContentSkill(review_service, interaction, encoding="latin-1")

        await skill.execute([change])

        assert change.hunks[0].corpus == "+café au lait\n".encode("utf-8")
        assert change.file_type == FileType.TEXT
        review_service.get_project_info.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_project_encoding_is_looked_up_once(self, review_service, interaction) -> None:
        review_service.get_project_info.return_value = {"encoding": "latin-1"}
        changes = [_change("a.txt", LATIN1_HUNK), _change("b.txt", LATIN1_HUNK, LATIN1_HUNK)]
        skill = NormalizeContentSkill(review_service, interaction, project_id="demo")

        await skill.execute(changes)

        review_service.get_project_info.assert_awaited_once_with("demo")
        assert all(hunk.is_valid_utf8() for change in changes for hunk in change.hunks)

    @pytest.mark.asyncio
    async def test_valid_content_never_consults_the_service(self, review_service, interaction) -> None:
        skill = NormalizeContentSkill(review_service, interaction)

        await skill.execute([_change("a.txt", b"+hello\n")])

        review_service.get_project_info.assert_not_awaited()
        assert interaction.confirm_prompts == []


class TestBinaryFallback:
    @pytest.mark.asyncio
    async def test_unknown_project_is_tolerated(self, review_service, interaction) -> None:
        review_service.get_project_info.side_effect = ReviewServiceError(
            method="arcanist.projectinfo", message="no such project", error_code=UNKNOWN_PROJECT_ERROR
        )
        change = _change("a.txt", LATIN1_HUNK)
        skill = NormalizeContentSkill(review_service, interaction, project_id="ghost")

        await skill.execute([change])

        assert change.file_type == FileType.BINARY
        assert interaction.confirm_prompts == ["Do you want to mark this file as binary and continue?"]

    @pytest.mark.asyncio
    async def test_other_service_errors_propagate(self, review_service, interaction) -> None:
        review_service.get_project_info.side_effect = ReviewServiceError(
            method="arcanist.projectinfo", message="boom", error_code="ERR-CONDUIT-CORE"
        )
        skill = NormalizeContentSkill(review_service, interaction)

        with pytest.raises(ReviewServiceError):
            await skill.execute([_change("a.txt", LATIN1_HUNK)])

    @pytest.mark.asyncio
    async def test_one_batch_question_for_several_files(self, review_service, interaction) -> None:
        review_service.get_project_info.return_value = {"encoding": None}
        changes = [_change("a.bin", b"+\x00\xff\n"), _change("b.bin", b"+\x00\xfe\n"), _change("ok.txt", b"+ok\n")]
        skill = NormalizeContentSkill(review_service, interaction)

        await skill.execute(changes)

        assert interaction.confirm_prompts == ["Do you want to mark these files as binary and continue?"]
        assert [change.file_type for change in changes] == [FileType.BINARY, FileType.BINARY, FileType.TEXT]
        assert "a.bin" in interaction.notices[0] and "b.bin" in interaction.notices[0]

    @pytest.mark.asyncio
    async def test_nul_bytes_skip_conversion(self, review_service, interaction) -> None:
        change = _change("image.raw", b"+\x00\xe9\n")
        skill = NormalizeContentSkill(review_service, interaction, encoding="latin-1")

        await skill.execute([change])

        assert change.file_type == FileType.BINARY

    @pytest.mark.asyncio
    async def test_declining_aborts(self, review_service, interaction) -> None:
        interaction.confirms.append(False)
        skill = NormalizeContentSkill(review_service, interaction, encoding="ascii")

        with pytest.raises(AbortedEncoding):
            await skill.execute([_change("a.txt", LATIN1_HUNK)])


class TestIdempotence:
    @pytest.mark.asyncio
    async def test_second_run_changes_nothing(self, review_service, interaction) -> None:
        review_service.get_project_info.return_value = {"encoding": "latin-1"}
        changes = [
            _change("menu.txt", LATIN1_HUNK),
            _change("blob.dat", b"+\x00\xff\n"),
            _change("ok.txt", b"+ok\n"),
        ]
        skill = NormalizeContentSkill(review_service, interaction, project_id="demo")

        await skill.execute(changes)
        first_pass = [(change.file_type, [hunk.corpus for hunk in change.hunks]) for change in changes]
        await skill.execute(changes)

        assert [(change.file_type, [hunk.corpus for hunk in change.hunks]) for change in changes] == first_pass
        assert first_pass == [
            (FileType.TEXT, ["+café au lait\n".encode("utf-8")]),
            (FileType.BINARY, []),
            (FileType.TEXT, [b"+ok\n"]),
        ]
        assert len(interaction.confirm_prompts) == 1
        review_service.get_project_info.assert_awaited_once_with("demo")
