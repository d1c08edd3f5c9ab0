import pytest

from diff_submitter.infrastructure.common.process.command_runner import CommandResult
from diff_submitter.infrastructure.tools.mime.file_command_mime_detector import (
    FALLBACK_MIME_TYPE,
    FileCommandMimeDetector,
)

RUNNER_MODULE = "diff_submitter.infrastructure.tools.mime.file_command_mime_detector.run_command"


class TestFileCommandMimeDetector:
    @pytest.mark.asyncio
    async def test_strips_charset_suffix(self, monkeypatch):
        async def fake_run_command(argv, **kwargs):
            assert argv == ["file", "-b", "--mime", "-"]
            assert kwargs["stdin"] == b"\x89PNG"
            return CommandResult("file", 0, b"image/png; charset=binary\n", b"")

        monkeypatch.setattr(RUNNER_MODULE, fake_run_command)

        assert await FileCommandMimeDetector().detect(b"\x89PNG") == "image/png"

    @pytest.mark.asyncio
    async def test_missing_executable_falls_back(self, monkeypatch):
        async def fake_run_command(argv, **kwargs):
            raise FileNotFoundError(argv[0])

        monkeypatch.setattr(RUNNER_MODULE, fake_run_command)

        assert await FileCommandMimeDetector().detect(b"data") == FALLBACK_MIME_TYPE

    @pytest.mark.asyncio
    async def test_failed_detection_falls_back(self, monkeypatch):
        async def fake_run_command(argv, **kwargs):
            return CommandResult("file", 1, b"", b"error")

        monkeypatch.setattr(RUNNER_MODULE, fake_run_command)

        assert await FileCommandMimeDetector().detect(b"data") == FALLBACK_MIME_TYPE
