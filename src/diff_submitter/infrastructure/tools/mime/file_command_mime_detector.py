import structlog

from diff_submitter.core.application.ports.mime_detector_port import MimeDetectorPort
from diff_submitter.infrastructure.common.process.command_runner import run_command

logger = structlog.get_logger()

FALLBACK_MIME_TYPE = "application/octet-stream"


class FileCommandMimeDetector(MimeDetectorPort):
    """Sniffs content with ``file -b --mime -`` reading the payload from stdin."""

    def __init__(self, executable: str = "file", timeout: float = 30.0) -> None:
        self._executable = executable
        self._timeout = timeout

    async def detect(self, payload: bytes) -> str:
        try:
            result = await run_command(
                [self._executable, "-b", "--mime", "-"], stdin=payload, timeout=self._timeout
            )
        except (FileNotFoundError, TimeoutError) as exc:
            logger.warning("MIME detection unavailable", error_type=type(exc).__name__, error_details=str(exc))
            return FALLBACK_MIME_TYPE
        if not result.ok:
            return FALLBACK_MIME_TYPE
        mime_type = result.stdout_text().split(";", 1)[0].strip()
        return mime_type or FALLBACK_MIME_TYPE
