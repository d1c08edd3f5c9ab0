"""Upload binary payloads and attach the results to their changes."""

import base64
import posixpath

import structlog

from diff_submitter.core.application.exceptions import AbortedUpload
from diff_submitter.core.application.ports import (
    MimeDetectorPort,
    RepositoryPort,
    ReviewServicePort,
    UserInteractionPort,
)
from diff_submitter.core.application.ports.common.exceptions import ReviewServiceError
from diff_submitter.core.application.skills.skill import BaseSkill
from diff_submitter.core.domain.change import Change, UploadedArtifact

logger = structlog.get_logger()


class UploadArtifactsSkill(BaseSkill[list[Change], list[Change]]):
    """Uploads the before and after payload of every binary change.

    Image promotion uses the MIME type of the after payload, so it only
    happens once that upload has been attempted.
    """

    def __init__(
        self,
        service: ReviewServicePort,
        mime_detector: MimeDetectorPort,
        interaction: UserInteractionPort,
        repository: RepositoryPort | None = None,
    ) -> None:
        self._service = service
        self._mime_detector = mime_detector
        self._interaction = interaction
        self._repository = repository

    async def execute(self, input_data: list[Change]) -> list[Change]:
        for change in input_data:
            if not change.is_binary:
                continue
            name = posixpath.basename(change.current_path)

            old_data = await self._read_original(change.old_path or change.current_path)
            change.attach_artifact("old", await self.upload(old_data, name, "old binary"))

            new_data = await self._read_current(change.current_path)
            new_artifact = await self.upload(new_data, name, "new binary")
            change.attach_artifact("new", new_artifact)
            change.promote_to_image_if(new_artifact.mime_type)
        return input_data

    async def upload(self, payload: bytes, display_name: str, description: str) -> UploadedArtifact:
        """Upload one payload. An empty payload means that side does not exist."""
        size = len(payload)
        if not size:
            return UploadedArtifact.missing()

        mime_type = (await self._mime_detector.detect(payload)).strip()
        logger.info(
            "Uploading binary",
            description=description,
            file_name=display_name,
            mime_type=mime_type,
            byte_size=size,
        )
        try:
            artifact_id = await self._service.upload_file(
                base64.b64encode(payload).decode("ascii"), display_name
            )
        except ReviewServiceError as exc:
            logger.warning(
                "Binary upload failed",
                file_name=display_name,
                error_type="ReviewServiceError",
                error_details=str(exc),
            )
            if not self._interaction.confirm(
                f"Failed to upload {description} '{display_name}'. Continue?", default=True
            ):
                raise AbortedUpload(
                    "Aborted due to file upload failure.", context={"file_name": display_name}
                ) from exc
            artifact_id = None
        return UploadedArtifact(artifact_id=artifact_id, mime_type=mime_type, byte_size=size)

    async def _read_original(self, path: str) -> bytes:
        if self._repository is None:
            return b""
        return await self._repository.get_original_file_data(path)

    async def _read_current(self, path: str) -> bytes:
        if self._repository is None:
            return b""
        return await self._repository.get_current_file_data(path)
