from dataclasses import dataclass


@dataclass(frozen=True)
class UploadedArtifact:
    """Result of uploading one side of a binary change."""

    artifact_id: str | None
    mime_type: str | None
    byte_size: int

    @classmethod
    def missing(cls) -> "UploadedArtifact":
        return cls(artifact_id=None, mime_type=None, byte_size=0)
