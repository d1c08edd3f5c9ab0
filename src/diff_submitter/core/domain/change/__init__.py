from diff_submitter.core.domain.change.entities.change import Change
from diff_submitter.core.domain.change.value_objects.change_type import ChangeKind, FileType
from diff_submitter.core.domain.change.value_objects.hunk import Hunk
from diff_submitter.core.domain.change.value_objects.uploaded_artifact import UploadedArtifact

__all__ = ["Change", "ChangeKind", "FileType", "Hunk", "UploadedArtifact"]
