from diff_submitter.core.application.ports.common.exceptions.repository_error import (
    RepositoryError,
)
from diff_submitter.core.application.ports.common.exceptions.review_service_error import (
    ReviewServiceError,
)

__all__ = ["RepositoryError", "ReviewServiceError"]
