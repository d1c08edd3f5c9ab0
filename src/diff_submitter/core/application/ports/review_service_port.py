from abc import ABC, abstractmethod
from typing import Any


class ReviewServicePort(ABC):
    """Synchronous request/response RPC surface of the remote review service.

    Implementations raise ``ReviewServiceError`` on failure.
    """

    @abstractmethod
    async def whoami(self) -> dict[str, Any]:
        """Return the authenticated user (``phid``, ``userName``)."""

    @abstractmethod
    async def create_diff(self, spec: dict[str, Any]) -> dict[str, Any]:
        """Create a diff. Returns ``{"diffid": int, "uri": str}``."""

    @abstractmethod
    async def get_commit_message(
        self,
        revision_id: int | None,
        edit: bool = False,
        fields: dict[str, Any] | None = None,
    ) -> str:
        """Return the canonical message template for a revision (or a blank one)."""

    @abstractmethod
    async def parse_commit_message(self, corpus: str) -> dict[str, Any]:
        """Parse a message. Returns ``{"fields": {...}, "errors": [...]}``."""

    @abstractmethod
    async def create_revision(
        self, diff_id: int, fields: dict[str, Any], user_phid: str | None
    ) -> dict[str, Any]:
        """Returns ``{"revisionid": int, "uri": str}``."""

    @abstractmethod
    async def update_revision(
        self, revision_id: int, diff_id: int, fields: dict[str, Any], message: str
    ) -> dict[str, Any]:
        """Returns ``{"revisionid": int, "uri": str}``."""

    @abstractmethod
    async def set_diff_property(self, diff_id: int, name: str, data: str) -> None: ...

    @abstractmethod
    async def upload_file(self, data_base64: str, name: str) -> str:
        """Upload a base64 payload. Returns the artifact identifier."""

    @abstractmethod
    async def get_project_info(self, name: str | None) -> dict[str, Any]:
        """Project metadata, including the ``encoding`` hint."""
