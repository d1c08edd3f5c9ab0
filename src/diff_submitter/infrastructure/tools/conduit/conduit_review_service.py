from typing import Any

from diff_submitter.core.application.ports.review_service_port import ReviewServicePort
from diff_submitter.infrastructure.tools.conduit.conduit_http_client import ConduitHttpClient


class ConduitReviewService(ReviewServicePort):
    """Maps review-service operations onto named RPC methods."""

    def __init__(self, client: ConduitHttpClient) -> None:
        self._client = client

    async def whoami(self) -> dict[str, Any]:
        return await self._client.call("user.whoami")

    async def create_diff(self, spec: dict[str, Any]) -> dict[str, Any]:
        return await self._client.call("differential.creatediff", spec)

    async def get_commit_message(
        self,
        revision_id: int | None,
        edit: bool = False,
        fields: dict[str, Any] | None = None,
    ) -> str:
        params: dict[str, Any] = {"revision_id": revision_id, "edit": edit}
        if fields is not None:
            params["fields"] = fields
        return await self._client.call("differential.getcommitmessage", params)

    async def parse_commit_message(self, corpus: str) -> dict[str, Any]:
        result = await self._client.call("differential.parsecommitmessage", {"corpus": corpus})
        return {"fields": result.get("fields") or {}, "errors": result.get("errors") or []}

    async def create_revision(
        self, diff_id: int, fields: dict[str, Any], user_phid: str | None
    ) -> dict[str, Any]:
        return await self._client.call(
            "differential.createrevision",
            {"diffid": diff_id, "fields": fields, "user": user_phid},
        )

    async def update_revision(
        self, revision_id: int, diff_id: int, fields: dict[str, Any], message: str
    ) -> dict[str, Any]:
        return await self._client.call(
            "differential.updaterevision",
            {"id": revision_id, "diffid": diff_id, "fields": fields, "message": message},
        )

    async def set_diff_property(self, diff_id: int, name: str, data: str) -> None:
        await self._client.call(
            "differential.setdiffproperty", {"diff_id": diff_id, "name": name, "data": data}
        )

    async def upload_file(self, data_base64: str, name: str) -> str:
        return await self._client.call("file.upload", {"data_base64": data_base64, "name": name})

    async def get_project_info(self, name: str | None) -> dict[str, Any]:
        return await self._client.call("arcanist.projectinfo", {"name": name})
