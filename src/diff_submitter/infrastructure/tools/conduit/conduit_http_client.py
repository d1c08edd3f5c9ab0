import json
from typing import Any

import httpx

from diff_submitter.core.application.ports.common.exceptions import ReviewServiceError
from diff_submitter.infrastructure.common.retry.retry_policy import RetryPolicy
from diff_submitter.infrastructure.configuration.conduit_settings import ConduitSettings
from diff_submitter.infrastructure.observability import get_logger, redact_dict

logger = get_logger("conduit_http_client")

# Read-only methods; anything else may have been committed server-side before a failure.
RETRYABLE_METHODS = frozenset(
    {
        "user.whoami",
        "differential.getcommitmessage",
        "differential.parsecommitmessage",
        "arcanist.projectinfo",
    }
)


class ConduitHttpClient:
    """JSON-over-HTTP RPC client: ``POST {uri}/api/{method}`` with form-encoded params.

    Every response body is ``{"result": ..., "error_code": ..., "error_info": ...}``.
    Transport failures and 5xx responses are retryable; service errors are not.
    Only read-only methods are retried, so a submission is never sent twice.
    """

    def __init__(
        self,
        settings: ConduitSettings,
        client: httpx.AsyncClient | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self.settings = settings
        self._validate_config()
        self._client = client or httpx.AsyncClient(timeout=settings.timeout_seconds)
        self._retry = retry_policy or RetryPolicy(max_attempts=settings.max_retry_attempts)

    def _validate_config(self) -> None:
        self.settings.validate_credentials()

    async def __aenter__(self) -> "ConduitHttpClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def call(self, method: str, params: dict[str, Any] | None = None) -> Any:
        params = params or {}
        if method not in RETRYABLE_METHODS:
            return await self._call_once(method, params)

        async def attempt() -> Any:
            return await self._call_once(method, params)

        return await self._retry.run(attempt)

    async def _call_once(self, method: str, params: dict[str, Any]) -> Any:
        logger.debug("Calling review service", context_method=method, params=redact_dict(params))
        payload = {**params, "__conduit__": {"token": self._token()}}
        try:
            response = await self._client.post(
                self.settings.api_root + method,
                data={"params": json.dumps(payload), "output": "json", "__conduit__": "1"},
            )
        except httpx.TransportError as exc:
            raise ReviewServiceError(
                method=method, message=f"Transport failure: {exc}", retryable=True
            ) from exc

        if response.status_code >= 400:
            raise ReviewServiceError(
                method=method,
                message=f"HTTP {response.status_code}: {response.text[:200]}",
                retryable=response.status_code >= 500,
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise ReviewServiceError(
                method=method,
                message="Response is not valid JSON",
                status_code=response.status_code,
            ) from exc

        error_code = body.get("error_code")
        if error_code:
            raise ReviewServiceError(
                method=method,
                message=body.get("error_info") or error_code,
                error_code=error_code,
                status_code=response.status_code,
            )
        return body.get("result")

    def _token(self) -> str:
        return self.settings.token.get_secret_value() if self.settings.token else ""
