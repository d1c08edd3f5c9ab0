from typing import ClassVar

from pydantic import Field, SecretStr
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from diff_submitter.infrastructure.configuration.working_copy_config import WorkingCopyConfigSource


class ConduitSettings(BaseSettings):
    """Connection settings for the review service RPC endpoint."""

    arcconfig_keys: ClassVar[dict[str, str]] = {"conduit_uri": "uri"}

    uri: str = Field(default="", description="Base URI of the review service, e.g. https://review.example.com")
    token: SecretStr | None = Field(default=None, description="API token sent with every call")
    timeout_seconds: float = Field(default=30.0, gt=0)
    max_retry_attempts: int = Field(default=3, ge=1)

    def validate_credentials(self) -> None:
        """
        Validates that an endpoint and a token are configured.
        """
        if not self.uri:
            raise ValueError("Conduit settings require 'uri' (DIFF_SUBMITTER_CONDUIT_URI or .arcconfig conduit_uri).")
        if not self.token:
            raise ValueError("Conduit settings require 'token' (DIFF_SUBMITTER_CONDUIT_TOKEN).")

    @property
    def api_root(self) -> str:
        return self.uri.rstrip("/") + "/api/"

    model_config = SettingsConfigDict(
        env_prefix="DIFF_SUBMITTER_CONDUIT_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            WorkingCopyConfigSource(settings_cls),
            file_secret_settings,
        )
