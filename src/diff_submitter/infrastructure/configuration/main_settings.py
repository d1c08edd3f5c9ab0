from typing import ClassVar

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from diff_submitter.infrastructure.configuration.conduit_settings import ConduitSettings
from diff_submitter.infrastructure.configuration.working_copy_config import WorkingCopyConfigSource


class Settings(BaseSettings):
    """
    Combines all settings.
    Environment values win over the working copy's .arcconfig, which wins over defaults.
    """

    arcconfig_keys: ClassVar[dict[str, str]] = {
        "project_id": "project_id",
        "history.immutable": "history_immutable",
        "encoding": "encoding",
        "lint.command": "lint_command",
        "unit.command": "unit_command",
    }

    conduit: ConduitSettings = Field(default_factory=ConduitSettings)

    project_id: str | None = Field(default=None, description="Project name registered with the review service")
    encoding: str | None = Field(default=None, description="Source encoding when the project does not declare one")
    history_immutable: bool = Field(default=False, description="Never amend local commits")
    lines_of_context: int | None = Field(default=None, ge=0, description="Unset means full file context")
    lint_command: str | None = None
    unit_command: str | None = None
    editor: str | None = Field(default=None, description="Falls back to $VISUAL, $EDITOR, then vi")
    log_level: str = Field(default="WARNING")

    model_config = SettingsConfigDict(
        env_prefix="DIFF_SUBMITTER_",
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
