"""Application settings and configuration.

This module defines the configuration options for the Chorus Timeline engine.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Chorus Timeline", alias="APP_NAME")
    debug: bool = Field(default=False, alias="DEBUG")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        alias="LOG_FORMAT",
    )

    # Channel archive visibility used when a channel-deleted event omits the flag
    view_archived_channels: bool = Field(default=False, alias="VIEW_ARCHIVED_CHANNELS")

    # Post metadata handling
    strip_post_metadata: bool = Field(default=True, alias="STRIP_POST_METADATA")
    opengraph_embed_type: str = Field(default="opengraph", alias="OPENGRAPH_EMBED_TYPE")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def effective_log_level(self) -> str:
        """Return the log level respecting the debug override.

        Returns:
            ``"DEBUG"`` when debug mode is enabled, otherwise the configured level
        """
        if self.debug:
            return "DEBUG"
        return self.log_level.upper()


settings = Settings()
