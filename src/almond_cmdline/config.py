"""Configuration management for almond-cmdline."""

from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from almond_cmdline.engine import ConversationOptions
from almond_cmdline.logging_utils import LogProfile

DEFAULT_SEMPRE_URL = "https://almond-nl.stanford.edu"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="ALMOND_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Conversation
    sempre_url: str = Field(
        default=DEFAULT_SEMPRE_URL,
        validation_alias=AliasChoices("SEMPRE_URL", "ALMOND_SEMPRE_URL"),
        description="Semantic parsing server used by the conversation",
    )
    debug: bool = Field(default=False, description="Enable conversation debugging output")
    show_welcome: bool = Field(default=True, description="Show the welcome message on start")

    # Plugins
    plugins: str = Field(default="", description="Comma separated plugin modules to register")

    # Logging
    log_level: str = Field(default="WARNING", description="Log level")
    log_profile: LogProfile = Field(default=LogProfile.CHAT, description="Log format: chat or default")

    def plugin_modules(self) -> list[str]:
        return [name.strip() for name in self.plugins.split(",") if name.strip()]

    def conversation_options(self) -> ConversationOptions:
        return ConversationOptions(
            sempre_url=self.sempre_url,
            debug=self.debug,
            show_welcome=self.show_welcome,
        )


def load_settings(**overrides: object) -> Settings:
    """Load settings from the environment and apply explicit overrides.

    Overrides whose value is ``None`` are ignored so that unset command-line
    options fall back to the environment.
    """

    settings = Settings()
    updates = {key: value for key, value in overrides.items() if value is not None}
    if updates:
        settings = settings.model_copy(update=updates)
    return settings
