"""Application settings loaded from environment variables."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_file() -> str | None:
    if os.getenv("PYTEST_CURRENT_TEST"):
        return None
    return ".env"


class Settings(BaseSettings):
    """Soundgate configuration. All values come from environment variables."""

    # HTTP server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5005)
    webroot: str = Field(default="static")

    # Webhooks (delivery is disabled while WEBHOOK is empty)
    webhook: str = Field(default="")
    webhook_cover: str = Field(default="")
    webhook_type: str = Field(default="type")
    webhook_data: str = Field(default="data")
    webhook_header_name: str = Field(default="")
    webhook_header_contents: str = Field(default="")

    # Logging
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(env_file=_env_file(), env_file_encoding="utf-8")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        if os.getenv("PYTEST_CURRENT_TEST"):
            return (init_settings,)
        return (init_settings, env_settings, dotenv_settings, file_secret_settings)

    def webhook_headers(self) -> dict[str, str]:
        """Return the optional custom webhook header as a dict (zero or one pair)."""
        if self.webhook_header_name and self.webhook_header_contents:
            return {self.webhook_header_name: self.webhook_header_contents}
        return {}


settings = Settings()
