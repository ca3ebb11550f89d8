from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "https://api.mixpanel.com"


class MixpanelSettings(BaseSettings):
    """Centralised configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_env: Literal["local", "dev", "prod"] = "local"
    log_level: str = "INFO"

    mixpanel_token: str = Field(..., alias="MIXPANEL_TOKEN")
    mixpanel_api_key: str = Field(default="", alias="MIXPANEL_API_KEY")
    mixpanel_api_secret: str = Field(default="", alias="MIXPANEL_API_SECRET")
    mixpanel_api_url: str = Field(default=DEFAULT_API_URL, alias="MIXPANEL_API_URL")
    mixpanel_timeout: float = Field(default=10.0, alias="MIXPANEL_TIMEOUT")

    mixpanel_mock_port: int = Field(default=8083, alias="MIXPANEL_MOCK_PORT")

    @field_validator("mixpanel_api_url")
    @classmethod
    def default_blank_api_url(cls, value: str) -> str:
        """Fall back to the public endpoint when the variable is set but empty."""
        value = value.strip()
        return value.rstrip("/") if value else DEFAULT_API_URL


@lru_cache(maxsize=1)
def get_settings() -> MixpanelSettings:
    return MixpanelSettings()  # type: ignore[call-arg]
