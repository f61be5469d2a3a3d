# app/core/settings.py
from functools import lru_cache

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
    case_sensitive=False,
)


class Settings(BaseSettings):
    model_config = _ENV_CONFIG

    api_title: str = Field(default="Contact Relay API", alias="API_TITLE")
    cors_origins: str = Field(default="http://localhost:3000", alias="CORS_ORIGINS")
    page_title: str = Field(default="Contact", alias="PAGE_TITLE")


class MailConfigError(RuntimeError):
    def __init__(self, missing):
        self.missing = sorted(missing)
        super().__init__(f"mail transport is not configured; missing {', '.join(self.missing)}")


class MailSettings(BaseSettings):
    """SMTP credentials and the inbox that receives contact messages.

    All four values are required. They are only loaded when a message is
    about to be sent, so the API can boot without them.
    """

    model_config = _ENV_CONFIG

    host: str = Field(min_length=1, alias="EMAIL_HOST")
    user: str = Field(min_length=1, alias="EMAIL_USER")
    password: str = Field(min_length=1, alias="EMAIL_PASS")
    send_to: str = Field(min_length=1, alias="EMAIL_SEND_TO")


@lru_cache
def get_mail_settings() -> MailSettings:
    try:
        return MailSettings()
    except ValidationError as exc:
        aliases = {name: f.alias for name, f in MailSettings.model_fields.items()}
        missing = {
            aliases.get(str(err["loc"][0]), str(err["loc"][0])).upper()
            for err in exc.errors()
        }
        raise MailConfigError(missing) from exc


settings = Settings()
