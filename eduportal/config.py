import os
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    persistence_mode: Literal["database", "legacy"] = Field("database", alias="EDUPORTAL_PERSISTENCE_MODE")
    database_url: Optional[str] = Field(None, alias="EDUPORTAL_DATABASE_URL")
    database_pool_size: int = Field(10, alias="EDUPORTAL_DATABASE_POOL_SIZE")
    database_max_overflow: int = Field(10, alias="EDUPORTAL_DATABASE_MAX_OVERFLOW")
    database_echo: bool = Field(False, alias="EDUPORTAL_DATABASE_ECHO")
    legacy_store_path: str = Field("data/documents.json", alias="EDUPORTAL_LEGACY_STORE_PATH")
    email_backend: Literal["log", "smtp", "sendgrid"] = Field("log", alias="EDUPORTAL_EMAIL_BACKEND")
    mail_from: str = Field("your-verified-sender@example.com", alias="EDUPORTAL_MAIL_FROM")
    sendgrid_api_key: Optional[str] = Field(None, alias="SENDGRID_API_KEY")
    mail_server: str = Field("localhost", alias="EDUPORTAL_MAIL_SERVER")
    mail_port: int = Field(587, alias="EDUPORTAL_MAIL_PORT")
    mail_username: str = Field("", alias="EDUPORTAL_MAIL_USERNAME")
    mail_password: str = Field("", alias="EDUPORTAL_MAIL_PASSWORD")

    class Config:
        env_file = os.getenv("ENV_FILE", ".env")
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    try:
        return Settings()  # type: ignore[arg-type]
    except ValidationError as exc:
        raise RuntimeError(f"Invalid backend configuration: {exc}") from exc
