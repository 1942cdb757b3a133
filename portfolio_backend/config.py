"""
Configuration and settings for the portfolio backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)
    log_level: str = Field(default="INFO")
    # Comma separated in the environment, e.g. CORS_ALLOW_ORIGINS=a.com,b.com
    cors_allow_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["*"]
    )

    # Database (MySQL expected). DATABASE_URL wins over the DB_* parts.
    database_url: Optional[str] = Field(default=None)
    db_host: Optional[str] = Field(default=None)
    db_port: int = Field(default=3306)
    db_user: Optional[str] = Field(default=None)
    db_password: Optional[str] = Field(default=None)
    db_name: Optional[str] = Field(default=None)

    # Basic auth for write endpoints
    basic_auth_user: Optional[str] = Field(default=None)
    basic_auth_password: Optional[str] = Field(default=None)

    # Webhook notifications on new posts
    webhook_url: Optional[str] = Field(default=None)
    post_url_template: str = Field(
        default="https://estebandev.xyz/blog/posts/{id}"
    )
    notifier_username: str = Field(default="estebandev.xyz")
    notifier_avatar_url: str = Field(default="https://i.imgur.com/AfFp7pu.png")
    notifier_footer_text: str = Field(default="estebandev.xyz/blog")
    notifier_color: int = Field(default=0x2B4F7D)
    notifier_content: str = Field(
        default=(
            "Una nueva publicación se ha subido en "
            "https://estebandev.xyz/blog \n||@here||"
        )
    )

    # Development toggles
    use_in_memory_backends: bool = Field(default=False)

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    def sqlalchemy_url(self) -> Optional[str]:
        """Return the database URL, assembling it from DB_* values if needed."""
        if self.database_url:
            return self.database_url
        if not self.db_host or not self.db_name:
            return None
        url = URL.create(
            "mysql+pymysql",
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )
        return url.render_as_string(hide_password=False)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
