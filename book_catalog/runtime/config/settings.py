from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentVariables(BaseSettings):
    """Process-level values loaded from environment variables and .env files.

    These decide *where* the configuration comes from; everything else is
    read from config.yaml.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    config_file: Path = Field(
        default=Path("config.yaml"), validation_alias="BOOK_CATALOG_CONFIG"
    )
