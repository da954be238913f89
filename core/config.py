from __future__ import annotations

from pathlib import Path
from typing import Annotated, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .inventory import DEFAULT_PRICE_WINDOW, INVENTORY_PATH


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    data_path: Path = Field(default=INVENTORY_PATH, alias="VEHICLE_DATA_PATH")
    price_window: int = Field(default=DEFAULT_PRICE_WINDOW, ge=0, alias="SEARCH_PRICE_WINDOW")
    match_registration_date: bool = Field(default=True, alias="SEARCH_MATCH_REGISTRATION_DATE")
    cors_allow_origins: Annotated[List[str], NoDecode] = Field(default=["*"], alias="CORS_ALLOW_ORIGINS")
    api_base_url: str = Field(default="http://localhost:8000", alias="PUBLIC_API_URL")
    api_timeout_seconds: float = Field(default=10.0, gt=0, alias="API_TIMEOUT_SECONDS")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="text", alias="LOG_FORMAT")

    @field_validator("data_path", mode="before")
    @classmethod
    def _blank_path_is_default(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return INVENTORY_PATH
        return value

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, value):
        if isinstance(value, str):
            value = [o.strip() for o in value.split(",")]
        origins = [o for o in value if o]
        return origins or ["*"]

    @field_validator("api_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


def load_settings() -> Settings:
    return Settings()
