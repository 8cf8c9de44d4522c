from __future__ import annotations

from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def _validate_log_level(value: str) -> None:
    v = (value or "").strip().upper()
    if v not in _LOG_LEVELS:
        raise RuntimeError(f"LOG_LEVEL must be one of: {', '.join(sorted(_LOG_LEVELS))}")


def _validate_port(value: int) -> None:
    if value < 1 or value > 65535:
        raise RuntimeError("PORT must be between 1 and 65535.")


class Settings(BaseSettings):
    """
    Bot settings.

    Rules:
    - Read once from the environment (or .env) at import time
    - Fail fast on invalid configuration via validate()
    - The Discord token is the only required value
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Discord
    discord_token: str = Field(default="", alias="DISCORD_TOKEN")
    discord_guild_id: Optional[int] = Field(default=None, alias="DISCORD_GUILD_ID")

    # If True, sync slash commands to a single guild (fast iteration). Requires DISCORD_GUILD_ID.
    discord_sync_guild_only: bool = Field(default=False, alias="DISCORD_SYNC_GUILD_ONLY")

    # Keep-alive web server
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3000, alias="PORT")

    @field_validator("log_level", mode="before")
    @classmethod
    def _norm_log_level(cls, v: Any) -> str:
        s = ("" if v is None else str(v)).strip().upper()
        return s or "INFO"

    @field_validator("discord_token", mode="before")
    @classmethod
    def _norm_token(cls, v: Any) -> str:
        return ("" if v is None else str(v)).strip()

    @field_validator("discord_guild_id", mode="before")
    @classmethod
    def _norm_guild_id(cls, v: Any) -> Any:
        if v is None:
            return None
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("host", mode="before")
    @classmethod
    def _norm_host(cls, v: Any) -> str:
        s = ("" if v is None else str(v)).strip()
        return s or "0.0.0.0"

    def validate_runtime(self) -> None:
        """
        Strict validation for boot safety.
        """
        if not self.discord_token:
            raise RuntimeError("DISCORD_TOKEN is not set in environment variables (.env).")

        _validate_log_level(self.log_level)
        _validate_port(self.port)

        if self.discord_guild_id is not None and self.discord_guild_id <= 0:
            raise RuntimeError("DISCORD_GUILD_ID must be a positive integer.")

        if self.discord_sync_guild_only and not self.discord_guild_id:
            raise RuntimeError("DISCORD_SYNC_GUILD_ONLY is true but DISCORD_GUILD_ID is not set.")


settings = Settings()

__all__ = ["Settings", "settings"]
