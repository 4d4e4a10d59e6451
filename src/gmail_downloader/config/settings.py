"""Configuration management using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

GMAIL_READONLY_SCOPE = "https://www.googleapis.com/auth/gmail.readonly"


class AppConfig(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )
    log_format: Literal["json", "console"] = Field(default="console", alias="LOG_FORMAT")


class GmailConfig(BaseSettings):
    """Gmail API configuration."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True
    )

    home_dir: Path = Field(default=Path("."), alias="GDOWN_HOME")
    credentials_filename: str = "credentials.json"
    token_filename: str = "token.json"
    user_id: str = "me"
    max_results: int = Field(default=500, ge=1, le=500, alias="GDOWN_MAX_RESULTS")
    scopes: list[str] = [GMAIL_READONLY_SCOPE]

    # Permission bits for written attachments
    file_mode: int = Field(default=0o644, alias="GDOWN_FILE_MODE")

    @field_validator("home_dir", mode="before")
    @classmethod
    def validate_path(cls, v: str | Path | None) -> Path:
        """Convert string to Path, empty means current directory."""
        if v is None or v == "":
            return Path(".")
        return Path(v) if isinstance(v, str) else v

    @field_validator("file_mode", mode="before")
    @classmethod
    def parse_file_mode(cls, v: str | int) -> int:
        """Parse an octal string such as '0644' or '644'."""
        if isinstance(v, str):
            return int(v.strip(), 8)
        return v

    @field_validator("file_mode")
    @classmethod
    def check_file_mode(cls, v: int) -> int:
        """Reject values outside the permission bits."""
        if not 0 <= v <= 0o777:
            raise ValueError(f"file mode {oct(v)} is not a permission mode")
        return v

    @property
    def credentials_path(self) -> Path:
        """OAuth client configuration issued by Google."""
        return self.home_dir / self.credentials_filename

    @property
    def token_path(self) -> Path:
        """Cached OAuth token."""
        return self.home_dir / self.token_filename


class Settings(BaseSettings):
    """Master settings combining all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app: AppConfig = Field(default_factory=AppConfig)
    gmail: GmailConfig = Field(default_factory=GmailConfig)


@lru_cache
def get_settings() -> Settings:
    """Settings read once per process.

    Built on first use rather than at import so invalid values surface as
    a pydantic ValidationError the entry point can report.
    """
    return Settings()
