"""Configuration management with Pydantic and XDG base directory support."""

import os
import sys
from pathlib import Path
from typing import Literal

from pydantic import Field, PrivateAttr, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_xdg_data_home() -> Path:
    """Get XDG_DATA_HOME directory, defaulting to ~/.local/share."""
    xdg_data = os.getenv("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


EmbedderName = Literal["hashing", "kanon2"]


class Settings(BaseSettings):
    """embedsearch configuration settings.

    Precedence: CLI flag > environment variable > .env file > defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="EMBEDSEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Online mode control
    online: bool = Field(
        default=False,
        description="Enable online features (remote embedding APIs)",
    )

    # Data locations
    data_dir: Path | None = Field(
        default=None,
        description="Override data directory (defaults to XDG_DATA_HOME/embedsearch)",
    )

    database_path: Path | None = Field(
        default=None,
        description="SQLite document store path (defaults to <data_dir>/documents.db)",
    )

    # Embedding settings
    embedder: EmbedderName = Field(
        default="hashing",
        description="Embedding backend: hashing (offline) or kanon2 (online)",
    )

    dimension: int = Field(
        default=384,
        ge=1,
        description="Embedding dimension shared by every stored and query vector",
    )

    quantization: Literal["unit", "max_abs"] = Field(
        default="unit",
        description="Float-to-int8 scale convention (unit L2 norm or per-vector max-abs)",
    )

    isaacus_api_key: SecretStr | None = Field(
        default=None,
        description="Isaacus API key for Kanon 2 embeddings",
    )

    isaacus_api_base: str | None = Field(
        default=None,
        description="Isaacus self-host base URL",
    )

    # Search settings
    default_max_results: int = Field(
        default=5,
        ge=1,
        description="Result cap used when a search does not pass one",
    )

    default_owner_id: int = Field(
        default=1,
        description="Owner whose documents are searched by default",
    )

    search_workers: int = Field(
        default=1,
        ge=1,
        description="Worker threads used to shard large candidate scans",
    )

    shard_min_size: int = Field(
        default=4096,
        ge=1,
        description="Minimum candidate count before a scan is sharded across workers",
    )

    _resolved_data_dir: Path | None = PrivateAttr(default=None)
    _data_dir_warning_emitted: bool = PrivateAttr(default=False)

    def get_data_dir(self) -> Path:
        """Get the data directory, creating if necessary."""
        if self._resolved_data_dir is not None and self.data_dir in (None, self._resolved_data_dir):
            return self._resolved_data_dir

        if self.data_dir:
            data_dir = self.data_dir
            data_dir.mkdir(parents=True, exist_ok=True)
            self._resolved_data_dir = data_dir
            return data_dir

        primary_dir = get_xdg_data_home() / "embedsearch"
        try:
            primary_dir.mkdir(parents=True, exist_ok=True)
            self._resolved_data_dir = primary_dir
            return primary_dir
        except PermissionError as exc:
            fallback = Path.cwd() / ".embedsearch-data"
            fallback.mkdir(parents=True, exist_ok=True)
            self._resolved_data_dir = fallback
            if not self._data_dir_warning_emitted:
                print(
                    f"Warning: cannot create data directory at {primary_dir} ({exc}). "
                    f"Using local '{fallback}' instead. Pass --data-dir to override.",
                    file=sys.stderr,
                )
                self._data_dir_warning_emitted = True
            return fallback

    def get_database_path(self) -> Path:
        """Get path to the SQLite document store."""
        if self.database_path is not None:
            return self.database_path
        return self.get_data_dir() / "documents.db"

    def get_isaacus_api_key(self) -> str | None:
        """Return the Isaacus API key from settings or the ISAACUS_API_KEY env var."""
        if self.isaacus_api_key is not None:
            return self.isaacus_api_key.get_secret_value()
        return os.getenv("ISAACUS_API_KEY")


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance (useful for testing)."""
    global _settings
    _settings = settings
