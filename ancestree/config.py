"""Application configuration using Pydantic Settings."""

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Relationship engine behaviour."""

    model_config = SettingsConfigDict(env_prefix="ANCESTREE_ENGINE_")

    propagate_spouse_children: bool = True
    serialize_mutations: bool = True
    export_version: str = "1.0.0"


class DatabaseSettings(BaseSettings):
    """Database path settings."""

    model_config = SettingsConfigDict(env_prefix="ANCESTREE_DB_")

    tree_db_path: str = "data/ancestree.db"

    def ensure_dirs(self) -> None:
        """Create data directory if needed."""
        Path(self.tree_db_path).parent.mkdir(parents=True, exist_ok=True)


class LogSettings(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="ANCESTREE_LOG_")

    level: str = "INFO"


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    engine: EngineSettings = EngineSettings()
    database: DatabaseSettings = DatabaseSettings()
    log: LogSettings = LogSettings()


settings = Settings()
