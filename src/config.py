"""Application configuration using Pydantic Settings."""

import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Local document storage settings."""

    model_config = SettingsConfigDict(env_prefix="KINGRAPH_STORAGE_")

    data_dir: str = "data"
    storage_key: str = "kingraph_v1_data"

    @property
    def document_path(self) -> Path:
        """Path of the autosaved document."""
        return Path(self.data_dir) / f"{self.storage_key}.json"

    def ensure_dirs(self) -> None:
        """Create data directory if needed."""
        Path(self.data_dir).mkdir(parents=True, exist_ok=True)


class LayoutSettings(BaseSettings):
    """Offsets used to place newly created relatives."""

    model_config = SettingsConfigDict(env_prefix="KINGRAPH_LAYOUT_")

    parent_dx: float = 120
    parent_dy: float = 180
    sibling_dx: float = 250
    spouse_dx: float = 200
    child_dy: float = 180


class EditorSettings(BaseSettings):
    """Editor UI settings."""

    model_config = SettingsConfigDict(env_prefix="KINGRAPH_EDITOR_")

    title: str = "KinGraph"
    port: int = 8080
    history_limit: int = 100


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    storage: StorageSettings = StorageSettings()
    layout: LayoutSettings = LayoutSettings()
    editor: EditorSettings = EditorSettings()


settings = Settings()


def setup_logging(level: str = None) -> None:
    """Configure root logging once for the application."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
