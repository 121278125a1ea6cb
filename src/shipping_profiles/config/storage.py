"""Where profiles are stored: the data directory and the database URI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

DATA_DIR_ENV: Final[str] = "SHIPPING_PROFILES_DATA_DIR"
DATABASE_URI_ENV: Final[str] = "DATABASE_URI"
DATABASE_ECHO_ENV: Final[str] = "DATABASE_ECHO"

DATABASE_FILENAME: Final[str] = "shipping_profiles.db"
HTTP_CACHE_FILENAME: Final[str] = "catalog_cache.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path

    def _file(self, filename: str, *, ensure: bool) -> Path:
        directory = self.data_dir.expanduser().resolve()
        if ensure:
            directory.mkdir(parents=True, exist_ok=True)
        return directory / filename

    def database_path(self, *, ensure: bool = True) -> Path:
        return self._file(DATABASE_FILENAME, ensure=ensure)

    def http_cache_path(self, *, ensure: bool = True) -> Path:
        return self._file(HTTP_CACHE_FILENAME, ensure=ensure)

    def database_uri(self) -> str:
        return f"sqlite+aiosqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str
    echo: bool = False


def _xdg_data_home() -> Path:
    configured = os.getenv("XDG_DATA_HOME")
    return Path(configured) if configured else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    """``$SHIPPING_PROFILES_DATA_DIR``, else ``$XDG_DATA_HOME/shipping_profiles``."""
    configured = os.getenv(DATA_DIR_ENV)
    data_dir = Path(configured) if configured else _xdg_data_home() / "shipping_profiles"
    return StorageConfig(data_dir=data_dir)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    echo = os.getenv(DATABASE_ECHO_ENV, "").strip().lower() in {"1", "true", "yes"}
    uri = os.getenv(DATABASE_URI_ENV, "").strip()
    if not uri:
        uri = (storage or get_storage_config()).database_uri()
    return DatabaseConfig(uri=uri, echo=echo)
