from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from shipping_profiles.config import (
    ConfigurationError,
    MissingConfigurationError,
    env_float,
    get_catalog_config,
    get_database_config,
    get_storage_config,
    require_env_var,
    require_env_vars,
)

if TYPE_CHECKING:
    from pathlib import Path


def test_require_env_vars_returns_stripped_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "  value ")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_reports_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_A", raising=False)
    monkeypatch.delenv("MISSING_B", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_B", "MISSING_A"])

    assert "MISSING_A, MISSING_B" in str(exc.value)


def test_require_env_var_handles_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_var("EXAMPLE_VAR")


def test_env_float(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TIMEOUT", raising=False)
    assert env_float("TIMEOUT", 2.5) == 2.5

    monkeypatch.setenv("TIMEOUT", "7")
    assert env_float("TIMEOUT", 2.5) == 7.0

    monkeypatch.setenv("TIMEOUT", "soon")
    with pytest.raises(ConfigurationError, match="TIMEOUT"):
        env_float("TIMEOUT", 2.5)


def test_storage_config_uses_data_dir_override(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("SHIPPING_PROFILES_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("DATABASE_URI", raising=False)

    storage = get_storage_config()
    database = get_database_config(storage=storage)

    assert storage.database_path() == (tmp_path / "data" / "shipping_profiles.db").resolve()
    assert (tmp_path / "data").is_dir()
    assert database.uri.startswith("sqlite+aiosqlite:///")
    assert database.uri.endswith("shipping_profiles.db")
    assert database.echo is False


def test_database_uri_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "postgresql+asyncpg://db/profiles")
    monkeypatch.setenv("DATABASE_ECHO", "true")

    database = get_database_config()

    assert database.uri == "postgresql+asyncpg://db/profiles"
    assert database.echo is True


def test_catalog_config_requires_service_urls(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PRODUCT_SERVICE_URL", raising=False)
    monkeypatch.setenv("SHIPPING_OPTION_SERVICE_URL", "https://options.test")

    with pytest.raises(MissingConfigurationError, match="PRODUCT_SERVICE_URL"):
        get_catalog_config()


def test_catalog_config_never_caches_cart_validation(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PRODUCT_SERVICE_URL", "https://products.test")
    monkeypatch.setenv("SHIPPING_OPTION_SERVICE_URL", "https://options.test")
    monkeypatch.setenv("CATALOG_TIMEOUT_SECONDS", "3")

    config = get_catalog_config()

    assert config.products.base_url == "https://products.test"
    assert config.products.timeout_seconds == 3.0
    assert config.products.cache is not None
    assert config.shipping_options.cache is None
    assert "POST" not in config.shipping_options.retry.methods
