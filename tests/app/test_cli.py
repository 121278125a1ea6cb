from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import pytest

from shipping_profiles.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyShippingProfileUnitOfWork,
    shutdown,
    startup,
)
from shipping_profiles.domain.model import new_id
from shipping_profiles.domain.ports.persistence import ProfileSelector
from shipping_profiles.ui import cli as cli_module
from tests.helpers.profiles import make_profile

if TYPE_CHECKING:
    from pathlib import Path
    from uuid import UUID

    from shipping_profiles.domain.model import ShippingProfile


def test_init_db_creates_database_file(tmp_path: Path) -> None:
    database = tmp_path / "cli.db"

    cli_module.main(["--database-uri", f"sqlite+aiosqlite:///{database}", "init-db"])

    assert database.exists()


def test_list_builds_selector_from_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}
    product_a, product_b, option = new_id(), new_id(), new_id()

    async def fake_list(selector: ProfileSelector, *, database_uri: str | None = None) -> None:
        captured["selector"] = selector
        captured["database_uri"] = database_uri

    monkeypatch.setattr(cli_module, "list_profiles", fake_list)

    cli_module.main(
        [
            "list",
            "--product-id",
            str(product_a),
            "--product-id",
            str(product_b),
            "--option-id",
            str(option),
        ]
    )

    selector = captured["selector"]
    assert isinstance(selector, ProfileSelector)
    assert selector.products == (product_a, product_b)
    assert selector.shipping_options == (option,)
    assert captured["database_uri"] is None


def test_delete_passes_validated_id(monkeypatch: pytest.MonkeyPatch) -> None:
    deleted: list[object] = []
    profile_id = new_id()

    async def fake_delete(value: object, *, database_uri: str | None = None) -> None:
        deleted.append(value)

    monkeypatch.setattr(cli_module, "delete_profile", fake_delete)

    cli_module.main(["delete", str(profile_id)])

    assert deleted == [profile_id]


def test_invalid_id_exits_with_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["list", "--product-id", "not-a-uuid"])

    assert excinfo.value.code == 2


def test_failures_exit_with_error(monkeypatch: pytest.MonkeyPatch) -> None:
    async def failing_list(selector: ProfileSelector, *, database_uri: str | None = None) -> None:
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(cli_module, "list_profiles", failing_list)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["list"])

    assert excinfo.value.code == 1


async def _seed(database_uri: str, *profiles: ShippingProfile) -> None:
    await startup(database_uri=database_uri)
    try:
        async with SqlAlchemyShippingProfileUnitOfWork() as uow:
            for profile in profiles:
                await uow.repositories.profiles.add(profile)
            await uow.commit()
    finally:
        await shutdown()


async def _stored_ids(database_uri: str) -> list[UUID]:
    await startup(database_uri=database_uri)
    try:
        async with SqlAlchemyShippingProfileUnitOfWork() as uow:
            stored = await uow.repositories.profiles.find(ProfileSelector())
            return [profile.id for profile in stored]
    finally:
        await shutdown()


@pytest.fixture
def database_uri(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> str:
    monkeypatch.delenv("PRODUCT_SERVICE_URL", raising=False)
    monkeypatch.delenv("SHIPPING_OPTION_SERVICE_URL", raising=False)
    uri = f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}"
    cli_module.main(["--database-uri", uri, "init-db"])
    return uri


def test_list_reads_database_without_catalog_urls(
    database_uri: str, caplog: pytest.LogCaptureFixture
) -> None:
    product = new_id()
    matching = make_profile("Heavy goods", products=[product])
    other = make_profile("Default")
    asyncio.run(_seed(database_uri, matching, other))
    caplog.set_level(logging.INFO, logger=cli_module.__name__)

    cli_module.main(["--database-uri", database_uri, "list", "--product-id", str(product)])

    assert any(str(matching.id) in message for message in caplog.messages)
    assert not any(str(other.id) in message for message in caplog.messages)
    assert "1 shipping profiles" in caplog.messages


def test_delete_removes_profile_without_catalog_urls(database_uri: str) -> None:
    kept = make_profile("Default")
    removed = make_profile("Oversized")
    asyncio.run(_seed(database_uri, kept, removed))

    cli_module.main(["--database-uri", database_uri, "delete", str(removed.id)])
    cli_module.main(["--database-uri", database_uri, "delete", str(new_id())])

    assert asyncio.run(_stored_ids(database_uri)) == [kept.id]
