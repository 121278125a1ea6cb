from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from shipping_profiles.adapters.sqlalchemy.unit_of_work import shutdown, startup
from shipping_profiles.app import create_app
from shipping_profiles.config import configure_logging
from shipping_profiles.domain.identifiers import validate_id
from shipping_profiles.domain.ports.persistence import ProfileSelector

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType
    from uuid import UUID

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Administer shipping profiles")
    parser.add_argument(
        "--database-uri",
        type=str,
        help="Database URI (defaults to $DATABASE_URI or the local data directory)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create the shipping profile tables")

    list_profiles = subparsers.add_parser("list", help="List shipping profiles")
    list_profiles.add_argument(
        "--product-id",
        action="append",
        default=[],
        help="Only list profiles containing this product (repeatable)",
    )
    list_profiles.add_argument(
        "--option-id",
        action="append",
        default=[],
        help="Only list profiles holding this shipping option (repeatable)",
    )

    delete = subparsers.add_parser("delete", help="Delete a shipping profile")
    delete.add_argument("profile_id", type=str, help="Id of the profile to delete")

    return parser.parse_args(list(argv))


def _parse_ids(values: Sequence[str], label: str) -> tuple[UUID, ...]:
    return tuple(validate_id(value, label=label) for value in values)


async def init_db(*, database_uri: str | None = None) -> None:
    await startup(database_uri=database_uri)
    await shutdown()


async def list_profiles(selector: ProfileSelector, *, database_uri: str | None = None) -> None:
    try:
        async with await create_app(database_uri=database_uri) as app:
            profiles = await app.profiles.list(selector)
    finally:
        await shutdown()

    for profile in profiles:
        log.info(
            "%s %r products=%d shipping_options=%d",
            profile.id,
            profile.name,
            len(profile.products),
            len(profile.shipping_options),
        )
    log.info("%d shipping profiles", len(profiles))


async def delete_profile(profile_id: UUID, *, database_uri: str | None = None) -> None:
    try:
        async with await create_app(database_uri=database_uri) as app:
            await app.profiles.delete(profile_id)
    finally:
        await shutdown()


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        selector = ProfileSelector()
        profile_id: UUID | None = None
        if parsed_args.command == "list":
            selector = ProfileSelector(
                products=_parse_ids(parsed_args.product_id, "productId"),
                shipping_options=_parse_ids(parsed_args.option_id, "optionId"),
            )
        elif parsed_args.command == "delete":
            profile_id = validate_id(parsed_args.profile_id)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    database_uri: str | None = parsed_args.database_uri
    try:
        if parsed_args.command == "init-db":
            asyncio.run(init_db(database_uri=database_uri))
            log.info("Shipping profile tables are ready")
        elif parsed_args.command == "list":
            asyncio.run(list_profiles(selector, database_uri=database_uri))
        elif parsed_args.command == "delete" and profile_id is not None:
            asyncio.run(delete_profile(profile_id, database_uri=database_uri))
            log.info("Deleted shipping profile %s (if it existed)", profile_id)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
