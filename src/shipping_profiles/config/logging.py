"""Shared logging helpers."""

from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV = "SHIPPING_PROFILES_LOG_LEVEL"


def configure_logging(*, level: int | str | None = None, force: bool = False) -> None:
    """Initialise the root logger once with sensible defaults.

    Parameters mirror ``logging.basicConfig`` with a simplified contract: the
    level defaults to ``$SHIPPING_PROFILES_LOG_LEVEL`` or INFO. Pass
    ``force=True`` to reconfigure during tests or specialised entry points.
    """

    resolved = level if level is not None else os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
