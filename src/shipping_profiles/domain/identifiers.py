"""Identifier validation helpers."""

from __future__ import annotations

from uuid import UUID

from shipping_profiles.domain.errors import InvalidArgumentError


def validate_id(raw_id: object, *, label: str = "profileId") -> UUID:
    """Return ``raw_id`` as a UUID or raise ``InvalidArgumentError``.

    Accepts ``UUID`` instances and their canonical string forms.
    """

    message = f"The {label} could not be casted to a UUID"
    if isinstance(raw_id, UUID):
        return raw_id
    if isinstance(raw_id, str):
        try:
            return UUID(raw_id)
        except ValueError as exc:
            raise InvalidArgumentError(message) from exc
    raise InvalidArgumentError(message)
