"""Error taxonomy for shipping profile operations."""

from __future__ import annotations


class ShippingProfileError(Exception):
    """Base class for errors raised by the shipping profile domain."""


class InvalidArgumentError(ShippingProfileError, ValueError):
    """Raised for malformed identifiers or metadata keys."""


class InvalidDataError(ShippingProfileError, ValueError):
    """Raised when a field is mutated through the wrong operation."""


class NotFoundError(ShippingProfileError, LookupError):
    """Raised when a referenced record does not exist."""


class StorageError(ShippingProfileError, RuntimeError):
    """Raised when the underlying persistence layer fails.

    The driver exception is always attached as ``__cause__``.
    """


class ShippingOptionIneligibleError(ShippingProfileError):
    """Raised by shipping option services when a cart does not qualify for an option."""
