"""Domain port definitions for adapters."""

from __future__ import annotations

from .catalog import ProductService, ShippingOptionService
from .persistence import ProfileSelector, Repository, ShippingProfileRepository
from .unit_of_work import (
    RepositoryCollection,
    ShippingProfileRepositories,
    ShippingProfileUnitOfWork,
    UnitOfWork,
)

__all__ = [
    "ProductService",
    "ProfileSelector",
    "Repository",
    "RepositoryCollection",
    "ShippingOptionService",
    "ShippingProfileRepositories",
    "ShippingProfileRepository",
    "ShippingProfileUnitOfWork",
    "UnitOfWork",
]
