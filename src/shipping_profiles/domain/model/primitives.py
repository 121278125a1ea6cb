"""Domain primitives: scalar aliases + small value objects.

Scalar aliases may be promoted to proper value objects later without changing imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

type ProfileId = UUID
type ProductId = UUID
type ShippingOptionId = UUID
type RegionId = UUID
type Amount = int  # minor currency units
type Metadata = dict[str, object]
