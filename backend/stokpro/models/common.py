from __future__ import annotations

import uuid
from decimal import Decimal

from sqlalchemy.dialects.postgresql import JSONB

from ..extensions import db

# JSONB on PostgreSQL, plain JSON (TEXT) elsewhere.
JSONType = db.JSON().with_variant(JSONB(), "postgresql")


def new_id() -> uuid.UUID:
    return uuid.uuid4()


def uuid_str(value: uuid.UUID | None) -> str | None:
    return str(value) if value is not None else None


def decimal_str(value: Decimal | int | float | None) -> str | None:
    """Fixed-point values leave the API as strings to keep their scale."""
    if value is None:
        return None
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return format(value, "f")
