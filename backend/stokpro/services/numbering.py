# Overview: Monthly document numbers (INV2026010001 style) for sales, returns, transfers, quotes and e-documents.

from __future__ import annotations

from datetime import datetime

from ..extensions import db
from ..time_utils import month_prefix


SEQUENCE_WIDTH = 4


def next_document_number(column, prefix: str, now: datetime | None = None, width: int = SEQUENCE_WIDTH) -> str:
    """
    Next free number for `column` in the current month.

    Format: PREFIX + YYYY + MM + zero-padded sequence (4 digits unless
    `width` says otherwise). The sequence starts at
    the count of numbers already issued with this month's stem plus one.
    The number columns are unique across all tenants, so a candidate that
    is already taken is skipped rather than reused.
    """
    stem = month_prefix(prefix, now)
    issued = (
        db.session.query(db.func.count(column))
        .filter(column.like(f"{stem}%"))
        .scalar()
    ) or 0

    sequence = issued + 1
    while True:
        candidate = f"{stem}{sequence:0{width}d}"
        taken = db.session.query(column).filter(column == candidate).first()
        if taken is None:
            return candidate
        sequence += 1
