# Overview: Tenant-scoped lookups shared by every business service.

from __future__ import annotations

from ..extensions import db
from ..errors import NotFoundError


def scoped(model, tenant_id):
    """Base query for a tenant's rows of a business table."""
    return db.session.query(model).filter(model.tenant_id == tenant_id)


def get_scoped(model, tenant_id, object_id, message: str):
    """Fetch one row of the tenant or raise NotFoundError(message)."""
    obj = scoped(model, tenant_id).filter(model.id == object_id).first()
    if obj is None:
        raise NotFoundError(message)
    return obj
