# Overview: Alembic data migration folding the retired manager role into user.

"""Remove the manager role

- users with role 'manager' become 'user'
- users with an empty permission list get the wildcard ["*"]

One-way: once merged, former managers cannot be told apart from users,
so downgrade() leaves the data as it is.

Revision ID: 20260218000005
Revises: 20260218000004
Create Date: 2026-02-18 00:00:05
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "20260218000005"
down_revision = "20260218000004"
branch_labels = None
depends_on = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")

users = sa.table(
    "users",
    sa.column("id", sa.Uuid()),
    sa.column("role", sa.String()),
    sa.column("permissions", JSON_TYPE),
)


def upgrade():
    bind = op.get_bind()

    bind.execute(
        users.update().where(users.c.role == "manager").values(role="user")
    )

    rows = bind.execute(sa.select(users.c.id, users.c.permissions)).all()
    empty = [row.id for row in rows if row.permissions == []]
    if empty:
        bind.execute(
            users.update().where(users.c.id.in_(empty)).values(permissions=["*"])
        )


def downgrade():
    # Irreversible: the original roles are not recorded anywhere.
    pass
