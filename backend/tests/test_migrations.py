# Overview: Pytest coverage for the Alembic revision chain against a fresh SQLite file.

import uuid

import pytest
import sqlalchemy as sa
from alembic.script import ScriptDirectory
from flask_migrate import downgrade, upgrade

from stokpro import create_app
from stokpro.config import Config
from stokpro.extensions import db


def _app(tmp_path):
    database_url = f"sqlite:///{tmp_path / 'migrated.db'}"
    return create_app(Config(env="test", database_url=database_url, admin_api_key="unused"))


@pytest.fixture
def empty_app(tmp_path):
    app = _app(tmp_path)
    with app.app_context():
        yield app
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def migrated_app(empty_app):
    upgrade()
    return empty_app


def _columns(table):
    return {c["name"] for c in sa.inspect(db.engine).get_columns(table)}


def _schema():
    inspector = sa.inspect(db.engine)
    return {
        table: {c["name"] for c in inspector.get_columns(table)}
        for table in inspector.get_table_names()
        if table != "alembic_version"
    }


def _revisions(app):
    """Every revision, oldest first."""
    config = app.extensions["migrate"].migrate.get_config()
    return list(reversed(list(ScriptDirectory.from_config(config).walk_revisions())))


def test_upgrade_builds_every_model_table(migrated_app):
    tables = set(sa.inspect(db.engine).get_table_names())
    assert set(db.metadata.tables) <= tables
    assert "alembic_version" in tables
    assert {"tenant_id", "renewal_red_days", "renewal_yellow_days"} <= _columns("customers")


def test_upgrade_twice_is_a_no_op(migrated_app):
    upgrade()
    assert "renewal_red_days" in _columns("customers")


def test_every_revision_downgrades_to_the_previous_schema(empty_app):
    revisions = _revisions(empty_app)
    assert len(revisions) == len({r.revision for r in revisions})

    for script in revisions:
        before = _schema()
        upgrade(revision=script.revision)
        after = _schema()

        downgrade(revision=script.down_revision or "base")
        assert _schema() == before, script.revision

        upgrade(revision=script.revision)
        assert _schema() == after, script.revision


def test_last_revisions_downgrade_and_reapply(migrated_app):
    downgrade(revision="20260218000007")
    assert not {"renewal_red_days", "renewal_yellow_days"} & _columns("customers")
    assert not {"has_renewal", "renewal_date"} & _columns("sales")
    assert "sale_type" in _columns("sales")

    upgrade()
    assert {"renewal_red_days", "renewal_yellow_days"} <= _columns("customers")
    assert {"has_renewal", "renewal_date", "reminder_days_before", "reminder_note"} <= _columns("sales")


def test_plan_rename_round_trip(migrated_app):
    plans = sa.table("plans", sa.column("code", sa.String()))

    def codes():
        with db.engine.connect() as connection:
            return {row.code for row in connection.execute(sa.select(plans.c.code))}

    assert {"basic", "pro", "plus"} <= codes()
    downgrade(revision="20260219000001")
    assert {"starter", "pro", "enterprise"} <= codes()
    assert "plus" not in codes()


def _insert_user(email):
    with db.engine.begin() as connection:
        connection.execute(sa.insert(USERS), {
            "id": uuid.uuid4(), "email": email, "password_hash": "x", "name": "Ayni Adres", "role": "user",
        })


def test_user_email_unique_index(migrated_app):
    _insert_user("ayni@acme.test")
    with pytest.raises(sa.exc.IntegrityError):
        _insert_user("AYNI@acme.test")

    downgrade(revision="20260302000001")
    _insert_user("AYNI@acme.test")


# =============================================================================
# ONE-WAY DATA REVISIONS
# =============================================================================

USERS = sa.table(
    "users",
    sa.column("id", sa.Uuid()),
    sa.column("email", sa.String()),
    sa.column("password_hash", sa.String()),
    sa.column("name", sa.String()),
    sa.column("role", sa.String()),
    sa.column("permissions", sa.JSON()),
)

SALES = sa.table(
    "sales",
    sa.column("id", sa.Uuid()),
    sa.column("invoice_number", sa.String()),
    sa.column("grand_total", sa.Numeric()),
    sa.column("payment_method", sa.String()),
    sa.column("notes", sa.Text()),
    sa.column("invoice_issued", sa.Boolean()),
)


def test_manager_role_removal_is_one_way(empty_app):
    upgrade(revision="20260218000004")
    manager_id, user_id = uuid.uuid4(), uuid.uuid4()
    with db.engine.begin() as connection:
        connection.execute(sa.insert(USERS), [
            {"id": manager_id, "email": "mudur@acme.test", "password_hash": "x", "name": "Mudur",
             "role": "manager", "permissions": ["sales.view"]},
            {"id": user_id, "email": "kasiyer@acme.test", "password_hash": "x", "name": "Kasiyer",
             "role": "user", "permissions": []},
        ])

    def rows():
        with db.engine.connect() as connection:
            result = connection.execute(sa.select(USERS.c.id, USERS.c.role, USERS.c.permissions))
            return {row.id: (row.role, row.permissions) for row in result}

    upgrade(revision="20260218000005")
    migrated = rows()
    assert migrated == {
        manager_id: ("user", ["sales.view"]),
        user_id: ("user", ["*"]),
    }

    downgrade(revision="20260218000004")
    assert rows() == migrated


def test_imported_invoice_flag_is_one_way(empty_app):
    upgrade(revision="20260218000007")
    imported_id, manual_id = uuid.uuid4(), uuid.uuid4()
    with db.engine.begin() as connection:
        connection.execute(sa.insert(SALES), [
            {"id": imported_id, "invoice_number": "SAT-1", "grand_total": 100, "payment_method": "nakit",
             "notes": "E-Fatura import: GIB2026000000001", "invoice_issued": False},
            {"id": manual_id, "invoice_number": "SAT-2", "grand_total": 50, "payment_method": "nakit",
             "notes": "Tezgah satisi", "invoice_issued": False},
        ])

    def flags():
        with db.engine.connect() as connection:
            result = connection.execute(sa.select(SALES.c.id, SALES.c.invoice_issued))
            return {row.id: row.invoice_issued for row in result}

    upgrade(revision="20260219000001")
    assert flags() == {imported_id: True, manual_id: False}

    downgrade(revision="20260218000007")
    assert flags() == {imported_id: True, manual_id: False}
