# Overview: Pytest coverage for the idempotent seeds and the CLI commands wrapping them.

import dataclasses

from stokpro.constants import ROLE_SUPER_ADMIN
from stokpro.models import Plan, User
from stokpro.services import seed_service
from stokpro.services.auth_service import hash_password, verify_password


class TestSeedPlans:

    def test_idempotent(self):
        assert seed_service.seed_plans() == (3, 0)
        assert seed_service.seed_plans() == (0, 3)

        plans = Plan.query.order_by(Plan.sort_order.asc()).all()
        assert [(p.code, str(p.price)) for p in plans] == [
            ("basic", "199.00"), ("pro", "449.00"), ("plus", "799.00"),
        ]
        assert plans[2].limits["maxUsers"] == -1

    def test_refreshes_edited_price(self):
        seed_service.seed_plans()
        plan = Plan.query.filter_by(code="pro").one()
        plan.price = 1
        seed_service.seed_plans()
        assert str(Plan.query.filter_by(code="pro").one().price) == "449.00"


class TestSeedSuperAdmin:

    def test_runs_twice_keeps_one(self, app):
        user, created = seed_service.seed_super_admin()
        assert created is True
        assert user.email == "root@stokpro.test"
        assert user.tenant_id is None
        assert user.permissions == ["*"]

        _, created = seed_service.seed_super_admin()
        assert created is False
        assert User.query.filter_by(role=ROLE_SUPER_ADMIN).count() == 1

    def test_stale_admin_removed(self, app):
        seed_service.seed_super_admin()
        moved = dataclasses.replace(app.extensions["stokpro"], super_admin_email="new-root@stokpro.test")

        user, created = seed_service.seed_super_admin(moved)
        assert created is True
        admins = User.query.filter_by(role=ROLE_SUPER_ADMIN).all()
        assert [a.email for a in admins] == ["new-root@stokpro.test"]

    def test_password_refreshed(self, app):
        user, _ = seed_service.seed_super_admin()
        user.password_hash = hash_password("Something9")

        user, _ = seed_service.seed_super_admin()
        assert verify_password("RootPass123", user.password_hash)


class TestCli:

    def test_seed_all(self, app):
        runner = app.test_cli_runner()
        result = runner.invoke(args=["seed", "all"])
        assert result.exit_code == 0
        assert "Plans seeded: 3 created, 0 updated" in result.output
        assert "Created super admin: root@stokpro.test" in result.output

    def test_users_create_unknown_tenant(self, app):
        runner = app.test_cli_runner()
        result = runner.invoke(args=[
            "users", "create", "--tenant-slug", "yok", "--email", "a@b.test",
            "--name", "Ali", "--password", "Password123",
        ])
        assert "Tenant 'yok' not found" in result.output

    def test_users_create(self, app, tenant_a):
        runner = app.test_cli_runner()
        result = runner.invoke(args=[
            "users", "create", "--tenant-slug", "acme-ticaret", "--email", "kasiyer@acme.test",
            "--name", "Kasiyer", "--password", "Password123",
        ])
        assert "Created user: kasiyer@acme.test with role 'user'" in result.output
        assert User.query.filter_by(email="kasiyer@acme.test").count() == 1

    def test_quotes_expire(self, app):
        runner = app.test_cli_runner()
        result = runner.invoke(args=["quotes", "expire"])
        assert result.exit_code == 0
        assert "Expired 0 quote(s)" in result.output
