"""
Pytest fixtures for StokPro backend tests.

Provides the in-memory test database, two registered tenants for
isolation checks, and small factories that create records through the API.
"""

import pytest

from stokpro import create_app
from stokpro.config import Config
from stokpro.extensions import db
from stokpro.services import auth_service


ADMIN_API_KEY = "test-admin-key"
PASSWORD = "Password123"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    config = Config(
        env="test",
        database_url="sqlite:///:memory:",
        admin_api_key=ADMIN_API_KEY,
        super_admin_email="root@stokpro.test",
        super_admin_password="RootPass123",
    )
    app = create_app(config)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function', autouse=True)
def db_session(app):
    """Empty every table before each test, keep the schema."""
    db.session.rollback()
    for table in reversed(db.metadata.sorted_tables):
        db.session.execute(table.delete())
    db.session.commit()

    yield db.session

    db.session.rollback()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


def admin_headers() -> dict:
    return {'X-API-Key': ADMIN_API_KEY}


def _register(company: str, email: str) -> dict:
    result = auth_service.register({
        "company_name": company,
        "name": "Test Admin",
        "email": email,
        "password": PASSWORD,
    })
    return {
        "tenant_id": result["user"]["tenant"]["id"],
        "user_id": result["user"]["id"],
        "email": email,
        "tokens": result["tokens"],
        "headers": auth_headers(result["tokens"]["access_token"]),
    }


@pytest.fixture(scope='function')
def tenant_a(db_session):
    """Tenant A with its tenant_admin, registered through the auth service."""
    return _register("Acme Ticaret", "admin@acme.test")


@pytest.fixture(scope='function')
def tenant_b(db_session):
    """Tenant B (second tenant) for isolation checks."""
    return _register("Beta Pazarlama", "admin@beta.test")


@pytest.fixture(scope='function')
def headers(tenant_a):
    return tenant_a["headers"]


# =============================================================================
# FACTORIES
# =============================================================================

@pytest.fixture(scope='function')
def create_product(client, headers):
    """POST /api/products and return the product dict."""
    def _create(request_headers=None, **overrides):
        payload = {
            "name": "Test Urun",
            "purchase_price": 50,
            "sale_price": 100,
            "vat_rate": 20,
            "stock_quantity": 10,
        }
        payload.update(overrides)
        response = client.post('/api/products', json=payload, headers=request_headers or headers)
        assert response.status_code == 201, response.get_json()
        return response.get_json()["product"]
    return _create


@pytest.fixture(scope='function')
def create_customer(client, headers):
    def _create(request_headers=None, **overrides):
        payload = {"name": "Test Musteri"}
        payload.update(overrides)
        response = client.post('/api/customers', json=payload, headers=request_headers or headers)
        assert response.status_code == 201, response.get_json()
        return response.get_json()["customer"]
    return _create


@pytest.fixture(scope='function')
def create_warehouse(client, headers):
    def _create(request_headers=None, **overrides):
        payload = {"name": "Merkez Depo", "code": "mrk"}
        payload.update(overrides)
        response = client.post('/api/warehouses', json=payload, headers=request_headers or headers)
        assert response.status_code == 201, response.get_json()
        return response.get_json()["warehouse"]
    return _create


@pytest.fixture(scope='function')
def create_account(client, headers):
    def _create(request_headers=None, **overrides):
        payload = {"name": "Ana Kasa", "account_type": "kasa", "opening_balance": 1000}
        payload.update(overrides)
        response = client.post('/api/accounts', json=payload, headers=request_headers or headers)
        assert response.status_code == 201, response.get_json()
        return response.get_json()["account"]
    return _create


@pytest.fixture(scope='function')
def create_sale(client, headers):
    def _create(items, request_headers=None, **overrides):
        payload = {"items": items, "payment_method": "nakit"}
        payload.update(overrides)
        response = client.post('/api/sales', json=payload, headers=request_headers or headers)
        assert response.status_code == 201, response.get_json()
        return response.get_json()["sale"]
    return _create
