# Overview: Pytest coverage for environment configuration loading.

import pytest

from stokpro import create_app
from stokpro.config import Config, DEFAULT_SECRET_KEY
from stokpro.errors import ConfigurationError


class TestFromEnv:

    def test_defaults(self):
        config = Config.from_env({})
        assert config.env == "development"
        assert config.port == 3001
        assert config.database_url == "sqlite:///stokpro.sqlite3"
        assert config.admin_api_key is None
        assert config.secret_key == DEFAULT_SECRET_KEY

    def test_values_read(self):
        config = Config.from_env({
            "STOKPRO_ENV": "production",
            "PORT": "8080",
            "DATABASE_URL": "postgresql+psycopg://u:p@db/stokpro",
            "CORS_ORIGIN": "https://app.example.com",
            "SECRET_KEY": "s3cret",
            "ADMIN_API_KEY": "k",
            "SQL_ECHO": "true",
        })
        assert config.is_production
        assert config.port == 8080
        assert config.admin_api_key == "k"
        assert config.sql_echo is True

    def test_empty_admin_key_means_unconfigured(self):
        assert Config.from_env({"ADMIN_API_KEY": ""}).admin_api_key is None

    @pytest.mark.parametrize("port", ["abc", "0", "70000"])
    def test_bad_port(self, port):
        with pytest.raises(ConfigurationError) as exc:
            Config.from_env({"PORT": port})
        assert "PORT" in str(exc.value)

    def test_frontend_url(self):
        assert Config.from_env({}).frontend_url == "http://localhost:5173"
        config = Config.from_env({"FRONTEND_URL": "https://app.stokpro.test/"})
        assert config.frontend_url == "https://app.stokpro.test"

    def test_bad_frontend_url(self):
        with pytest.raises(ConfigurationError) as exc:
            Config.from_env({"FRONTEND_URL": "app.stokpro.test"})
        assert "FRONTEND_URL" in str(exc.value)

    def test_unknown_env(self):
        with pytest.raises(ConfigurationError):
            Config.from_env({"STOKPRO_ENV": "staging"})

    def test_production_needs_secret(self):
        with pytest.raises(ConfigurationError) as exc:
            Config.from_env({"STOKPRO_ENV": "production"})
        assert "SECRET_KEY" in str(exc.value)

    def test_all_problems_reported(self):
        with pytest.raises(ConfigurationError) as exc:
            Config.from_env({"PORT": "x", "DATABASE_URL": " ", "CORS_ORIGIN": ""})
        message = str(exc.value)
        assert message.startswith("Invalid environment: ")
        assert "PORT" in message
        assert "DATABASE_URL" in message
        assert "CORS_ORIGIN" in message


class TestDerivedSettings:

    def test_wildcard_origin(self):
        assert Config(cors_origin="*").allowed_origins() is None

    def test_origin_list(self):
        config = Config(cors_origin="http://a.test, http://b.test")
        assert config.allowed_origins() == {"http://a.test", "http://b.test"}

    def test_flask_settings(self):
        settings = Config(env="test", database_url="sqlite://").flask_settings()
        assert settings["TESTING"] is True
        assert settings["SQLALCHEMY_DATABASE_URI"] == "sqlite://"


class TestCors:

    def test_allowed_origin_reflected(self, client):
        response = client.get('/api/health', headers={"Origin": "http://localhost:5173"})
        assert response.headers["Access-Control-Allow-Origin"] == "http://localhost:5173"

    def test_other_origin_ignored(self, client):
        response = client.get('/api/health', headers={"Origin": "http://evil.test"})
        assert "Access-Control-Allow-Origin" not in response.headers

    def test_allowed_origin_gets_credentials(self, client):
        response = client.get('/api/health', headers={"Origin": "http://localhost:5173"})
        assert response.headers["Access-Control-Allow-Credentials"] == "true"

    def test_wildcard_origin_without_credentials(self):
        app = create_app(Config(env="test", database_url="sqlite://", cors_origin="*"))
        response = app.test_client().get('/api/health', headers={"Origin": "http://any.test"})
        assert response.headers["Access-Control-Allow-Origin"] == "*"
        assert "Access-Control-Allow-Credentials" not in response.headers
