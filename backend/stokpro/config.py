# Overview: Process configuration read once from the environment at startup.

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping

from flask import current_app

from .errors import ConfigurationError

ENVIRONMENTS = ("development", "production", "test")
DEFAULT_SECRET_KEY = "dev-secret-key-change-me"


@dataclass(frozen=True)
class Config:
    """
    Immutable settings object handed to create_app().

    Built once by Config.from_env(); the app keeps it on
    app.extensions["stokpro"] so the guard, the seeds and the session
    layer all read the same values instead of os.environ.
    """
    env: str = "development"
    port: int = 3001
    database_url: str = "sqlite:///stokpro.sqlite3"
    cors_origin: str = "http://localhost:5173"
    frontend_url: str = "http://localhost:5173"
    secret_key: str = DEFAULT_SECRET_KEY
    admin_api_key: str | None = None
    super_admin_email: str = "admin@stokpro.com"
    super_admin_password: str = "Admin123!"
    sql_echo: bool = False
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Config":
        """
        Read and validate every setting, reporting all problems at once.

        Raises ConfigurationError listing each invalid variable.
        """
        if environ is None:
            environ = os.environ

        problems: list[str] = []

        env = environ.get("STOKPRO_ENV") or environ.get("FLASK_ENV") or "development"
        if env not in ENVIRONMENTS:
            problems.append(f"STOKPRO_ENV must be one of: {', '.join(ENVIRONMENTS)}")

        raw_port = environ.get("PORT", "3001")
        port = 0
        try:
            port = int(raw_port)
        except ValueError:
            problems.append("PORT must be a number")
        else:
            if not 1 <= port <= 65535:
                problems.append("PORT must be between 1 and 65535")

        database_url = environ.get("DATABASE_URL", cls.database_url).strip()
        if not database_url:
            problems.append("DATABASE_URL must not be empty")

        cors_origin = environ.get("CORS_ORIGIN", cls.cors_origin).strip()
        if not cors_origin:
            problems.append("CORS_ORIGIN must not be empty")

        frontend_url = (environ.get("FRONTEND_URL") or cls.frontend_url).strip().rstrip("/")
        if not frontend_url.startswith(("http://", "https://")):
            problems.append("FRONTEND_URL must be an http(s) URL")

        secret_key = environ.get("SECRET_KEY", DEFAULT_SECRET_KEY)
        if env == "production" and secret_key == DEFAULT_SECRET_KEY:
            problems.append("SECRET_KEY must be set in production")

        if problems:
            raise ConfigurationError("Invalid environment: " + "; ".join(problems))

        return cls(
            env=env,
            port=port,
            database_url=database_url,
            cors_origin=cors_origin,
            frontend_url=frontend_url,
            secret_key=secret_key,
            admin_api_key=environ.get("ADMIN_API_KEY") or None,
            super_admin_email=environ.get("SUPER_ADMIN_EMAIL") or cls.super_admin_email,
            super_admin_password=environ.get("SUPER_ADMIN_PASSWORD") or cls.super_admin_password,
            sql_echo=environ.get("SQL_ECHO", "").lower() in ("1", "true", "yes"),
        )

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    def allowed_origins(self) -> set[str] | None:
        """None means any origin is reflected."""
        if self.cors_origin == "*":
            return None
        return {o.strip() for o in self.cors_origin.split(",") if o.strip()}

    def flask_settings(self) -> dict:
        settings = {
            "SECRET_KEY": self.secret_key,
            "SQLALCHEMY_DATABASE_URI": self.database_url,
            "SQLALCHEMY_TRACK_MODIFICATIONS": False,
            "SQLALCHEMY_ECHO": self.sql_echo,
            "TESTING": self.env == "test",
        }
        settings.update(self.extra)
        return settings


def get_config() -> Config:
    """The Config the running app was created with."""
    return current_app.extensions["stokpro"]
