# Overview: Exception hierarchy shared by services and routes, plus Flask error handlers.

from __future__ import annotations

from dataclasses import dataclass

from flask import Flask, current_app, jsonify
from werkzeug.exceptions import HTTPException

from .extensions import db


class StokProError(Exception):
    """Base for errors that map to a client-visible HTTP status."""
    status_code = 400

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message}


@dataclass(frozen=True)
class FieldViolation:
    field: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class ValidationError(StokProError, ValueError):
    """400-level input problem; carries every violated field."""

    def __init__(self, violations: list[FieldViolation] | str):
        if isinstance(violations, str):
            violations = [FieldViolation("body", violations)]
        self.violations = list(violations)
        super().__init__("Validation failed")

    @property
    def fields(self) -> list[str]:
        return [v.field for v in self.violations]

    def to_dict(self) -> dict:
        return {
            "error": self.message,
            "errors": [v.to_dict() for v in self.violations],
        }

    def __str__(self) -> str:
        return "; ".join(f"{v.field}: {v.message}" for v in self.violations)


class BusinessRuleError(StokProError):
    """400-level violation of a domain rule (insufficient stock, bad state)."""


class NotFoundError(StokProError, LookupError):
    status_code = 404


class ConflictError(StokProError):
    """409-level business rule conflict (e.g., duplicate barcode)."""
    status_code = 409


class AuthenticationError(StokProError):
    status_code = 401


class PermissionDeniedError(StokProError):
    status_code = 403


class ConfigurationError(RuntimeError):
    """Required setting missing or invalid."""


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(StokProError)
    def handle_stokpro_error(e: StokProError):
        # drop whatever the failed request flushed
        db.session.rollback()
        if e.status_code >= 500:
            current_app.logger.error("Request failed: %s", e.message)
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        return jsonify({"error": e.description or e.name}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        db.session.rollback()
        current_app.logger.exception("Unhandled exception")
        return jsonify({"error": "Internal server error"}), 500
