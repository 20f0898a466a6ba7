# Overview: Declarative request validation; each DTO is an explicit list of (field, predicate, message) rules.

"""
Request DTO layer.

A Dto is a named, ordered list of Fields. Each Field carries the
constraints for one key of the JSON body as (predicate, message) pairs,
so the whole DTO flattens to (field, predicate, message) tuples (see
Dto.rules). Dto.validate() evaluates every rule eagerly against a plain
dict and either returns a cleaned dict (defaults applied, values
coerced) or raises ValidationError listing every violated field.

Rules:
- unknown keys are violations ("property x should not exist")
- a missing required key is a violation; a missing optional key gets its
  default, or is left out when it has none
- type constraints run first; if one fails, the remaining constraints on
  that field are skipped so messages stay meaningful
- nested arrays of objects are validated element by element, with paths
  such as "items.0.quantity"
"""

from __future__ import annotations

import copy
import re
import uuid
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Iterable, Iterator

from .errors import FieldViolation, ValidationError
from .time_utils import parse_iso_date, parse_iso_datetime

MISSING: Any = object()

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_ISO_DATE_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}([T ]\d{2}:\d{2}(:\d{2}(\.\d{1,6})?)?(Z|[+-]\d{2}:\d{2})?)?$"
)


@dataclass(frozen=True)
class Check:
    """One predicate with its message; {field} is filled in at report time."""
    predicate: Callable[[Any], bool]
    message: str
    is_type: bool = False

    def holds(self, value: Any) -> bool:
        try:
            return bool(self.predicate(value))
        except (TypeError, ValueError, ArithmeticError):
            return False


@dataclass(frozen=True)
class Field:
    name: str
    checks: tuple[Check, ...]
    required: bool = True
    default: Any = MISSING
    nullable: bool = False
    coerce: Callable[[Any], Any] | None = None
    pre: Callable[[Any], Any] | None = None
    items: "Dto | None" = None

    def default_value(self) -> Any:
        if callable(self.default):
            return self.default()
        return copy.deepcopy(self.default)


def required(name: str, *checks: Check, coerce=None, pre=None, items=None) -> Field:
    return Field(name, tuple(checks), required=True, coerce=coerce, pre=pre, items=items)


def optional(name: str, *checks: Check, default: Any = MISSING, coerce=None, pre=None, items=None,
             nullable: bool = True) -> Field:
    return Field(
        name,
        tuple(checks),
        required=False,
        default=default,
        nullable=nullable,
        coerce=coerce,
        pre=pre,
        items=items,
    )


# =============================================================================
# PREDICATES
# =============================================================================

def _is_number(v: Any) -> bool:
    if isinstance(v, bool):
        return False
    if isinstance(v, (int, Decimal)):
        return True
    return isinstance(v, float) and v == v and v not in (float("inf"), float("-inf"))


def _is_int(v: Any) -> bool:
    if isinstance(v, bool):
        return False
    if isinstance(v, int):
        return True
    return isinstance(v, float) and v.is_integer()


def _is_uuid(v: Any) -> bool:
    if isinstance(v, uuid.UUID):
        return True
    if not isinstance(v, str):
        return False
    uuid.UUID(v)
    return len(v) == 36


def _is_date_string(v: Any) -> bool:
    if not isinstance(v, str) or not _ISO_DATE_RE.match(v):
        return False
    parse_iso_datetime(v)
    return True


def is_string() -> Check:
    return Check(lambda v: isinstance(v, str), "{field} must be a string", is_type=True)


def is_number() -> Check:
    return Check(_is_number, "{field} must be a number conforming to the specified constraints", is_type=True)


def is_int() -> Check:
    return Check(_is_int, "{field} must be an integer number", is_type=True)


def is_bool() -> Check:
    return Check(lambda v: isinstance(v, bool), "{field} must be a boolean value", is_type=True)


def is_uuid() -> Check:
    return Check(_is_uuid, "{field} must be a UUID", is_type=True)


def is_email() -> Check:
    return Check(
        lambda v: isinstance(v, str) and bool(_EMAIL_RE.match(v)),
        "{field} must be an email",
        is_type=True,
    )


def is_date_string() -> Check:
    return Check(_is_date_string, "{field} must be a valid ISO 8601 date string", is_type=True)


def is_array() -> Check:
    return Check(lambda v: isinstance(v, list), "{field} must be an array", is_type=True)


def is_object() -> Check:
    return Check(lambda v: isinstance(v, dict), "{field} must be an object", is_type=True)


def is_in(values: Iterable[str]) -> Check:
    allowed = tuple(values)
    return Check(
        lambda v: v in allowed,
        "{field} must be one of the following values: " + ", ".join(allowed),
        is_type=True,
    )


def each_in(values: Iterable[str]) -> Check:
    allowed = tuple(values)
    return Check(
        lambda v: all(isinstance(x, str) and x in allowed for x in v),
        "each value in {field} must be one of the following values: " + ", ".join(allowed),
    )


def min_length(n: int) -> Check:
    return Check(lambda v: len(v) >= n, "{field} must be longer than or equal to %d characters" % n)


def max_length(n: int) -> Check:
    return Check(lambda v: len(v) <= n, "{field} must be shorter than or equal to %d characters" % n)


def minimum(bound) -> Check:
    limit = Decimal(str(bound))
    return Check(lambda v: Decimal(str(v)) >= limit, "{field} must not be less than %s" % bound)


def maximum(bound) -> Check:
    limit = Decimal(str(bound))
    return Check(lambda v: Decimal(str(v)) <= limit, "{field} must not be greater than %s" % bound)


def min_items(n: int) -> Check:
    return Check(lambda v: len(v) >= n, "{field} must contain at least %d elements" % n)


def matches(pattern: str, message: str) -> Check:
    compiled = re.compile(pattern)
    return Check(lambda v: bool(compiled.search(v)), message)


# =============================================================================
# COERCIONS
# =============================================================================

def as_uuid(v: Any) -> uuid.UUID:
    return v if isinstance(v, uuid.UUID) else uuid.UUID(v)


def as_decimal(v: Any) -> Decimal:
    try:
        return v if isinstance(v, Decimal) else Decimal(str(v))
    except InvalidOperation as e:
        raise ValueError(str(e)) from e


def as_int(v: Any) -> int:
    return int(v)


def as_date(v: Any):
    return parse_iso_date(v)


def as_datetime(v: Any):
    return parse_iso_datetime(v)


def as_upper(v: Any) -> str:
    return v.strip().upper()


def query_int(v: Any) -> Any:
    """Query strings arrive as text; convert plain digit strings only."""
    if isinstance(v, str) and re.fullmatch(r"-?\d+", v.strip()):
        return int(v)
    return v


def query_bool(v: Any) -> Any:
    if isinstance(v, str) and v.strip().lower() in ("true", "false"):
        return v.strip().lower() == "true"
    return v


# =============================================================================
# DTO
# =============================================================================

class Dto:
    """Named, ordered constraint set for one request payload."""

    def __init__(self, name: str, fields: Iterable[Field]):
        self.name = name
        self.fields = list(fields)
        self._by_name = {f.name: f for f in self.fields}

    def __repr__(self) -> str:
        return f"<Dto {self.name} fields={[f.name for f in self.fields]}>"

    @property
    def rules(self) -> Iterator[tuple[str, Callable[[Any], bool], str]]:
        """The flat (field, predicate, message) view of this DTO."""
        for f in self.fields:
            for check in f.checks:
                yield f.name, check.predicate, check.message.format(field=f.name)

    def field(self, name: str) -> Field:
        return self._by_name[name]

    def partial(self, name: str, *extra: Field) -> "Dto":
        """
        Update variant: every field optional, no defaults applied.

        Only fields that were optional without a default may be sent as
        null; a null for a required or defaulted field is a violation.
        """
        fields = [
            replace(f, required=False, default=MISSING,
                    nullable=f.nullable and not f.required and f.default is MISSING)
            for f in self.fields
        ]
        return Dto(name, fields + list(extra))

    def extend(self, name: str, *extra: Field) -> "Dto":
        return Dto(name, self.fields + list(extra))

    def validate(self, payload: Any) -> dict:
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")
        cleaned, violations = self.check(payload)
        if violations:
            raise ValidationError(violations)
        return cleaned

    def check(self, payload: dict, prefix: str = "") -> tuple[dict, list[FieldViolation]]:
        violations: list[FieldViolation] = []
        cleaned: dict = {}

        for key in payload:
            if key not in self._by_name:
                violations.append(FieldViolation(f"{prefix}{key}", f"property {key} should not exist"))

        for f in self.fields:
            path = f"{prefix}{f.name}"
            present = f.name in payload
            value = payload.get(f.name)

            if not present or value is None:
                if f.required:
                    violations.append(FieldViolation(path, f"{f.name} should not be empty"))
                elif f.default is not MISSING:
                    value = f.default_value()
                    if f.coerce is not None and value is not None:
                        value = f.coerce(value)
                    cleaned[f.name] = value
                elif present and f.nullable:
                    cleaned[f.name] = None
                elif present:
                    violations.append(FieldViolation(path, f"{f.name} should not be null"))
                continue

            if f.pre is not None:
                value = f.pre(value)

            failed_type = False
            for check in f.checks:
                if failed_type and not check.is_type:
                    continue
                if not check.holds(value):
                    violations.append(FieldViolation(path, check.message.format(field=f.name)))
                    if check.is_type:
                        failed_type = True
            if failed_type or any(v.field == path for v in violations):
                continue

            if f.items is not None:
                elements = []
                for i, element in enumerate(value):
                    element_path = f"{path}.{i}"
                    if not isinstance(element, dict):
                        violations.append(FieldViolation(element_path, "each value must be an object"))
                        continue
                    element_clean, element_violations = f.items.check(element, prefix=f"{element_path}.")
                    violations.extend(element_violations)
                    elements.append(element_clean)
                value = elements

            if f.coerce is not None:
                try:
                    value = f.coerce(value)
                except (TypeError, ValueError, ArithmeticError):
                    violations.append(FieldViolation(path, f"{f.name} has an invalid value"))
                    continue

            cleaned[f.name] = value

        return cleaned, violations


def validate(dto: Dto, payload: Any) -> dict:
    return dto.validate(payload)
