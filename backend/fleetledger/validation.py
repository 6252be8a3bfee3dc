from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import Date, Numeric, String, Text
from sqlalchemy.orm import DeclarativeMeta

from .errors import ValidationError
from .money import MAX_AMOUNT, quantize
from .time_utils import parse_iso_date


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: what clients are allowed to set (security boundary)
    - required_on_create: fields required for POST
    - read_only_fields: known fields clients may echo back; silently dropped
    - choices: enum-like fields and their allowed values
    """
    writable_fields: frozenset[str]
    required_on_create: frozenset[str] = frozenset()
    read_only_fields: frozenset[str] = frozenset()
    choices: dict[str, tuple[str, ...]] = field(default_factory=dict)


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def _coerce_amount(key: str, value: Any) -> Decimal:
    # bool is an int subclass; never a valid amount
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise ValidationError(f"{key} must be a number", key)
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{key} must be a number", key)
    if not amount.is_finite():
        raise ValidationError(f"{key} must be a finite number", key)
    if amount < 0:
        raise ValidationError(f"{key} must be >= 0", key)
    # Bound first: quantizing a huge exponent overflows the decimal context
    if amount > MAX_AMOUNT:
        raise ValidationError(f"{key} cannot exceed {MAX_AMOUNT}", key)
    try:
        exact = amount == amount.quantize(Decimal("0.01"))
    except InvalidOperation:
        exact = False
    if not exact:
        raise ValidationError(f"{key} must have at most 2 decimal places", key)
    return quantize(amount)


def _coerce_value(col, value: Any):
    coltype = col.type
    key = col.key

    if value is None:
        return None

    if isinstance(coltype, Numeric):
        return _coerce_amount(key, value)

    # Dates (accept "YYYY-MM-DD" or ISO-8601 datetimes)
    if isinstance(coltype, Date):
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            try:
                parsed = parse_iso_date(value)
            except ValueError:
                raise ValidationError(f"{key} must be an ISO-8601 date", key)
            if parsed is None:
                raise ValidationError(f"{key} is required", key)
            return parsed
        raise ValidationError(f"{key} must be a date", key)

    # Strings / Text
    if isinstance(coltype, (String, Text)):
        if not isinstance(value, (str, int, float)) or isinstance(value, bool):
            raise ValidationError(f"{key} must be a string", key)
        return str(value).strip()

    # Default: leave as-is
    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Validates + normalizes incoming JSON against:
    - SQLAlchemy column metadata (nullable, type, String length)
    - a policy allowlist (writable_fields) and enum choices
    - required_on_create (if partial=False)
    Returns a cleaned patch dict with only writable fields.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)

    Raises ValidationError naming the first failing field.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    if not partial:
        for f in sorted(policy.required_on_create):
            if f not in payload or payload[f] is None:
                raise ValidationError(f"{f} is required", f)

    cols = _columns_by_key(model)

    patch: dict = {}

    for k, raw in payload.items():
        if k in policy.read_only_fields:
            continue
        if k not in policy.writable_fields or k not in cols:
            raise ValidationError(f"Field not allowed: {k}", k)

        col = cols[k]

        # NULL handling
        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{k} cannot be null", k)
            patch[k] = None
            continue

        val = _coerce_value(col, raw)

        # Blank string check for non-nullable text fields
        if isinstance(col.type, (String, Text)) and not col.nullable:
            if isinstance(val, str) and val == "":
                raise ValidationError(f"{k} cannot be blank", k)

        # Max length check for String(n)
        if isinstance(col.type, String) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise ValidationError(f"{k} exceeds max length {col.type.length}", k)

        allowed = policy.choices.get(k)
        if allowed is not None:
            val = val.upper()
            if val not in allowed:
                raise ValidationError(f"{k} must be one of: {', '.join(allowed)}", k)

        patch[k] = val

    return patch
