from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any


# Maximum unit price: $9,999,999.99
# Keeps float prices well inside exact cent precision
MAX_PRICE = 9_999_999.99


class ValidationError(ValueError):
    """400-level input problem."""


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., duplicate email)."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - field_types: python type each accepted field is coerced to (int, float, str)
    - writable_fields: what clients are allowed to set (security boundary)
    - required_on_create: fields required for create payloads
    """
    field_types: dict[str, type]
    writable_fields: set[str]
    required_on_create: set[str] = field(default_factory=set)


def _coerce_int(key: str, value: Any) -> int:
    # Already an int (but not bool which is a subclass of int)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    # String input - must be plain digits (with optional leading minus)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{key} must be an integer")
        # Reject scientific notation (e.g., "1e15", "1E10")
        if 'e' in stripped.lower():
            raise ValidationError(f"{key} must be a plain integer (scientific notation not allowed)")
        # Reject decimal points (e.g., "12.5")
        if '.' in stripped:
            raise ValidationError(f"{key} must be an integer (no decimals)")
        try:
            return int(stripped)
        except ValueError:
            raise ValidationError(f"{key} must be an integer")
    if isinstance(value, float):
        raise ValidationError(f"{key} must be an integer, not a decimal")
    raise ValidationError(f"{key} must be an integer")


def _coerce_float(key: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be a number")
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise ValidationError(f"{key} must be a number")
    else:
        raise ValidationError(f"{key} must be a number")
    if math.isnan(number) or math.isinf(number):
        raise ValidationError(f"{key} must be a finite number")
    return number


def coerce_value(key: str, value: Any, expected: type):
    if value is None:
        return None
    if expected is int:
        return _coerce_int(key, value)
    if expected is float:
        return _coerce_float(key, value)
    if expected is str:
        return str(value).strip()
    return value


def validate_payload(*, payload: dict, policy: ModelValidationPolicy, partial: bool) -> dict:
    """
    Validates + normalizes an incoming form/JSON payload against a policy.
    Returns a cleaned patch dict with only writable fields.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)

    Blank values for optional numeric fields are treated as absent.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    for k in payload.keys():
        if k not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {k}")

    patch: dict = {}
    for k, raw in payload.items():
        expected = policy.field_types.get(k, str)
        blank = raw is None or (isinstance(raw, str) and raw.strip() == "")

        if blank:
            if k in policy.required_on_create:
                raise ValidationError(f"{k} cannot be blank")
            if expected is str:
                patch[k] = ""
            continue

        patch[k] = coerce_value(k, raw, expected)

    if not partial:
        missing = sorted(f for f in policy.required_on_create if f not in patch)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    return patch


def enforce_rules_product(patch: dict, *, creating: bool = False) -> None:
    """
    Business rules for product fields. Keep these small and centralized.
    """
    if "price" in patch and patch["price"] is not None:
        price = patch["price"]
        if price < 0:
            raise ValidationError("price must be >= 0")
        if creating and price == 0:
            raise ValidationError("Please enter valid product name and price")
        if price > MAX_PRICE:
            raise ValidationError(f"price cannot exceed {MAX_PRICE:,.2f}")

    if "quantity" in patch and patch["quantity"] is not None:
        if patch["quantity"] < 0:
            raise ValidationError("quantity must be >= 0")

    if "barcode" in patch and patch["barcode"]:
        if not patch["barcode"].isdigit():
            raise ValidationError("Enter barcode (numbers only)")

    if "name" in patch and patch["name"] == "":
        raise ValidationError("name cannot be blank")
