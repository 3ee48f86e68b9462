"""Utilities for validating incoming JSON requests."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from flask import Request

from utils.errors import ValidationError


def parse_json_request(
    req: Request,
    *,
    required_keys: Iterable[str] | None = None,
    allow_empty: bool = False,
) -> dict:
    """Return the parsed JSON object body or raise a 400 ``ValidationError``."""

    if not req.is_json:
        raise ValidationError("Request content type must be application/json.")

    data = req.get_json(silent=True)
    if data is None:
        raise ValidationError("Request JSON body is required.")

    if not isinstance(data, dict):
        raise ValidationError("Request JSON payload must be an object.")

    if not data and not allow_empty:
        raise ValidationError("Request JSON body must not be empty.")

    if required_keys:
        missing = [key for key in required_keys if not data.get(key)]
        if missing:
            raise ValidationError(
                "Missing required fields: {}.".format(", ".join(sorted(missing)))
            )

    return data


def normalize_email(raw_email: object) -> str:
    """Strip whitespace and lower-case an email value."""

    if not isinstance(raw_email, str):
        return ""
    return raw_email.strip().lower()


def optional_text(value: object, field: str, max_length: int | None = None) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string.")
    text = value.strip()
    if max_length is not None and len(text) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters.")
    return text or None


def optional_date(value: object, field: str) -> date | None:
    """Parse an ISO ``YYYY-MM-DD`` value."""

    if value in (None, ""):
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be an ISO date string.")
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        raise ValidationError(f"{field} must be an ISO date string.") from None


def id_list(value: object, field: str) -> list[int]:
    if not isinstance(value, list) or not all(
        isinstance(item, int) and not isinstance(item, bool) for item in value
    ):
        raise ValidationError(f"{field} must be a list of integers.")
    return list(dict.fromkeys(value))


def non_negative_int(value: object, field: str) -> int:
    if value is None:
        return 0
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ValidationError(f"{field} must be a non-negative integer.")
    return value


def status_list(value: object, field: str) -> list[dict]:
    """Validate a list of ``{id, title, description, color}`` status entries."""

    if not isinstance(value, list) or not all(
        isinstance(item, dict) and isinstance(item.get("title"), str) and item["title"].strip()
        for item in value
    ):
        raise ValidationError(f"{field} must be a list of statuses with a title.")
    return value
