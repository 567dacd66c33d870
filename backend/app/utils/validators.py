"""
Field checks shared by the admin services.

Each check appends {"field", "message", "code"} dicts to an error list so
a service can report every problem with a payload at once.
"""
import re
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

FieldErrors = List[Dict[str, str]]

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^\+?[0-9\s\-()]+$")


def add_error(errors: FieldErrors, field: str, message: str, code: str) -> None:
    errors.append({"field": field, "message": message, "code": code})


def has_both_languages(value: Optional[Dict[str, Any]]) -> bool:
    """True when both the English and Nepali texts are non-blank"""
    if not isinstance(value, dict):
        return False
    return all(isinstance(value.get(lang), str) and value[lang].strip() for lang in ("en", "ne"))


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_RE.match(value or ""))


def is_valid_phone(value: str) -> bool:
    return bool(PHONE_RE.match(value or ""))


def is_valid_url(value: str) -> bool:
    parsed = urlparse(value or "")
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def check_order(errors: FieldErrors, order: Optional[int]) -> None:
    if order is not None and order < 0:
        add_error(errors, "order", "Order must be a non-negative number", "INVALID_ORDER")
