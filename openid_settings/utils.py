# openid_settings/utils.py
from __future__ import annotations

import os
from typing import Any

from django.conf import settings


def coerce_bool(value: Any, default: bool = False) -> bool:
    """
    The one place flag-like values are interpreted.
    "1" / 1 / True / "true" / "yes" / "on" -> True
    "0" / 0 / "" / None / "false" / "no" / "off" -> False
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off", ""}:
            return False
    return default


def intval(value: Any) -> int:
    """Leading-integer parse: "1" -> 1, "12abc" -> 12, "" / None / "abc" -> 0."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    text = str(value if value is not None else "").strip()
    digits = ""
    for i, ch in enumerate(text):
        if ch.isdigit() or (i == 0 and ch in "+-"):
            digits += ch
            continue
        break
    try:
        return int(digits)
    except ValueError:
        return 0


def as_text(value: Any) -> str:
    """Display form of a stored scalar. None -> "", True -> "1", False -> ""."""
    if value is None or value is False:
        return ""
    if value is True:
        return "1"
    return str(value)


def is_defined(name: str | None) -> bool:
    """A deployment override exists as a Django setting or an environment variable."""
    if not name:
        return False
    return hasattr(settings, name) or name in os.environ


def get_defined(name: str, default: Any = None) -> Any:
    if hasattr(settings, name):
        return getattr(settings, name)
    return os.environ.get(name, default)
