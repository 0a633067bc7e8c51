# openid_settings/sanitizers.py
from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from django.utils.html import escape, strip_tags

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_OCTETS = re.compile(r"%[a-fA-F0-9]{2}")
_WHITESPACE = re.compile(r"[\r\n\t ]+")
# A "<" run that reaches the next "<" or the end without closing
_LESS_THAN = re.compile(r"<[^>]*?((?=<)|>|$)")


def _to_text(value: Any) -> str:
    if value is None or isinstance(value, (Mapping, list, tuple, set, bytes)):
        return ""
    if value is True:
        return "1"
    if value is False:
        return "0"
    try:
        return str(value)
    except Exception:
        return ""


def _escape_lone_less_than(text: str) -> str:
    return _LESS_THAN.sub(lambda m: m.group(0) if ">" in m.group(0) else escape(m.group(0)), text)


def sanitize_text_field(value: Any) -> str:
    """
    Conservative plain-text filter for a single submitted value:
    a lone "<" is escaped so the text around it survives, then tags,
    control characters and percent-encoded octets are removed,
    whitespace runs collapse to one space, ends are trimmed.
    """
    text = _to_text(value)
    # Loop until stable so the result is a fixed point (idempotent)
    while True:
        filtered = strip_tags(_escape_lone_less_than(text)) if "<" in text else text
        filtered = _CONTROL_CHARS.sub("", filtered)
        filtered = _OCTETS.sub("", filtered)
        filtered = _WHITESPACE.sub(" ", filtered).strip()
        if filtered == text:
            return filtered
        text = filtered


def sanitize_settings(raw: Any, schema: Mapping) -> dict:
    """
    Allow-listed by `schema`: the result has exactly the schema's keys.
    Unknown submitted keys are dropped, missing ones stored as "".
    """
    if not isinstance(raw, Mapping):
        raw = {}

    options = {}
    for key in schema:
        if raw.get(key) is not None:
            options[key] = sanitize_text_field(_to_text(raw[key]).strip())
        else:
            options[key] = ""
    return options
