# openid_settings/renderers.py
"""
Markup for the settings fields.

Every renderer takes the field definition and the current stored value and
returns escaped markup. Which renderer a field gets is decided by its type
(see `get_renderer`); unknown types fall back to the text input.
"""
from __future__ import annotations

import re
from typing import Any, Callable

from django.utils.html import escape, format_html, format_html_join
from django.utils.safestring import SafeString, mark_safe
from django.utils.translation import gettext as _

from .fields import FieldDefinition
from .utils import as_text, coerce_bool

Renderer = Callable[[FieldDefinition, Any], SafeString]

RICH_TEXT_TAGS = {"br", "strong", "em", "b", "i", "code"}
_TAG = re.compile(r"<(/?)([a-zA-Z][a-zA-Z0-9]*)\s*(/?)>")


def _flag(enabled: bool, fragment: str) -> str:
    return mark_safe(fragment) if enabled else ""


def filter_rich_text(value: Any) -> SafeString:
    """Keep bare formatting tags from RICH_TEXT_TAGS, escape everything else."""
    text = as_text(value)
    out = []
    pos = 0
    for m in _TAG.finditer(text):
        out.append(escape(text[pos:m.start()]))
        tag = m.group(2).lower()
        if tag in RICH_TEXT_TAGS:
            out.append(f"<{m.group(1)}{tag}{m.group(3)}>")
        else:
            out.append(escape(m.group(0)))
        pos = m.end()
    out.append(escape(text[pos:]))
    return mark_safe("".join(out))


def render_field_description(field: FieldDefinition) -> SafeString:
    example = ""
    if field.example is not None:
        example = format_html(
            "<br/><strong>{}: </strong><code>{}</code>",
            _("Example"),
            field.example,
        )
    return format_html(
        '<p class="description">{}{}</p>',
        filter_rich_text(field.description),
        example,
    )


def render_shadow_input(field: FieldDefinition, value: Any) -> SafeString:
    """Disabled controls are not submitted; this hidden input keeps the stored value."""
    if not coerce_bool(field.disabled):
        return mark_safe("")
    return format_html('<input type="hidden" name="{}" value="{}">', field.name, as_text(value))


def render_text_field(field: FieldDefinition, value: Any) -> SafeString:
    disabled = coerce_bool(field.disabled)
    readonly = coerce_bool(field.readonly)
    return format_html(
        '{}<input type="{}" id="{}" class="large-text{}" name="{}"{}{} value="{}">{}',
        render_shadow_input(field, value),
        field.type,
        field.key,
        _flag(disabled, " disabled"),
        field.name,
        _flag(disabled, " disabled"),
        _flag(readonly, " readonly"),
        as_text(value),
        render_field_description(field),
    )


def render_checkbox(field: FieldDefinition, value: Any) -> SafeString:
    """
    Checkbox preceded by a hidden input of the same name, so the submission
    always carries a value for this key. A disabled checkbox is not
    submitted by the browser, so its hidden input carries the stored value.
    """
    disabled = coerce_bool(field.disabled)
    on = coerce_bool(value)
    hidden_value = int(on) if disabled else 0
    return format_html(
        '<input type="hidden" name="{}" value="{}">'
        '<input type="checkbox" id="{}" name="{}"{} value="1"{}>{}',
        field.name,
        str(hidden_value),
        field.key,
        field.name,
        _flag(disabled, ' disabled="disabled"'),
        _flag(on, ' checked="checked"'),
        render_field_description(field),
    )


def render_select(field: FieldDefinition, value: Any) -> SafeString:
    current = as_text(value)
    options = format_html_join(
        "",
        '<option value="{}"{}>{}</option>',
        (
            (key, _flag(str(key) == current, ' selected="selected"'), label)
            for key, label in (field.options or {}).items()
        ),
    )
    return format_html(
        '{}<select id="{}" name="{}"{}>{}</select>{}',
        render_shadow_input(field, value),
        field.key,
        field.name,
        _flag(coerce_bool(field.disabled), " disabled"),
        options,
        render_field_description(field),
    )


RENDERERS = {
    "checkbox": render_checkbox,
    "select": render_select,
}


def get_renderer(field_type: str) -> Renderer:
    return RENDERERS.get(field_type, render_text_field)


def render(field: FieldDefinition, value: Any) -> SafeString:
    return get_renderer(field.type)(field, value)
