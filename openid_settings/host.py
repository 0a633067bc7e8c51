# openid_settings/host.py
"""
Django side of the settings registration contract: pages, sections, fields
and settings are registered once at start-up and looked up per request.
"""
from __future__ import annotations

import logging
import re
from collections import OrderedDict
from dataclasses import dataclass, field as dc_field
from typing import Any, Callable, Optional

from django.core.exceptions import ImproperlyConfigured, PermissionDenied
from django.db import transaction
from django.http import Http404
from django.utils.html import format_html, format_html_join
from django.utils.safestring import SafeString, mark_safe

from .models import OptionStore

logger = logging.getLogger("oidc")


@dataclass
class Page:
    slug: str
    title: str
    menu_title: str
    capability: str
    render_callback: Callable
    sections: "OrderedDict[str, Section]" = dc_field(default_factory=OrderedDict)


@dataclass
class Section:
    id: str
    title: str
    description_callback: Optional[Callable]
    fields: list = dc_field(default_factory=list)


@dataclass
class RegisteredField:
    key: str
    title: str
    render_callback: Callable
    args: Any


@dataclass
class Setting:
    group: str
    option_name: str
    sanitize_callback: Callable
    # Called as on_saved(previous, values) after the blob is replaced
    on_saved: Optional[Callable] = None


class SettingsHost:
    def __init__(self):
        self._pages: "OrderedDict[str, Page]" = OrderedDict()
        self._settings: dict[str, Setting] = {}

    # ---------- registration ----------

    def register_page(self, title, menu_title, capability, slug, render_callback) -> Page:
        page = Page(slug, title, menu_title, capability, render_callback)
        self._pages[slug] = page
        return page

    def register_section(self, id, title, description_callback, page_slug) -> Section:
        page = self._pages.get(page_slug)
        if page is None:
            raise ImproperlyConfigured(f"Section '{id}' registered on unknown page '{page_slug}'.")
        section = Section(id, title, description_callback)
        page.sections[id] = section
        return section

    def register_field(self, key, title, render_callback, page_slug, section_id, args=None) -> RegisteredField:
        page = self._pages.get(page_slug)
        if page is None or section_id not in page.sections:
            raise ImproperlyConfigured(
                f"Field '{key}' registered on unknown section '{section_id}' of page '{page_slug}'."
            )
        registered = RegisteredField(key, title, render_callback, args)
        page.sections[section_id].fields.append(registered)
        return registered

    def register_setting(self, group, option_name, sanitize_callback, on_saved=None) -> Setting:
        setting = Setting(group, option_name, sanitize_callback, on_saved)
        self._settings[group] = setting
        return setting

    def unregister_page(self, slug) -> None:
        self._pages.pop(slug, None)

    # ---------- lookups ----------

    def get_page(self, slug) -> Page:
        try:
            return self._pages[slug]
        except KeyError:
            raise Http404(f"No settings page '{slug}'.")

    def get_setting(self, group) -> Setting:
        try:
            return self._settings[group]
        except KeyError:
            raise Http404(f"No settings group '{group}'.")

    def has_capability(self, user, capability) -> bool:
        if not (user and user.is_authenticated):
            return False
        return user.is_superuser or user.has_perm(capability)

    def check_capability(self, user, capability) -> None:
        if not self.has_capability(user, capability):
            raise PermissionDenied

    def menu_pages(self, user) -> list:
        return [p for p in self._pages.values() if self.has_capability(user, p.capability)]

    # ---------- output ----------

    def settings_fields(self, group) -> SafeString:
        return format_html('<input type="hidden" name="option_page" value="{}">', group)

    def render_sections(self, page_slug, record) -> SafeString:
        page = self.get_page(page_slug)
        out = []
        for section in page.sections.values():
            description = section.description_callback() if section.description_callback else ""
            out.append(format_html("<h2>{}</h2><p>{}</p>", section.title, description))
            if not section.fields:
                continue
            rows = format_html_join(
                "",
                '<tr><th scope="row"><label for="{}">{}</label></th><td>{}</td></tr>',
                ((f.key, f.title, f.render_callback(f.args, record)) for f in section.fields),
            )
            out.append(format_html('<table class="form-table" role="presentation">{}</table>', rows))
        return mark_safe("".join(out))

    # ---------- saving ----------

    @staticmethod
    def extract_option(post, option_name) -> dict:
        """
        Collect `option_name[key]` inputs into {key: value}. When a name is
        submitted more than once the last value wins.
        """
        pattern = re.compile(r"^" + re.escape(option_name) + r"\[([^\]]+)\]$")
        raw = {}
        for name in post.keys():
            m = pattern.match(name)
            if m:
                raw[m.group(1)] = post.get(name)
        return raw

    def save_option(self, group, post) -> dict:
        """Sanitize the submitted option and replace the stored blob as a whole."""
        setting = self.get_setting(group)
        raw = self.extract_option(post, setting.option_name)
        values = setting.sanitize_callback(raw)

        with transaction.atomic():
            row = OptionStore.objects.select_for_update().filter(key=setting.option_name).first()
            previous = dict(row.value) if row is not None and isinstance(row.value, dict) else {}
            OptionStore.objects.update_or_create(key=setting.option_name, defaults={"value": values})
        logger.info("settings.saved group=%s option=%s keys=%s", group, setting.option_name, len(values))

        if setting.on_saved is not None:
            setting.on_saved(previous, values)
        return values


site = SettingsHost()
