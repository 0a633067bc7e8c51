# openid_settings/page.py
from __future__ import annotations

import logging
from typing import Optional

from django.conf import settings
from django.shortcuts import render
from django.urls import reverse
from django.utils.translation import gettext as _, gettext_lazy

from .fields import SECTIONS, build_schema
from .logger import OptionLogger
from .options import OptionSettings, SettingsRecord
from .renderers import get_renderer
from .sanitizers import sanitize_settings
from .utils import coerce_bool

logger = logging.getLogger("oidc")

LOGIN_BUTTON_SHORTCODE = "[infomaniak_connect_generic_login_button]"
AUTH_URL_SHORTCODE = "[infomaniak_connect_generic_auth_url]"


def _field_callback(renderer):
    def callback(field, record: SettingsRecord):
        return renderer(field, record.get(field.key))

    callback.renderer = renderer
    return callback


class SettingsPage:
    """
    Admin settings page of the OpenID Connect client: builds the field
    schema once, registers it with the host and renders the page.
    """

    page_title = gettext_lazy("Infomaniak OpenID Connect - Generic Client")
    menu_title = gettext_lazy("Infomaniak OpenID Connect Client")
    template_name = "openid_settings/settings_page.html"

    def __init__(self, option_name: Optional[str] = None, filters: Optional[list] = None):
        self.option_name = option_name or getattr(
            settings, "OIDC_OPTION_NAME", "openid_connect_infomaniak_settings"
        )
        self.options_page_name = getattr(
            settings, "OIDC_SETTINGS_PAGE_SLUG", "openid-connect-infomaniak-settings"
        )
        self.capability = getattr(
            settings, "OIDC_SETTINGS_CAPABILITY", "openid_settings.change_optionstore"
        )
        self.settings_field_group = f"{self.option_name}-group"
        self.settings_fields = build_schema(self.option_name, filters)
        self.host = None

    # ---------- settings ----------

    def load_settings(self) -> SettingsRecord:
        return OptionSettings(self.option_name, self.settings_fields).load()

    def sanitize_settings(self, raw) -> dict:
        return sanitize_settings(raw, self.settings_fields)

    def settings_saved(self, previous: dict, values: dict) -> None:
        # Key names only, values may be secrets
        changed = sorted(k for k in values if str(previous.get(k, "")) != str(values[k]))
        OptionLogger(self.load_settings()).log({"changed": changed}, "settings")

    # ---------- registration ----------

    def register(self, host) -> None:
        self.host = host
        self.register_page(host)
        self.register_setting(host)
        self.register_sections(host)

    def register_page(self, host) -> None:
        host.register_page(
            self.page_title,
            self.menu_title,
            self.capability,
            self.options_page_name,
            self.settings_page,
        )

    def register_setting(self, host) -> None:
        host.register_setting(
            self.settings_field_group,
            self.option_name,
            self.sanitize_settings,
            on_saved=self.settings_saved,
        )

    def register_sections(self, host) -> None:
        descriptions = {
            "client_settings": self.client_settings_description,
            "user_settings": self.user_settings_description,
            "authorization_settings": self.authorization_settings_description,
            "log_settings": self.log_settings_description,
        }
        for section_id, title in SECTIONS.items():
            host.register_section(section_id, title, descriptions[section_id], self.options_page_name)

        for key, field in self.settings_fields.items():
            host.register_field(
                key,
                field.title,
                _field_callback(get_renderer(field.type)),
                self.options_page_name,
                field.section,
                field,
            )

    # ---------- output ----------

    def redirect_uri(self, record: SettingsRecord) -> str:
        if coerce_bool(record.get("alternate_redirect_uri")):
            path = getattr(settings, "OIDC_ALTERNATE_REDIRECT_PATH", "/openid-connect-authorize")
        else:
            path = getattr(settings, "OIDC_DEFAULT_REDIRECT_PATH", "/admin-ajax/?action=openid-connect-authorize")
        # Absolute URL from SITE_BASE_URL (configured in .env)
        base = getattr(settings, "SITE_BASE_URL", "http://127.0.0.1:8000").rstrip("/")
        return base + path

    def settings_page(self, request):
        record = self.load_settings()
        oidc_logger = OptionLogger(record)
        logging_enabled = oidc_logger.is_enabled()

        context = {
            "title": self.page_title,
            "option_group_fields": self.host.settings_fields(self.settings_field_group),
            "sections": self.host.render_sections(self.options_page_name, record),
            "form_action": reverse("openid_settings:options"),
            "redirect_uri": self.redirect_uri(record),
            "login_button_shortcode": LOGIN_BUTTON_SHORTCODE,
            "auth_url_shortcode": AUTH_URL_SHORTCODE,
            "logging_enabled": logging_enabled,
            "logs_table": oidc_logger.get_logs_table() if logging_enabled else "",
        }
        return render(request, self.template_name, context)

    def client_settings_description(self) -> str:
        return _("Enter your Infomaniak OpenID Connect identity provider settings.")

    def user_settings_description(self) -> str:
        return _("Modify the interaction between OpenID Connect and site users.")

    def authorization_settings_description(self) -> str:
        return _("Control the authorization mechanics of the site.")

    def log_settings_description(self) -> str:
        return _("Log information about login attempts through OpenID Connect Infomaniak.")


def register_all(host, **kwargs) -> SettingsPage:
    """Build the settings page and register everything it needs with `host`."""
    page = SettingsPage(**kwargs)
    page.register(host)
    logger.debug(
        "settings.registered page=%s fields=%s", page.options_page_name, len(page.settings_fields)
    )
    return page
