# openid_settings/options.py
from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .models import OptionStore
from .utils import get_defined

DEFAULT_SETTINGS = {
    "login_type": "button",
    "scope": "openid email profile",
    "endpoint_login": "https://login.infomaniak.com/authorize",
    "endpoint_userinfo": "https://login.infomaniak.com/oauth2/userinfo",
    "endpoint_token": "https://login.infomaniak.com/token",
    "identity_key": "sub",
    "nickname_key": "sub",
    "email_format": "{email}",
    "displayname_format": "",
    "identify_with_username": "0",
    "state_time_limit": "180",
    "http_request_timeout": "5",
    "token_refresh_enable": "1",
    "link_existing_users": "0",
    "create_if_does_not_exist": "1",
    "redirect_user_back": "0",
    "redirect_on_logout": "1",
    "enable_logging": "0",
    "log_limit": "1000",
}


class UnknownSettingError(KeyError):
    """Typed access to a key that is not part of the settings schema."""


class SettingsRecord:
    """
    The canonical key -> scalar settings mapping, accessed through get/set
    checked against the known key set.
    """

    def __init__(self, known_keys: Iterable[str], values: Mapping | None = None):
        self._known = tuple(known_keys)
        self._values = {}
        for key, value in (values or {}).items():
            if key in self._known:
                self._values[key] = value

    def _check(self, key: str) -> None:
        if key not in self._known:
            raise UnknownSettingError(key)

    def get(self, key: str, default: Any = None) -> Any:
        self._check(key)
        value = self._values.get(key)
        return default if value is None else value

    def set(self, key: str, value: Any) -> None:
        self._check(key)
        self._values[key] = value

    def ensure_keys(self) -> "SettingsRecord":
        """Every known key is present afterwards (None when unset)."""
        for key in self._known:
            self._values.setdefault(key, None)
        return self

    def __contains__(self, key) -> bool:
        return key in self._values

    def keys(self):
        return self._values.keys()

    def as_dict(self) -> dict:
        return dict(self._values)


class OptionSettings:
    """
    Loads one named option blob for a given field schema.
    Load order: defaults <- stored blob <- deployment overrides.
    """

    def __init__(self, option_name: str, schema: Mapping, defaults: Mapping | None = None):
        self.option_name = option_name
        self.schema = schema
        self.defaults = DEFAULT_SETTINGS if defaults is None else defaults

    def stored(self) -> dict:
        row = OptionStore.objects.filter(key=self.option_name).first()
        if row is None or not isinstance(row.value, dict):
            return {}
        return row.value

    def load(self) -> SettingsRecord:
        values = dict(self.defaults)
        values.update(self.stored())
        for key, field in self.schema.items():
            if field.overridden:
                values[key] = get_defined(field.override, values.get(key))
        return SettingsRecord(self.schema.keys(), values).ensure_keys()

