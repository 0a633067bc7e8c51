"""Shared fixtures for the OpenID Connect settings tests."""

from __future__ import annotations

import pytest

from openid_settings.fields import FieldDefinition, build_schema
from openid_settings.host import SettingsHost
from openid_settings.page import register_all

OPTION_NAME = "openid_connect_infomaniak_settings"
PAGE_SLUG = "openid-connect-infomaniak-settings"


@pytest.fixture
def schema():
    """The canonical schema, without any fields filters."""
    return build_schema(OPTION_NAME, filters=[])


@pytest.fixture
def host():
    return SettingsHost()


@pytest.fixture
def settings_page(host):
    """A settings page registered on a fresh host."""
    return register_all(host, filters=[])


@pytest.fixture
def make_field():
    def _make(key="sample", **spec):
        spec.setdefault("title", "Sample")
        spec.setdefault("type", "text")
        spec.setdefault("section", "client_settings")
        spec.setdefault("description", "Sample description.")
        return FieldDefinition.from_spec(key, spec, OPTION_NAME)

    return _make
