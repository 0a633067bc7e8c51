"""Tests for the settings record, option loading and flag coercion."""

from __future__ import annotations

import pytest

from openid_settings.fields import build_schema
from openid_settings.models import OptionStore
from openid_settings.options import DEFAULT_SETTINGS, OptionSettings, SettingsRecord, UnknownSettingError
from openid_settings.utils import as_text, coerce_bool, intval

from .conftest import OPTION_NAME


@pytest.mark.parametrize("value", ["1", 1, True, "true", "yes", "on", " TRUE "])
def test_coerce_bool_truthy(value):
    assert coerce_bool(value) is True


@pytest.mark.parametrize("value", ["0", 0, "", None, False, "false", "no", "off"])
def test_coerce_bool_falsy(value):
    assert coerce_bool(value) is False


def test_coerce_bool_unknown_uses_default():
    assert coerce_bool("maybe") is False
    assert coerce_bool("maybe", default=True) is True


@pytest.mark.parametrize(
    "value, expected",
    [("1", 1), (1, 1), (True, 1), ("", 0), (None, 0), ("abc", 0), ("12abc", 12), ("-3", -3), (2.7, 2)],
)
def test_intval(value, expected):
    assert intval(value) == expected


def test_as_text():
    assert as_text(None) == ""
    assert as_text(True) == "1"
    assert as_text(False) == ""
    assert as_text(180) == "180"


def test_record_rejects_unknown_keys():
    record = SettingsRecord(["client_id"], {"client_id": "abc", "evil_key": "x"})

    assert record.get("client_id") == "abc"
    assert "evil_key" not in record
    with pytest.raises(UnknownSettingError):
        record.get("evil_key")
    with pytest.raises(UnknownSettingError):
        record.set("evil_key", "x")


def test_record_set_and_default():
    record = SettingsRecord(["client_id", "scope"])

    assert record.get("scope", "openid") == "openid"
    record.set("scope", "email")
    assert record.get("scope") == "email"


def test_ensure_keys_fills_missing_with_none():
    record = SettingsRecord(["client_id", "scope"], {"scope": "openid"}).ensure_keys()

    assert set(record.keys()) == {"client_id", "scope"}
    assert record.as_dict()["client_id"] is None


@pytest.mark.django_db
def test_load_without_stored_blob_uses_defaults(schema):
    record = OptionSettings(OPTION_NAME, schema).load()

    assert set(record.keys()) == set(schema)
    assert record.get("login_type") == DEFAULT_SETTINGS["login_type"]
    assert record.get("client_id") is None


@pytest.mark.django_db
def test_stored_blob_wins_over_defaults(schema):
    OptionStore.objects.create(key=OPTION_NAME, value={"login_type": "auto", "client_id": "abc"})

    record = OptionSettings(OPTION_NAME, schema).load()

    assert record.get("login_type") == "auto"
    assert record.get("client_id") == "abc"
    assert record.get("scope") == DEFAULT_SETTINGS["scope"]


@pytest.mark.django_db
def test_stored_unknown_keys_are_not_exposed(schema):
    OptionStore.objects.create(key=OPTION_NAME, value={"evil_key": "x"})

    record = OptionSettings(OPTION_NAME, schema).load()

    assert "evil_key" not in record


@pytest.mark.django_db
def test_deployment_override_wins_over_stored_value(settings, monkeypatch):
    OptionStore.objects.create(key=OPTION_NAME, value={"client_id": "stored", "log_limit": "10"})
    settings.INFOMANIAK_OIDC_CLIENT_ID = "deployed"
    monkeypatch.setenv("OIDC_LOG_LIMIT", "50")
    schema = build_schema(OPTION_NAME, filters=[])

    record = OptionSettings(OPTION_NAME, schema).load()

    assert record.get("client_id") == "deployed"
    assert record.get("log_limit") == "50"


@pytest.mark.django_db
def test_override_defined_after_schema_build_is_ignored(schema, monkeypatch):
    OptionStore.objects.create(key=OPTION_NAME, value={"client_id": "stored"})
    monkeypatch.setenv("INFOMANIAK_OIDC_CLIENT_ID", "late")

    record = OptionSettings(OPTION_NAME, schema).load()

    assert schema["client_id"].disabled is False
    assert record.get("client_id") == "stored"
