"""Tests for the database-backed debug log."""

from __future__ import annotations

import pytest

from openid_settings.logger import DEFAULT_LOG_LIMIT, OptionLogger
from openid_settings.models import LogEntry
from openid_settings.options import SettingsRecord

pytestmark = pytest.mark.django_db


def _record(**values):
    return SettingsRecord(["enable_logging", "log_limit"], values).ensure_keys()


def test_disabled_logger_writes_nothing():
    oidc_logger = OptionLogger(_record(enable_logging="0"))

    assert oidc_logger.is_enabled() is False
    assert oidc_logger.log("hello") is None
    assert LogEntry.objects.count() == 0


def test_enabled_logger_writes_entry():
    oidc_logger = OptionLogger(_record(enable_logging="1"))

    entry = oidc_logger.log({"changed": ["client_id"]}, "settings")

    assert entry.type == "settings"
    assert LogEntry.objects.get().message == {"changed": ["client_id"]}


def test_log_is_trimmed_to_limit():
    oidc_logger = OptionLogger(_record(enable_logging="1", log_limit="3"))

    for i in range(5):
        oidc_logger.log(f"message {i}")

    messages = list(LogEntry.objects.values_list("message", flat=True))
    assert messages == ["message 4", "message 3", "message 2"]


@pytest.mark.parametrize("limit", ["", "0", "abc", None])
def test_invalid_limit_uses_default(limit):
    assert OptionLogger(_record(log_limit=limit)).log_limit == DEFAULT_LOG_LIMIT


def test_logs_table_escapes_messages():
    oidc_logger = OptionLogger(_record(enable_logging="1"))
    oidc_logger.log("<script>alert(1)</script>", "error")

    html = oidc_logger.get_logs_table()

    assert html.startswith('<table id="logger-table"')
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "<td>error</td>" in html
