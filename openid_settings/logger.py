# openid_settings/logger.py
from __future__ import annotations

import json
import logging
from typing import Any

from django.utils import timezone
from django.utils.html import format_html, format_html_join
from django.utils.safestring import SafeString
from django.utils.translation import gettext as _

from .models import LogEntry
from .options import SettingsRecord
from .utils import coerce_bool, intval

logger = logging.getLogger("oidc")

DEFAULT_LOG_LIMIT = 1000


class OptionLogger:
    """
    Very small debug log kept in the database, written only while the
    `enable_logging` setting is on and trimmed to `log_limit` rows.
    """

    def __init__(self, settings: SettingsRecord):
        self.settings = settings

    def is_enabled(self) -> bool:
        return coerce_bool(self.settings.get("enable_logging"))

    @property
    def log_limit(self) -> int:
        limit = intval(self.settings.get("log_limit"))
        return limit if limit > 0 else DEFAULT_LOG_LIMIT

    def log(self, message: Any, type: str = "none", request=None) -> LogEntry | None:
        if not self.is_enabled():
            return None
        entry = LogEntry.objects.create(
            type=type[:64],
            message=message,
            request_uri=request.get_full_path() if request is not None else "",
        )
        logger.debug("oidc.log type=%s id=%s", type, entry.pk)
        self._trim()
        return entry

    def _trim(self) -> None:
        keep = LogEntry.objects.values_list("pk", flat=True)[: self.log_limit]
        LogEntry.objects.exclude(pk__in=list(keep)).delete()

    def get_logs(self):
        return LogEntry.objects.all()[: self.log_limit]

    def get_logs_table(self) -> SafeString:
        def _message(value):
            if isinstance(value, str):
                return value
            try:
                return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
            except (TypeError, ValueError):
                return str(value)

        rows = format_html_join(
            "",
            "<tr><td>{}</td><td>{}</td><td>{}</td><td><pre>{}</pre></td></tr>",
            (
                (
                    e.created_at.astimezone(timezone.get_current_timezone()).strftime("%Y-%m-%d %H:%M:%S"),
                    e.type,
                    e.request_uri,
                    _message(e.message),
                )
                for e in self.get_logs()
            ),
        )
        return format_html(
            '<table id="logger-table" class="widefat">'
            "<thead><tr><th>{}</th><th>{}</th><th>{}</th><th>{}</th></tr></thead>"
            "<tbody>{}</tbody></table>",
            _("Date"),
            _("Type"),
            _("Request URI"),
            _("Message"),
            rows,
        )
