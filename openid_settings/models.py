# openid_settings/models.py
from django.db import models


class OptionStore(models.Model):
    """
    Named configuration blobs. One row per option name, the value is the
    flat key -> scalar mapping produced by the settings sanitizer, e.g.:
      - openid_connect_infomaniak_settings  ({"client_id": "...", ...})
    """

    key = models.CharField(max_length=191, unique=True)
    value = models.JSONField(default=dict, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.key


class LogEntry(models.Model):
    """
    Debug log row written by the OpenID Connect client when logging is
    enabled. Trimmed to the configured log limit on every write.
    """

    type = models.CharField(max_length=64, default="none")  # e.g. "settings", "login", "error"
    message = models.JSONField(default=str, blank=True)
    request_uri = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"[{self.created_at:%Y-%m-%d %H:%M:%S}] {self.type}"
