from django.contrib import admin
from .models import LogEntry, OptionStore


@admin.register(OptionStore)
class OptionStoreAdmin(admin.ModelAdmin):
    list_display = ("key", "updated_at")
    search_fields = ("key",)
    readonly_fields = ("updated_at",)


@admin.register(LogEntry)
class LogEntryAdmin(admin.ModelAdmin):
    list_display = ("created_at", "type", "request_uri")
    list_filter = ("type",)
    search_fields = ("message", "request_uri")
    readonly_fields = ("created_at",)
