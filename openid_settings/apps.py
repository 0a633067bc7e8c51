from django.apps import AppConfig


class OpenIDSettingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "openid_settings"
    verbose_name = "OpenID Connect client settings"

    def ready(self):
        # Register the settings page with the default host once the app registry is ready
        from .host import site
        from .page import register_all

        self.settings_page = register_all(site)
