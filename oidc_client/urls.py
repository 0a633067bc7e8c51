from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView


urlpatterns = [
    path("admin/", admin.site.urls),

    # OpenID Connect client settings (template views)
    path("settings/", include(("openid_settings.urls", "openid_settings"), namespace="openid_settings")),

    # Root → settings page
    path(
        "",
        RedirectView.as_view(
            pattern_name="openid_settings:page",
            permanent=False,
        ),
        {"slug": "openid-connect-infomaniak-settings"},
    ),
]
