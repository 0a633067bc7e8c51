# openid_settings/context_processors.py
from .host import site


def settings_menu(request):
    u = getattr(request, "user", None)
    return {"settings_menu": site.menu_pages(u)}
