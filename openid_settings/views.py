# openid_settings/views.py
import logging

from django.conf import settings
from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.http import Http404
from django.shortcuts import redirect
from django.utils.http import url_has_allowed_host_and_scheme
from django.utils.translation import gettext as _
from django.views.decorators.http import require_GET, require_POST

from .host import site

logger = logging.getLogger("oidc")


@login_required
@require_GET
def page(request, slug):
    settings_page = site.get_page(slug)
    site.check_capability(request.user, settings_page.capability)
    return settings_page.render_callback(request)


@login_required
@require_POST
def options(request):
    site.check_capability(
        request.user, getattr(settings, "OIDC_SETTINGS_CAPABILITY", "openid_settings.change_optionstore")
    )

    group = request.POST.get("option_page") or ""
    if not group:
        raise Http404("Missing option_page.")
    site.save_option(group, request.POST)
    messages.success(request, _("Settings saved."))
    logger.info("settings.page_saved group=%s by=%s", group, request.user.pk)

    next_url = request.POST.get("next") or ""
    if not url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
        next_url = "/"
    return redirect(next_url)
