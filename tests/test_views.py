"""End-to-end tests of the settings page through the Django test client."""

from __future__ import annotations

import pytest
from django.contrib.auth.models import Permission
from django.urls import reverse

from openid_settings.models import OptionStore

from .conftest import OPTION_NAME, PAGE_SLUG
from .test_fields import CANONICAL_KEYS

pytestmark = pytest.mark.django_db

GROUP = f"{OPTION_NAME}-group"
PAGE_URL = f"/settings/{PAGE_SLUG}/"


def _submission(**values):
    data = {"option_page": GROUP, "next": PAGE_URL}
    for key, value in values.items():
        data[f"{OPTION_NAME}[{key}]"] = value
    return data


def test_anonymous_user_is_sent_to_login(client):
    response = client.get(PAGE_URL)

    assert response.status_code == 302
    assert "/admin/login/" in response["Location"]


def test_user_without_capability_is_forbidden(client, django_user_model):
    user = django_user_model.objects.create_user(username="viewer", password="pw")
    client.force_login(user)

    assert client.get(PAGE_URL).status_code == 403
    assert client.post(reverse("openid_settings:options"), _submission(client_id="x")).status_code == 403
    assert not OptionStore.objects.exists()


def test_user_with_permission_can_open_page(client, django_user_model):
    user = django_user_model.objects.create_user(username="operator", password="pw")
    user.user_permissions.add(Permission.objects.get(codename="change_optionstore"))
    client.force_login(user)

    assert client.get(PAGE_URL).status_code == 200


def test_page_renders_every_field(admin_client):
    response = admin_client.get(PAGE_URL)
    html = response.content.decode()

    assert response.status_code == 200
    for key in CANONICAL_KEYS:
        assert f'name="{OPTION_NAME}[{key}]"' in html
    assert 'name="csrfmiddlewaretoken"' in html
    assert "[infomaniak_connect_generic_login_button]" in html
    assert "[infomaniak_connect_generic_auth_url]" in html


def test_root_redirects_to_settings_page(admin_client):
    response = admin_client.get("/")

    assert response.status_code == 302
    assert response["Location"] == PAGE_URL


def test_unknown_page_is_404(admin_client):
    assert admin_client.get("/settings/does-not-exist/").status_code == 404


def test_options_requires_post(admin_client):
    assert admin_client.get(reverse("openid_settings:options")).status_code == 405


def test_unknown_group_is_404(admin_client):
    data = _submission(client_id="x")
    data["option_page"] = "other-group"

    assert admin_client.post(reverse("openid_settings:options"), data).status_code == 404


def test_submission_is_sanitized_and_stored(admin_client):
    data = _submission(client_id="  my-client  ", unknown_key="x")
    data["unknown_key"] = "x"

    response = admin_client.post(reverse("openid_settings:options"), data)

    assert response.status_code == 302
    assert response["Location"] == PAGE_URL
    stored = OptionStore.objects.get(key=OPTION_NAME).value
    assert set(stored) == set(CANONICAL_KEYS)
    assert stored["client_id"] == "my-client"
    assert "unknown_key" not in stored
    assert all(v == "" for k, v in stored.items() if k != "client_id")


def test_checkbox_shadow_input_and_checked_value(admin_client):
    data = _submission()
    data[f"{OPTION_NAME}[no_sslverify]"] = ["0", "1"]
    data[f"{OPTION_NAME}[enforce_privacy]"] = ["0"]

    admin_client.post(reverse("openid_settings:options"), data)

    stored = OptionStore.objects.get(key=OPTION_NAME).value
    assert stored["no_sslverify"] == "1"
    assert stored["enforce_privacy"] == "0"


def test_saved_values_show_on_next_render(admin_client):
    admin_client.post(
        reverse("openid_settings:options"),
        _submission(client_id="abc", login_type="auto", enable_logging="1"),
    )

    html = admin_client.get(PAGE_URL).content.decode()

    assert f'name="{OPTION_NAME}[client_id]" value="abc"' in html
    assert '<option value="auto" selected="selected">' in html
    assert 'id="logger-table"' in html
    assert "Settings saved." in html


def test_offsite_next_is_ignored(admin_client):
    data = _submission(client_id="abc")
    data["next"] = "https://evil.example.com/"

    response = admin_client.post(reverse("openid_settings:options"), data)

    assert response["Location"] == "/"
