# openid_settings/fields.py
from __future__ import annotations

from collections import OrderedDict
from collections.abc import Mapping
from dataclasses import dataclass, field as dc_field
from typing import Any, Callable, Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string
from django.utils.text import format_lazy
from django.utils.translation import gettext_lazy as _

from .utils import coerce_bool, is_defined

FIELD_TYPES = ("text", "checkbox", "select", "number")

SECTIONS = OrderedDict(
    [
        ("client_settings", _("Client Settings")),
        ("user_settings", _("User Settings")),
        ("authorization_settings", _("Authorization Settings")),
        ("log_settings", _("Log Settings")),
    ]
)

FieldsFilter = Callable[[Mapping], Mapping]


class SchemaError(ImproperlyConfigured):
    """A field spec (usually coming from a fields filter) cannot be used."""


@dataclass(frozen=True)
class FieldDefinition:
    key: str
    name: str
    title: str
    type: str
    section: str
    description: str = ""
    example: Any = None
    options: Optional["OrderedDict[str, str]"] = None
    disabled: bool = False
    readonly: bool = False
    # Deployment override (Django setting / env var) that locks this field
    override: Optional[str] = None
    # Whether that override was defined when the schema was built
    overridden: bool = False
    extra: dict = dc_field(default_factory=dict)

    @classmethod
    def from_spec(cls, key: str, spec: Mapping, option_name: str) -> "FieldDefinition":
        if not isinstance(spec, Mapping):
            raise SchemaError(f"Settings field '{key}' must be a mapping, got {type(spec).__name__}.")
        for required in ("title", "type", "section"):
            if not spec.get(required):
                raise SchemaError(f"Settings field '{key}' is missing '{required}'.")
        if spec["type"] == "select" and not isinstance(spec.get("options"), Mapping):
            raise SchemaError(f"Select field '{key}' needs an 'options' mapping.")

        known = {"title", "description", "example", "type", "section", "options", "disabled", "readonly", "override"}
        override = spec.get("override")
        overridden = is_defined(override)
        options = spec.get("options")
        return cls(
            key=key,
            name=f"{option_name}[{key}]",
            title=spec["title"],
            type=str(spec["type"]),
            section=str(spec["section"]),
            description=spec.get("description", ""),
            example=spec.get("example"),
            options=OrderedDict(options) if options is not None else None,
            disabled=coerce_bool(spec.get("disabled")) or overridden,
            readonly=coerce_bool(spec.get("readonly")),
            override=override,
            overridden=overridden,
            extra={k: v for k, v in spec.items() if k not in known},
        )


def get_settings_fields() -> "OrderedDict[str, dict[str, Any]]":
    """
    Simple settings fields have:

    - title
    - description
    - type ( checkbox | text | select | number )
    - section ( client_settings | user_settings | authorization_settings | log_settings )
    - example (optional, shown beneath the description wrapped in <code>)
    - override (optional name of a setting/env var that locks the field)
    """
    return OrderedDict(
        [
            ("login_type", {
                "title": _("Login Type"),
                "description": _("Select how the client (login form) should provide login options."),
                "type": "select",
                "options": OrderedDict([
                    ("button", _("OpenID Connect button on login form")),
                    ("auto", _("Auto Login - SSO")),
                ]),
                "override": "INFOMANIAK_OIDC_LOGIN_TYPE",
                "section": "client_settings",
            }),
            ("client_id", {
                "title": _("Client ID"),
                "description": _("The ID this client will be recognized as when connecting the to Identity provider server."),
                "example": "my-client-id",
                "type": "text",
                "override": "INFOMANIAK_OIDC_CLIENT_ID",
                "section": "client_settings",
            }),
            ("client_secret", {
                "title": _("Client Secret Key"),
                "description": _("Arbitrary secret key the server expects from this client. Can be anything, but should be very unique."),
                "type": "text",
                "override": "INFOMANIAK_OIDC_CLIENT_SECRET",
                "section": "client_settings",
            }),
            ("scope", {
                "title": _("OpenID Scope"),
                "description": _("Space separated list of scopes this client should access."),
                "example": "email profile openid",
                "type": "text",
                "override": "INFOMANIAK_OIDC_CLIENT_SCOPE",
                "section": "client_settings",
            }),
            ("endpoint_login", {
                "title": _("Login Endpoint URL"),
                "description": _("Identify provider authorization endpoint."),
                "type": "text",
                "disabled": True,
                "readonly": True,
                "section": "client_settings",
            }),
            ("endpoint_userinfo", {
                "title": _("Userinfo Endpoint URL"),
                "description": _("Identify provider User information endpoint."),
                "type": "text",
                "disabled": True,
                "readonly": True,
                "section": "client_settings",
            }),
            ("endpoint_token", {
                "title": _("Token Validation Endpoint URL"),
                "description": _("Identify provider token endpoint."),
                "type": "text",
                "disabled": True,
                "readonly": True,
                "section": "client_settings",
            }),
            ("acr_values", {
                "title": _("ACR values"),
                "description": _("Use a specific defined authentication contract from the IDP - optional."),
                "type": "text",
                "override": "INFOMANIAK_OIDC_ACR_VALUES",
                "section": "client_settings",
            }),
            ("identity_key", {
                "title": _("Identity Key"),
                "description": _(
                    "Where in the user claim array to find the user's identification data. "
                    "Possible standard values: preferred_username, name, or sub. "
                    "If you're having trouble, use \"sub\"."
                ),
                "example": "sub",
                "type": "text",
                "section": "client_settings",
            }),
            ("no_sslverify", {
                "title": _("Disable SSL Verify"),
                "description": format_lazy(
                    _(
                        "Do not require SSL verification during authorization. By default the HTTP client "
                        "verifies the SSL certificate to see if it is valid and issued by an accepted CA. "
                        "This setting disables that verification.{open}Not recommended for production sites.{close}"
                    ),
                    open="<br><strong>",
                    close="</strong>",
                ),
                "type": "checkbox",
                "section": "client_settings",
            }),
            ("http_request_timeout", {
                "title": _("HTTP Request Timeout"),
                "description": _("Set the timeout for requests made to the IDP. Default value is 5."),
                "example": 30,
                "type": "text",
                "section": "client_settings",
            }),
            ("enforce_privacy", {
                "title": _("Enforce Privacy"),
                "description": _("Require users be logged in to see the site."),
                "type": "checkbox",
                "override": "OIDC_ENFORCE_PRIVACY",
                "section": "authorization_settings",
            }),
            ("alternate_redirect_uri", {
                "title": _("Alternate Redirect URI"),
                "description": _(
                    "Provide an alternative redirect route. Useful if your server is causing issues "
                    "with the default redirect route."
                ),
                "type": "checkbox",
                "section": "authorization_settings",
            }),
            ("nickname_key", {
                "title": _("Nickname Key"),
                "description": _(
                    "Where in the user claim array to find the user's nickname. "
                    "Possible standard values: preferred_username, name, or sub."
                ),
                "example": "name",
                "type": "text",
                "section": "client_settings",
            }),
            ("email_format", {
                "title": _("Email Formatting"),
                "description": _(
                    "String from which the user's email address is built. "
                    "Specify \"{email}\" as long as the user claim contains an email claim."
                ),
                "example": "{email}",
                "type": "text",
                "section": "client_settings",
            }),
            ("displayname_format", {
                "title": _("Display Name Formatting"),
                "description": _("String from which the user's display name is built."),
                "example": "{given_name} {family_name}",
                "type": "text",
                "section": "client_settings",
            }),
            ("identify_with_username", {
                "title": _("Identify with User Name"),
                "description": _("If checked, the user's identity will be determined by the user name instead of the email address."),
                "type": "checkbox",
                "section": "client_settings",
            }),
            ("state_time_limit", {
                "title": _("State time limit"),
                "description": _("State valid time in seconds. Defaults to 180"),
                "type": "number",
                "section": "client_settings",
            }),
            ("token_refresh_enable", {
                "title": _("Enable Refresh Token"),
                "description": _("If checked, support refresh tokens used to obtain access tokens from supported IDPs."),
                "type": "checkbox",
                "section": "client_settings",
            }),
            ("link_existing_users", {
                "title": _("Link Existing Users"),
                "description": _(
                    "If an account already exists with the same identity as a newly-authenticated user "
                    "over OpenID Connect, login as that user instead of generating an error."
                ),
                "type": "checkbox",
                "override": "OIDC_LINK_EXISTING_USERS",
                "section": "user_settings",
            }),
            ("create_if_does_not_exist", {
                "title": _("Create user if does not exist"),
                "description": _(
                    "If the user identity is not linked to an existing user, it is created. "
                    "If this setting is not enabled, and if the user authenticates with an account which "
                    "is not linked to an existing user, then the authentication will fail."
                ),
                "type": "checkbox",
                "override": "OIDC_CREATE_IF_DOES_NOT_EXIST",
                "section": "user_settings",
            }),
            ("redirect_user_back", {
                "title": _("Redirect Back to Origin Page"),
                "description": _(
                    "After a successful OpenID Connect authentication, this will redirect the user back "
                    "to the page on which they clicked the OpenID Connect login button."
                ),
                "type": "checkbox",
                "override": "OIDC_REDIRECT_USER_BACK",
                "section": "user_settings",
            }),
            ("redirect_on_logout", {
                "title": _("Redirect to the login screen when session is expired"),
                "description": _(
                    "When enabled, this will automatically redirect the user back to the login page "
                    "if their access token has expired."
                ),
                "type": "checkbox",
                "override": "OIDC_REDIRECT_ON_LOGOUT",
                "section": "user_settings",
            }),
            ("enable_logging", {
                "title": _("Enable Logging"),
                "description": _("Very simple log messages for debugging purposes."),
                "type": "checkbox",
                "override": "OIDC_ENABLE_LOGGING",
                "section": "log_settings",
            }),
            ("log_limit", {
                "title": _("Log Limit"),
                "description": _(
                    "Number of items to keep in the log. These logs are stored in the database, "
                    "so space is limited."
                ),
                "type": "number",
                "override": "OIDC_LOG_LIMIT",
                "section": "log_settings",
            }),
        ]
    )


# ---------- fields filters ----------

_registered_filters: list = []


def register_fields_filter(func: FieldsFilter) -> FieldsFilter:
    """Register a callable that receives and returns the ordered field specs. Usable as a decorator."""
    if func not in _registered_filters:
        _registered_filters.append(func)
    return func


def unregister_fields_filter(func: FieldsFilter) -> None:
    if func in _registered_filters:
        _registered_filters.remove(func)


def get_fields_filters() -> list:
    paths = getattr(settings, "OIDC_SETTINGS_FIELDS_FILTERS", []) or []
    return list(_registered_filters) + [import_string(p) for p in paths]


def build_schema(option_name: str, filters: Optional[list] = None) -> "OrderedDict[str, FieldDefinition]":
    """
    Build the ordered field schema for `option_name`.
    Filters run in order on the raw specs, then every spec is validated and
    annotated with its key and storage-qualified name.
    """
    specs = get_settings_fields()
    for func in get_fields_filters() if filters is None else filters:
        specs = func(specs)
        if not isinstance(specs, Mapping):
            raise SchemaError(
                f"Fields filter {getattr(func, '__name__', func)!r} must return a mapping, "
                f"got {type(specs).__name__}."
            )

    schema = OrderedDict()
    for key, spec in specs.items():
        schema[str(key)] = FieldDefinition.from_spec(str(key), spec, option_name)
    return schema
