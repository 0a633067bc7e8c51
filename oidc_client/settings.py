from pathlib import Path
import os
from dotenv import load_dotenv


BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / ".env")


SECRET_KEY = os.getenv(
    "DJANGO_SECRET_KEY",
    "django-insecure-oidc-client-settings-development-key",
)
DEBUG = os.getenv("DEBUG", "True").lower() in ("true", "1", "yes")
ALLOWED_HOSTS = os.getenv("DJANGO_ALLOWED_HOSTS", "*,localhost,127.0.0.1").split(",")

INSTALLED_APPS = [
    # Django Defined
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # LocalApps (AppConfig registers the settings page in ready())
    "openid_settings.apps.OpenIDSettingsConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "oidc_client.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
                "openid_settings.context_processors.settings_menu",
            ],
        },
    },
]

WSGI_APPLICATION = "oidc_client.wsgi.application"
ASGI_APPLICATION = "oidc_client.asgi.application"


# Database
# https://docs.djangoproject.com/en/5.2/ref/settings/#databases

DATABASES = {
    "default": {
        "ENGINE": os.getenv("DB_ENGINE", "django.db.backends.sqlite3"),
        "NAME": os.getenv("DB_NAME", str(BASE_DIR / "db.sqlite3")),
        "USER": os.getenv("DB_USER", ""),
        "PASSWORD": os.getenv("DB_PASSWORD", ""),
        "HOST": os.getenv("DB_HOST", ""),
        "PORT": os.getenv("DB_PORT", ""),
    }
}


LANGUAGE_CODE = "en-us"
TIME_ZONE = os.getenv("TIME_ZONE", "Europe/Zurich")
USE_I18N = True
USE_TZ = True

STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Session-auth redirects
LOGIN_URL = "admin:login"

# Absolute URLs (redirect URI shown on the settings page)
SITE_BASE_URL = os.getenv("SITE_BASE_URL", "http://127.0.0.1:8000")

# -------------------------------------------------------------------
# OpenID Connect client settings page
# -------------------------------------------------------------------
OIDC_OPTION_NAME = os.getenv("OIDC_OPTION_NAME", "openid_connect_infomaniak_settings")
OIDC_SETTINGS_PAGE_SLUG = "openid-connect-infomaniak-settings"
# Permission a user needs to see and save the settings page
OIDC_SETTINGS_CAPABILITY = "openid_settings.change_optionstore"
# Dotted paths to callables that receive and return the ordered field specs
OIDC_SETTINGS_FIELDS_FILTERS = []
OIDC_DEFAULT_REDIRECT_PATH = "/admin-ajax/?action=openid-connect-authorize"
OIDC_ALTERNATE_REDIRECT_PATH = "/openid-connect-authorize"

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "loggers": {
        "oidc": {
            "handlers": ["console"],
            "level": os.getenv("OIDC_LOG_LEVEL", "INFO"),
        },
    },
}
