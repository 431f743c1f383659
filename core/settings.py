"""
Django settings for the navmenu development project.

Reads configuration from environment variables (with sensible defaults for
local development).  In production, set these in a `.env` file or in the
process environment.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

# Load environment variables from .env file in project root
from dotenv import load_dotenv

load_dotenv(BASE_DIR / ".env")


# ==============================================================================
# ENVIRONMENT HELPERS
# ==============================================================================


def _env(key, default=""):
    """Return an environment variable or *default*."""
    return os.environ.get(key, default)


def _env_bool(key, default=False):
    """Return an environment variable as a boolean."""
    return _env(key, str(default)).lower() in ("true", "1", "yes")


def _env_list(key, default="", sep=","):
    """Return an environment variable as a list of strings."""
    raw = _env(key, default)
    return [item.strip() for item in raw.split(sep) if item.strip()]


# ==============================================================================
# SECURITY
# ==============================================================================

DEBUG = _env_bool("DEBUG", False)

SECRET_KEY = _env("SECRET_KEY") or "insecure-secret-key-do-NOT-use-in-prod"

ALLOWED_HOSTS = _env_list("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver")


# ==============================================================================
# APPLICATIONS
# ==============================================================================

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "navmenu",
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

ROOT_URLCONF = "core.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
                "navmenu.context_processors.menus",
            ],
        },
    },
]


# ==============================================================================
# DATABASE
# ==============================================================================

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


# ==============================================================================
# INTERNATIONALIZATION
# ==============================================================================

LANGUAGE_CODE = _env("LANGUAGE_CODE", "en-us")
TIME_ZONE = _env("TIME_ZONE", "UTC")
USE_I18N = True
USE_TZ = True


# ==============================================================================
# MENUS
# ==============================================================================

# Menus declared here can be extended or overridden by the TOML file below.
NAVMENU_MENUS = {
    "main": {
        "menuItems": [
            {"label": "Dashboard", "package": "demo", "controller": "dashboard", "icon": "home"},
            {"label": ""},
            {"label": "Inventory"},
            {
                "label": "Assets",
                "package": "demo",
                "controller": "assets",
                "action": "list",
                "icon": "box",
                "menuItems": [
                    {"label": "All assets", "package": "demo", "controller": "assets", "action": "list"},
                    {"label": "New asset", "package": "demo", "controller": "assets", "action": "new"},
                ],
            },
            {"label": "Users", "package": "demo", "controller": "users", "action": "list", "badge": "beta"},
        ],
    },
}

NAVMENU_CONFIG_FILE = _env("NAVMENU_CONFIG_FILE", "") or (BASE_DIR / "menus.toml")

# URL names are split into controller and action on this separator.
NAVMENU_ACTION_SEPARATOR = _env("NAVMENU_ACTION_SEPARATOR", "_")

# Dotted path to a callable replacing model instances in target arguments
# by their identity.  Empty means navmenu.persistence.convert_objects_to_identity_arrays.
NAVMENU_IDENTITY_NORMALIZER = _env("NAVMENU_IDENTITY_NORMALIZER", "")


# ==============================================================================
# LOGGING
# ==============================================================================

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "[{asctime}] {levelname} {name}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": _env("DJANGO_LOG_LEVEL", "INFO"),
        },
        "navmenu": {
            "handlers": ["console"],
            "level": _env("APP_LOG_LEVEL", "INFO"),
        },
    },
}
