"""
Base Django settings for the License Authority.

These settings are shared across all environments.
Environment-specific overrides are in dev.py, test.py, and prod.py
"""
import os
from pathlib import Path

from .logging import get_logging_config

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get(
    "SECRET_KEY", "django-insecure-3v$k7q!b0r2z@x9w^m1c&e8t)u5j(p4n+y6s#h=d-a*f"
)

ALLOWED_HOSTS = []

# Application definition
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "django.contrib.staticfiles",
    # Third party
    "rest_framework",
    "drf_spectacular",
    # Local apps
    "LicenseAuthority.apps.LicenseAuthorityConfig",
    "core",
    "licenses",
    "api",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    # Custom middleware
    "core.middleware.observability.ObservabilityMiddleware",
]

ROOT_URLCONF = "LicenseAuthority.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
            ],
        },
    },
]

WSGI_APPLICATION = "LicenseAuthority.wsgi.application"
ASGI_APPLICATION = "LicenseAuthority.asgi.application"

# Database
# Licenses are never persisted; an in-memory database satisfies the
# framework apps that expect one.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Static files (CSS, JavaScript, Images)
STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# REST Framework
REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [],
    "UNAUTHENTICATED_USER": None,
    "EXCEPTION_HANDLER": "api.exceptions.custom_exception_handler",
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

# drf-spectacular settings
SPECTACULAR_SETTINGS = {
    "TITLE": "License Authority API",
    "DESCRIPTION": (
        "Issues, validates and renews software licenses signed by an external "
        "key-management service. The service is stateless: every license is "
        "returned to the caller in full and must be supplied back in full."
    ),
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    "COMPONENT_SPLIT_REQUEST": True,
    "SCHEMA_PATH_PREFIX": "/api/v1",
    "TAGS": [
        {"name": "License API", "description": "License issuance, validation and renewal"},
        {"name": "Diagnostics", "description": "Read-only signer diagnostics"},
    ],
}

# Key-management signer
LICENSE_SIGNER = {
    "BACKEND": os.environ.get("SIGNER_BACKEND", "vault"),
    "ADDRESS": os.environ.get("VAULT_ADDR", "http://127.0.0.1:8200"),
    "TOKEN": os.environ.get("VAULT_TOKEN", ""),
    "KEY_NAME": os.environ.get("SIGNING_KEY_NAME", "license-signing-key"),
    "MOUNT": os.environ.get("VAULT_TRANSIT_MOUNT", "transit"),
    "TIMEOUT_SECONDS": os.environ.get("SIGNER_TIMEOUT_SECONDS", "5"),
    "PRIVATE_KEY": os.environ.get("SIGNER_PRIVATE_KEY", ""),
}

# Observability
LOGGING = get_logging_config(os.environ.get("ENVIRONMENT", "development"))
