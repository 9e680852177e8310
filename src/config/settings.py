"""Django settings for pool routes project."""

from __future__ import annotations

import os

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "change-me-in-production")
DEBUG = os.getenv("DJANGO_DEBUG", "1") == "1"
ALLOWED_HOSTS = [host for host in os.getenv("DJANGO_ALLOWED_HOSTS", "").split(",") if host]

INSTALLED_APPS = [
    "pool_routes",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "config.urls"

WSGI_APPLICATION = "config.wsgi.application"

# Sequencing keeps no state; schedules are persisted by the calling application.
DATABASES: dict[str, dict[str, object]] = {}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "pool_routes": {
            "level": LOG_LEVEL,
        },
        "httpx": {
            "level": "WARNING",
        },
    },
}

DIRECTIONS_PROVIDER = os.getenv("DIRECTIONS_PROVIDER", "google")
DIRECTIONS_TIMEOUT_SECONDS = float(os.getenv("DIRECTIONS_TIMEOUT_SECONDS", "12"))
DIRECTIONS_RETRY_COUNT = int(os.getenv("DIRECTIONS_RETRY_COUNT", "2"))

GOOGLE_MAPS_API_KEY = os.getenv("GOOGLE_MAPS_API_KEY", "")
GOOGLE_DIRECTIONS_BASE_URL = os.getenv(
    "GOOGLE_DIRECTIONS_BASE_URL", "https://maps.googleapis.com/maps/api/directions"
)

AZURE_MAPS_SUBSCRIPTION_KEY = os.getenv("AZURE_MAPS_SUBSCRIPTION_KEY", "")
AZURE_MAPS_BASE_URL = os.getenv("AZURE_MAPS_BASE_URL", "https://atlas.microsoft.com")
AZURE_MAPS_API_VERSION = os.getenv("AZURE_MAPS_API_VERSION", "2025-01-01")
