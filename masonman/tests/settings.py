"""
Django settings for Masonman tests.

Includes all apps needed to run the full Masonman test suite.

Runs on in-memory SQLite by default. Set MASONMAN_TEST_DB_NAME (plus the
optional USER/PASSWORD/HOST/PORT variables) to run against PostgreSQL,
which is needed for the row-lock concurrency tests.
"""

import os

SECRET_KEY = "test-secret-key-for-masonman-tests"

DEBUG = True

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "django.contrib.sessions",
    "django.contrib.messages",
    "masonman",
]

MIDDLEWARE = [
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
]

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

if os.getenv("MASONMAN_TEST_DB_NAME"):
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": os.getenv("MASONMAN_TEST_DB_NAME"),
            "USER": os.getenv("MASONMAN_TEST_DB_USER", "postgres"),
            "PASSWORD": os.getenv("MASONMAN_TEST_DB_PASSWORD", ""),
            "HOST": os.getenv("MASONMAN_TEST_DB_HOST", "localhost"),
            "PORT": os.getenv("MASONMAN_TEST_DB_PORT", "5432"),
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": ":memory:",
        }
    }

ROOT_URLCONF = "masonman.tests.urls"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

USE_TZ = True
TIME_ZONE = "Asia/Kolkata"

# Explicit so tests don't depend on the built-in defaults
MASONMAN = {
    "SLAB_BONUSES": ((200, 500), (500, 1500), (1000, 4000)),
    "REFERRAL_MILESTONE_BAGS": 200,
    "REFERRAL_BONUS_POINTS": 1000,
}
