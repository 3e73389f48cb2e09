"""Django settings for the ballot ledger service.

All deployment-specific values come from the environment.
"""

import os
from pathlib import Path
from urllib.parse import urlparse

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


SECRET_KEY: str = os.getenv("SECRET_KEY", "insecure-development-key")
DEBUG: bool = _env_bool("DEBUG")
ALLOWED_HOSTS: list[str] = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",") if h.strip()]

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "core.apps.CoreConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
]

ROOT_URLCONF = "config.urls"
WSGI_APPLICATION = "config.wsgi.application"
LOGIN_URL = "election-login"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

DATABASES: dict[str, dict[str, object]] = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.getenv("DATABASE_PATH", str(BASE_DIR / "db.sqlite3")),
        # Writers take the database lock at BEGIN so read-check-write
        # sequences cannot interleave.
        "OPTIONS": {"transaction_mode": "IMMEDIATE"},
        # A file, not the shared in-memory database, so concurrent test
        # writers wait on the lock instead of failing with "table is locked".
        "TEST": {"NAME": os.getenv("DATABASE_TEST_PATH", str(BASE_DIR / "test_db.sqlite3"))},
    },
}

if os.getenv("DATABASE_URL"):
    database_url: str = os.environ["DATABASE_URL"]
    parsed = urlparse(database_url)

    if parsed.scheme == "mysql":
        DATABASES["default"] = {
            "ENGINE": "django.db.backends.mysql",
            "NAME": parsed.path.lstrip("/"),
            "USER": parsed.username,
            "PASSWORD": parsed.password,
            "HOST": parsed.hostname,
            "PORT": parsed.port or "3306",
        }
    elif parsed.scheme in {"postgres", "postgresql"}:
        DATABASES["default"] = {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": parsed.path.lstrip("/"),
            "USER": parsed.username,
            "PASSWORD": parsed.password,
            "HOST": parsed.hostname,
            "PORT": parsed.port or "5432",
        }
    else:
        raise ValueError(f"For DATABASE_URL, only mysql and postgres are supported, not {parsed.scheme!r}.")

LANGUAGE_CODE = "en-us"
TIME_ZONE: str = os.getenv("TIME_ZONE", "UTC")
USE_I18N = False
USE_TZ = True

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "filters": {
        "health_endpoint": {
            "()": "config.logging_filters.HealthEndpointFilter",
        },
    },
    "formatters": {
        "default": {
            "format": "[{asctime}] {levelname} {name}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "stderr": {
            "class": "logging.StreamHandler",
            "formatter": "default",
        },
    },
    "loggers": {
        "django.server": {
            "handlers": ["stderr"],
            "level": "INFO",
            "filters": ["health_endpoint"],
            "propagate": False,
        },
        "core": {
            "handlers": ["stderr"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
    },
    "root": {
        "handlers": ["stderr"],
        "level": "WARNING",
    },
}

# The single principal allowed to run lifecycle and approval operations.
ELECTION_ADMIN_PRINCIPAL: str = os.getenv(
    "ELECTION_ADMIN_PRINCIPAL",
    "0x00000000000000000000000000000000000000a1",
)
ELECTION_IDENTITY_PATTERN: str = os.getenv("ELECTION_IDENTITY_PATTERN", r"^0x[0-9a-fA-F]{40}$")
ELECTION_NAME_MAX_LENGTH: int = int(os.getenv("ELECTION_NAME_MAX_LENGTH", 255))
