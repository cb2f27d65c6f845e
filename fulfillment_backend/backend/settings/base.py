"""
PATH: backend/settings/base.py

BASE SETTINGS (shared by dev + prod)

Operational maturity:
- django-environ for every tunable (reads .env when present)
- Sentry (optional): error visibility in production
- Expedited exchange toggle: allow ops to switch automatic
  exchange reimbursements on/off without a deploy
"""

from __future__ import annotations

import sys
from pathlib import Path

import environ

# -----------------------------------------
# BASE DIRECTORY
# -----------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# -----------------------------------------
# TEST MODE DETECTION
# -----------------------------------------
TESTING = "test" in sys.argv or "pytest" in sys.modules

# -----------------------------------------
# ENV (django-environ)
# -----------------------------------------
env = environ.Env(
    DEBUG=(bool, True),
    SECRET_KEY=(str, ""),
    TIME_ZONE=(str, "UTC"),
    ALLOWED_HOSTS=(list, ["localhost", "127.0.0.1"]),
    DATABASE_URL=(str, f"sqlite:///{BASE_DIR / 'db.sqlite3'}"),
    LOG_LEVEL=(str, "INFO"),
    # Sentry (optional; enable by setting SENTRY_DSN)
    SENTRY_DSN=(str, ""),
    SENTRY_ENVIRONMENT=(str, "development"),
    SENTRY_TRACES_SAMPLE_RATE=(float, 0.0),
    SENTRY_SEND_PII=(bool, False),
    # Returns workflow
    EXPEDITED_EXCHANGES_ENABLED=(bool, False),
    PRE_EXPEDITED_EXCHANGE_HOOKS=(list, []),
    DEFAULT_CURRENCY=(str, "USD"),
    RETURN_ELIGIBILITY_DAYS=(int, 365),
    NUMBER_GENERATION_MAX_ATTEMPTS=(int, 10),
)

# -----------------------------------------
# LOAD .env
# -----------------------------------------
env_file_1 = BASE_DIR / ".env"
env_file_2 = BASE_DIR.parent / ".env"

if env_file_1.exists():
    env.read_env(str(env_file_1))
elif env_file_2.exists():
    env.read_env(str(env_file_2))

# -----------------------------------------
# CORE SECURITY
# -----------------------------------------
SECRET_KEY = (env("SECRET_KEY") or "dev-insecure-change-me").strip()
DEBUG = env.bool("DEBUG")
ALLOWED_HOSTS = env.list("ALLOWED_HOSTS")

# -----------------------------------------
# I18N / TZ
# -----------------------------------------
LANGUAGE_CODE = "en-us"
TIME_ZONE = (env("TIME_ZONE") or "UTC").strip()
USE_I18N = True
USE_TZ = True

# -----------------------------------------
# INSTALLED APPS
# -----------------------------------------
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "orders.apps.OrdersConfig",
    "returns.apps.ReturnsConfig",
]

MIDDLEWARE: list[str] = []

# -----------------------------------------
# DATABASE
# -----------------------------------------
DATABASES = {
    "default": env.db("DATABASE_URL"),
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# -----------------------------------------
# RETURNS WORKFLOW
# -----------------------------------------
# When enabled, every save of a return authorization runs the expedited
# exchange pipeline (accept exchange items -> reimburse immediately).
EXPEDITED_EXCHANGES_ENABLED = env.bool("EXPEDITED_EXCHANGES_ENABLED")

# Dotted paths to callables run (in order) before an exchange is reimbursed.
PRE_EXPEDITED_EXCHANGE_HOOKS = tuple(env.list("PRE_EXPEDITED_EXCHANGE_HOOKS"))

# Fallback currency for authorizations that have no order attached.
DEFAULT_CURRENCY = (env("DEFAULT_CURRENCY") or "USD").strip().upper()

# Return items are only acceptable this many days after order completion.
RETURN_ELIGIBILITY_DAYS = env.int("RETURN_ELIGIBILITY_DAYS")

# Retry budget for RA/RI/CR number generation.
NUMBER_GENERATION_MAX_ATTEMPTS = env.int("NUMBER_GENERATION_MAX_ATTEMPTS")

# -----------------------------------------
# LOGGING
# -----------------------------------------
LOG_LEVEL = (env("LOG_LEVEL") or "INFO").strip().upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "loggers": {
        "orders": {
            "handlers": ["console"],
            "level": "WARNING" if TESTING else LOG_LEVEL,
        },
        "returns": {
            "handlers": ["console"],
            "level": "WARNING" if TESTING else LOG_LEVEL,
        },
    },
}

# -----------------------------------------
# SENTRY (optional)
# -----------------------------------------
SENTRY_DSN = (env("SENTRY_DSN") or "").strip()
SENTRY_ENVIRONMENT = (env("SENTRY_ENVIRONMENT") or "development").strip()
SENTRY_TRACES_SAMPLE_RATE = float(env("SENTRY_TRACES_SAMPLE_RATE"))
SENTRY_SEND_PII = env.bool("SENTRY_SEND_PII")

if SENTRY_DSN:
    import sentry_sdk
    from sentry_sdk.integrations.django import DjangoIntegration

    sentry_sdk.init(
        dsn=SENTRY_DSN,
        environment=SENTRY_ENVIRONMENT,
        integrations=[DjangoIntegration()],
        traces_sample_rate=SENTRY_TRACES_SAMPLE_RATE,
        send_default_pii=SENTRY_SEND_PII,
    )
