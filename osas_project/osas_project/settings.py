"""
Django settings for osas_project.

Every deployment-specific value is read from the environment so the same
module serves development, cron hosts and the test suite.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


# =====================================================
# CORE
# =====================================================
SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "osas-dev-secret-key")
DEBUG = env_bool("DJANGO_DEBUG", False)
ALLOWED_HOSTS = os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",

    "academics",
    "organizations",
    "compliance",
    "notifications",
    "monitoring",
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

ROOT_URLCONF = "osas_project.urls"

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

WSGI_APPLICATION = "osas_project.wsgi.application"


# =====================================================
# DATABASE
# =====================================================
DATABASES = {
    "default": {
        "ENGINE": os.environ.get("DB_ENGINE", "django.db.backends.sqlite3"),
        "NAME": os.environ.get("DB_NAME", str(BASE_DIR / "db.sqlite3")),
        "USER": os.environ.get("DB_USER", ""),
        "PASSWORD": os.environ.get("DB_PASSWORD", ""),
        "HOST": os.environ.get("DB_HOST", ""),
        "PORT": os.environ.get("DB_PORT", ""),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


# =====================================================
# TIME
# =====================================================
LANGUAGE_CODE = "en-us"
TIME_ZONE = os.environ.get("TIME_ZONE", "Asia/Manila")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"


# =====================================================
# EMAIL
# =====================================================
EMAIL_BACKEND = os.environ.get(
    "EMAIL_BACKEND", "django.core.mail.backends.smtp.EmailBackend"
)
EMAIL_HOST = os.environ.get("EMAIL_HOST", "smtp.gmail.com")
EMAIL_PORT = int(os.environ.get("EMAIL_PORT", "587"))
EMAIL_USE_TLS = env_bool("EMAIL_USE_TLS", True)
EMAIL_HOST_USER = os.environ.get("EMAIL_HOST_USER", "")
EMAIL_HOST_PASSWORD = os.environ.get("EMAIL_HOST_PASSWORD", "")
DEFAULT_FROM_EMAIL = os.environ.get("DEFAULT_FROM_EMAIL", "OSAS <noreply@osas.local>")


# =====================================================
# SCHEDULED PIPELINES
# =====================================================
ENABLE_SCHEDULER = env_bool("ENABLE_SCHEDULER", False)

# Reminders become eligible this many minutes before a resubmission deadline
REMINDER_LOOKAHEAD_MINUTES = int(os.environ.get("REMINDER_LOOKAHEAD_MINUTES", "60"))

# Seconds a single reminder email may block on the SMTP connection
REMINDER_EMAIL_TIMEOUT = int(os.environ.get("REMINDER_EMAIL_TIMEOUT", "10"))

REMINDER_INTERVAL_MINUTES = int(os.environ.get("REMINDER_INTERVAL_MINUTES", "5"))
CALENDAR_CHECK_HOUR = int(os.environ.get("CALENDAR_CHECK_HOUR", "0"))
CALENDAR_CHECK_MINUTE = int(os.environ.get("CALENDAR_CHECK_MINUTE", "5"))

LOG_DIR = Path(os.environ.get("LOG_DIR", BASE_DIR / "logs"))
LOG_DIR.mkdir(parents=True, exist_ok=True)
RUN_LOG_FILE = Path(os.environ.get("RUN_LOG_FILE", LOG_DIR / "pipeline_runs.log"))


# =====================================================
# LOGGING
# =====================================================
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "timestamped": {
            "format": "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "timestamped",
        },
        "run_log": {
            "class": "logging.FileHandler",
            "filename": str(RUN_LOG_FILE),
            "mode": "a",
            "encoding": "utf-8",
            "formatter": "timestamped",
        },
    },
    "loggers": {
        "osas.runs": {
            "handlers": ["console", "run_log"],
            "level": "INFO",
            "propagate": False,
        },
        "academics": {"handlers": ["console"], "level": "INFO"},
        "compliance": {"handlers": ["console"], "level": "INFO"},
        "notifications": {"handlers": ["console"], "level": "INFO"},
        "monitoring": {"handlers": ["console"], "level": "INFO"},
    },
}
