import os
from pathlib import Path

import structlog
from django.core.exceptions import ImproperlyConfigured
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / ".env")


def get_env(var_name: str, default=None, required: bool = False):
    value = os.environ.get(var_name, default)
    if required and value in (None, ""):
        raise ImproperlyConfigured(f"Missing required environment variable: {var_name}")
    return value


def get_int_env(var_name: str, default: int) -> int:
    value = get_env(var_name, str(default))
    try:
        return int(value)
    except ValueError:
        raise ImproperlyConfigured(f"{var_name} must be an integer, got {value!r}")


# SECURITY
DEBUG = get_env("DJANGO_DEBUG", "True").lower() == "true"
SECRET_KEY = get_env("DJANGO_SECRET_KEY", required=not DEBUG) or "django-insecure-local-only"

ALLOWED_HOSTS = [
    host.strip()
    for host in get_env("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")
    if host.strip()
]


# Application definition
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "Accounts",
    "Field",
    "slots",
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

ROOT_URLCONF = "config.urls"

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

WSGI_APPLICATION = "config.wsgi.application"


# Database
DB_ENGINE = get_env("DB_ENGINE", "sqlite")

if DB_ENGINE == "postgresql":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": get_env("DB_NAME", required=True),
            "USER": get_env("DB_USER", required=True),
            "PASSWORD": get_env("DB_PASSWORD", required=True),
            "HOST": get_env("DB_HOST", "localhost"),
            "PORT": get_env("DB_PORT", "5432"),
        }
    }
elif DB_ENGINE == "sqlite":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": get_env("DB_NAME", str(BASE_DIR / "db.sqlite3")),
            # Atomic blocks take the write lock up front so admission is serialized
            "OPTIONS": {"transaction_mode": "IMMEDIATE"},
            "TEST": {"NAME": str(BASE_DIR / "test_db.sqlite3")},
        }
    }
else:
    raise ImproperlyConfigured(f"Unsupported DB_ENGINE: {DB_ENGINE}")


AUTH_USER_MODEL = "Accounts.User"

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
]


# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = get_env("DJANGO_TIME_ZONE", "Asia/Jakarta")
USE_I18N = True
USE_TZ = True

STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


# REST framework
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": (
        "rest_framework_simplejwt.authentication.JWTAuthentication",
    ),
    "DEFAULT_PERMISSION_CLASSES": (
        "rest_framework.permissions.IsAuthenticated",
    ),
    "EXCEPTION_HANDLER": "Field.exceptions.reservation_exception_handler",
    "DATE_FORMAT": "%Y-%m-%d",
}


# Reservation rules
RESERVATION_EXPIRY_MINUTES = get_int_env("RESERVATION_EXPIRY_MINUTES", 15)
BOOKING_HORIZON_DAYS = get_int_env("BOOKING_HORIZON_DAYS", 7)
RESERVATION_MIN_HOURS = get_int_env("RESERVATION_MIN_HOURS", 1)
RESERVATION_MAX_HOURS = get_int_env("RESERVATION_MAX_HOURS", 4)
# "start_hour" or "hourly", see slots.pricing.PricingPolicy
RESERVATION_PRICING_POLICY = get_env("RESERVATION_PRICING_POLICY", "start_hour")


# Celery
CELERY_BROKER_URL = get_env("CELERY_BROKER_URL", "redis://localhost:6379/0")
CELERY_TIMEZONE = TIME_ZONE
CELERY_TASK_ALWAYS_EAGER = get_env("CELERY_TASK_ALWAYS_EAGER", "False").lower() == "true"

CELERY_BEAT_SCHEDULE = {
    # Persist expiry of unpaid reservations; reads already treat them as expired
    "expire-pending-reservations": {
        "task": "Field.tasks.expire_pending_reservations",
        "schedule": 60.0,
        "options": {"expires": 50},
    },
}


# Logging
LOG_LEVEL = get_env("LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": "structlog.stdlib.ProcessorFormatter",
            "processor": structlog.processors.JSONRenderer(),
            "foreign_pre_chain": [
                structlog.stdlib.add_log_level,
                structlog.stdlib.add_logger_name,
                structlog.processors.TimeStamper(fmt="iso"),
            ],
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "level": LOG_LEVEL,
        }
    },
    "root": {"handlers": ["console"], "level": "WARNING"},
    "loggers": {
        "django": {"handlers": ["console"], "level": "INFO", "propagate": False},
        "Field": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "slots": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
    },
}
