import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _choice(value, allowed, fallback):
    if not value:
        return fallback

    normalized = str(value).strip().lower()
    return normalized if normalized in allowed else fallback


SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "walk-buddy-development-key")
DEBUG = os.getenv("DJANGO_DEBUG", "true").strip().lower() in ("1", "true", "yes")
ALLOWED_HOSTS = [h.strip() for h in os.getenv("DJANGO_ALLOWED_HOSTS", "*").split(",") if h.strip()]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "walk_buddy.routing",
    "walk_buddy.moderation",
    "walk_buddy.walks",
    "walk_buddy.api",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
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

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.getenv("DATABASE_PATH", str(BASE_DIR / "data" / "walk_buddy.sqlite3")),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_TZ = True

STATIC_URL = "static/"

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "UNAUTHENTICATED_USER": None,
}

# Routing
ROUTING_PROVIDER = _choice(os.getenv("ROUTING_PROVIDER"), ("seed", "osrm"), "seed")
ROUTING_CACHE_MODE = _choice(os.getenv("ROUTING_CACHE_MODE"), ("precompute", "on_demand"), "on_demand")
OSRM_BASE_URL = os.getenv("OSRM_BASE_URL", "http://localhost:5000").rstrip("/")
OSRM_TIMEOUT_SECONDS = float(os.getenv("OSRM_TIMEOUT_SECONDS", "10"))
DEFAULT_WALK_ETA = "7 minutes"

# Moderation
PROFANITY_ENGINE = os.getenv("PROFANITY_ENGINE", "").strip()
EXTRA_PROFANITY = os.getenv("EXTRA_PROFANITY", "")
MESSAGE_DEFAULT_STATUS = _choice(
    os.getenv("MESSAGE_DEFAULT_STATUS"), ("pending", "approved", "rejected"), "pending"
)
MESSAGE_MAX_LENGTH = 280

SEED_DATA_PATH = os.getenv("SEED_DATA_PATH", str(BASE_DIR / "data" / "campus_seed.json"))
