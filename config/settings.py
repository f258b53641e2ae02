"""
MedRestock – Django Settings (Infrastructure Only)
===================================================
Django serves as the ORM and settings container for the Django-backed
store. The restock engines never import Django themselves; they receive
a Store and a RestockSettings at wiring time.
"""

import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
# BASE_DIR = project root (where pyproject.toml lives)
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
SECRET_KEY = os.environ.get(
    "MEDRESTOCK_SECRET_KEY", "medrestock-dev-key-replace-before-deployment"
)

DEBUG = os.environ.get("MEDRESTOCK_DEBUG", "1") == "1"

ALLOWED_HOSTS = []

# ── Installed Apps ────────────────────────────────────────────
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    # ── MedRestock modules ────────────────────────────────
    "core.store",
]

# ── Database ──────────────────────────────────────────────────
# SQLite for development. Production DB configured separately.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("MEDRESTOCK_DB_NAME", str(BASE_DIR / "db.sqlite3")),
    }
}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ── Logging ───────────────────────────────────────────────────
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "plain",
        },
    },
    "loggers": {
        "medrestock": {
            "handlers": ["console"],
            "level": os.environ.get("MEDRESTOCK_LOG_LEVEL", "INFO"),
        },
    },
}

# ── MedRestock ────────────────────────────────────────────────
# Read by core.config.load_restock_settings(). Unset values fall back to
# the matching environment variable, then to the built-in default:
#   MEDRESTOCK_EXPIRY_WARNING_DAYS    (30)
#   MEDRESTOCK_STORE_BACKEND          ("memory" | "django")
#   MEDRESTOCK_UNKNOWN_PHARMACY_NAME  ("Unknown Pharmacy")
#   MEDRESTOCK_MISSING_ADDRESS        ("Address not provided")
#   MEDRESTOCK_MISSING_PHONE          ("Phone not provided")
