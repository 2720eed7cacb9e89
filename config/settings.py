"""
Resource Permissions – Django Settings (Development & Tests)
============================================================
Minimal project container for running the resource_permissions app and its
test suite. Not shipped with the package.
"""

from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
SECRET_KEY = "resource-permissions-dev-key"

DEBUG = True

ALLOWED_HOSTS = []

# ── Installed Apps ────────────────────────────────────────────
INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "resource_permissions.grants_store",
    "tests.articles",
]

# ── Authentication ────────────────────────────────────────────
# Global permissions first, resource-scoped grants second.
AUTHENTICATION_BACKENDS = [
    "django.contrib.auth.backends.ModelBackend",
    "resource_permissions.backends.ResourcePermissionBackend",
]

# ── Resource Permissions ──────────────────────────────────────
RESOURCE_PERMISSIONS = {
    "TABLE_NAME": "model_has_resource_and_permissions",
    "UUID_PRIMARY_KEY": False,
    "UUID_REFERENCES": False,
}

# ── Database ──────────────────────────────────────────────────
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# ── Default Primary Key ──────────────────────────────────────
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
