"""
Resource Permissions – Django Settings (UUID identifiers)
=========================================================
Same project as ``config.settings`` with UUID primary keys and UUID
principal/resource references on the grant table.

    pytest --ds=config.settings_uuid tests/uuid_schema
"""

from config.settings import *  # noqa: F401,F403
from config.settings import BASE_DIR

# ── Resource Permissions ──────────────────────────────────────
RESOURCE_PERMISSIONS = {
    "TABLE_NAME": "model_has_resource_and_permissions",
    "UUID_PRIMARY_KEY": True,
    "UUID_REFERENCES": True,
}

# ── Database ──────────────────────────────────────────────────
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db_uuid.sqlite3",
    }
}
