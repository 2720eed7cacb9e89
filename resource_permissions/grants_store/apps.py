"""
Resource Permissions Grants Store - App Configuration
=====================================================
Persistent resource-scoped permission and role grants.
"""

from django.apps import AppConfig


class ResourcePermissionsGrantsStoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "resource_permissions.grants_store"
    label = "resource_permissions"
    verbose_name = "Resource Permissions"
