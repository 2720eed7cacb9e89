"""
Resource Permissions - Settings
===============================
Resolved once from ``settings.RESOURCE_PERMISSIONS`` before schema creation.

Model fields and the initial migration read the same values, so the table
name and identifier classes are fixed for the lifetime of a database.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Mapping

from django.core.exceptions import ImproperlyConfigured
from django.core.signals import setting_changed
from django.dispatch import receiver

from resource_permissions.constants import (
    DEFAULT_PERMISSION_MODEL,
    DEFAULT_PRINCIPAL_RESOLVER,
    DEFAULT_REGISTRY,
    DEFAULT_ROLE_MODEL,
    DEFAULT_TABLE_NAME,
    SETTINGS_NAME,
)

_DEFAULTS: dict[str, Any] = {
    "TABLE_NAME": DEFAULT_TABLE_NAME,
    "UUID_PRIMARY_KEY": False,
    "UUID_REFERENCES": False,
    "PERMISSION_MODEL": DEFAULT_PERMISSION_MODEL,
    "ROLE_MODEL": DEFAULT_ROLE_MODEL,
    "REGISTRY": DEFAULT_REGISTRY,
    "PRINCIPAL_RESOLVER": DEFAULT_PRINCIPAL_RESOLVER,
}


def _check_model_label(value: Any, *, key: str) -> str:
    if not isinstance(value, str) or value.count(".") != 1:
        raise ImproperlyConfigured(
            f"{SETTINGS_NAME}['{key}'] must be of the form 'app_label.ModelName'."
        )
    app_label, model_name = value.split(".")
    if not app_label or not model_name:
        raise ImproperlyConfigured(
            f"{SETTINGS_NAME}['{key}'] must be of the form 'app_label.ModelName'."
        )
    return value


@dataclass(frozen=True)
class ResourcePermissionSettings:
    table_name: str = DEFAULT_TABLE_NAME
    uuid_primary_key: bool = False
    uuid_references: bool = False
    permission_model: str = DEFAULT_PERMISSION_MODEL
    role_model: str = DEFAULT_ROLE_MODEL
    registry: str = DEFAULT_REGISTRY
    principal_resolver: str = DEFAULT_PRINCIPAL_RESOLVER

    def __post_init__(self):
        if not isinstance(self.table_name, str) or not self.table_name.strip():
            raise ImproperlyConfigured(
                f"{SETTINGS_NAME}['TABLE_NAME'] must be a non-empty string."
            )

        for key, value in (
            ("UUID_PRIMARY_KEY", self.uuid_primary_key),
            ("UUID_REFERENCES", self.uuid_references),
        ):
            if not isinstance(value, bool):
                raise ImproperlyConfigured(
                    f"{SETTINGS_NAME}['{key}'] must be a bool."
                )

        _check_model_label(self.permission_model, key="PERMISSION_MODEL")
        _check_model_label(self.role_model, key="ROLE_MODEL")

        for key, value in (
            ("REGISTRY", self.registry),
            ("PRINCIPAL_RESOLVER", self.principal_resolver),
        ):
            if not isinstance(value, str) or "." not in value:
                raise ImproperlyConfigured(
                    f"{SETTINGS_NAME}['{key}'] must be a dotted import path."
                )

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> "ResourcePermissionSettings":
        if raw is None:
            raw = {}
        if not isinstance(raw, Mapping):
            raise ImproperlyConfigured(f"{SETTINGS_NAME} must be a dict.")

        unknown = sorted(set(raw) - set(_DEFAULTS))
        if unknown:
            raise ImproperlyConfigured(
                f"Unknown {SETTINGS_NAME} keys: {unknown}. "
                f"Valid keys: {sorted(_DEFAULTS)}"
            )

        merged = {**_DEFAULTS, **raw}
        return cls(
            table_name=merged["TABLE_NAME"],
            uuid_primary_key=merged["UUID_PRIMARY_KEY"],
            uuid_references=merged["UUID_REFERENCES"],
            permission_model=merged["PERMISSION_MODEL"],
            role_model=merged["ROLE_MODEL"],
            registry=merged["REGISTRY"],
            principal_resolver=merged["PRINCIPAL_RESOLVER"],
        )


@lru_cache(maxsize=None)
def get_settings() -> ResourcePermissionSettings:
    """Return the validated ``RESOURCE_PERMISSIONS`` settings."""
    from django.conf import settings

    return ResourcePermissionSettings.from_mapping(
        getattr(settings, SETTINGS_NAME, None)
    )


@receiver(setting_changed)
def _reset_settings(*, setting, **kwargs) -> None:
    if setting == SETTINGS_NAME:
        get_settings.cache_clear()
