from __future__ import annotations

import pytest
from django.core.exceptions import ImproperlyConfigured
from django.db import models

from resource_permissions.conf import ResourcePermissionSettings, get_settings
from resource_permissions.constants import DEFAULT_TABLE_NAME
from resource_permissions.grants_store.fields import (
    primary_key_field,
    reference_id_field,
)


def test_defaults_follow_model_has_resource_naming() -> None:
    conf = ResourcePermissionSettings.from_mapping(None)
    assert conf.table_name == DEFAULT_TABLE_NAME == "model_has_resource_and_permissions"
    assert conf.uuid_primary_key is False
    assert conf.uuid_references is False
    assert conf.permission_model == "auth.Permission"
    assert conf.role_model == "auth.Group"


@pytest.mark.parametrize(
    "raw",
    [
        {"TABLE_NAME": ""},
        {"UUID_PRIMARY_KEY": "yes"},
        {"UUID_REFERENCES": 1},
        {"PERMISSION_MODEL": "Permission"},
        {"ROLE_MODEL": "auth."},
        {"REGISTRY": "registry"},
        {"CACHE": True},
    ],
)
def test_invalid_settings_are_rejected(raw) -> None:
    with pytest.raises(ImproperlyConfigured):
        ResourcePermissionSettings.from_mapping(raw)


def test_settings_cache_is_reset_on_change(settings) -> None:
    assert get_settings().table_name == "model_has_resource_and_permissions"
    settings.RESOURCE_PERMISSIONS = {"TABLE_NAME": "user_has_resource_and_permissions"}
    assert get_settings().table_name == "user_has_resource_and_permissions"


def test_identifier_classes_are_independent() -> None:
    pk_only = ResourcePermissionSettings.from_mapping({"UUID_PRIMARY_KEY": True})
    refs_only = ResourcePermissionSettings.from_mapping({"UUID_REFERENCES": True})

    assert isinstance(primary_key_field(pk_only), models.UUIDField)
    assert isinstance(reference_id_field(pk_only), models.PositiveBigIntegerField)

    assert isinstance(primary_key_field(refs_only), models.BigAutoField)
    assert isinstance(reference_id_field(refs_only), models.UUIDField)
