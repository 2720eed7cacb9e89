"""
Resource Permissions Grants Store - Configured Field Builders
=============================================================
Shared by the model and the initial migration so both always agree on the
configured identifier classes.
"""

from __future__ import annotations

import uuid

from django.db import models

from resource_permissions.conf import ResourcePermissionSettings, get_settings


def primary_key_field(conf: ResourcePermissionSettings | None = None) -> models.Field:
    conf = conf or get_settings()
    if conf.uuid_primary_key:
        return models.UUIDField(
            primary_key=True,
            default=uuid.uuid4,
            editable=False,
            serialize=False,
        )
    return models.BigAutoField(primary_key=True, serialize=False)


def reference_id_field(conf: ResourcePermissionSettings | None = None) -> models.Field:
    conf = conf or get_settings()
    if conf.uuid_references:
        return models.UUIDField()
    return models.PositiveBigIntegerField()
