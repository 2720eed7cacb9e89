"""
Resource Permissions Grants Store - Relational Resource Grants
==============================================================
ResourceGrant binds a polymorphic principal to a polymorphic resource and
either a registry permission or a registry role.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from resource_permissions.conf import get_settings
from resource_permissions.constants import (
    IDX_GRANT_PRINCIPAL,
    IDX_GRANT_RESOURCE,
    UQ_PERMISSION_GRANT,
    UQ_ROLE_GRANT,
)
from resource_permissions.grants_store.fields import (
    primary_key_field,
    reference_id_field,
)
from resource_permissions.models import ObjectRef

_conf = get_settings()


class ResourceGrantQuerySet(models.QuerySet):
    def for_principal(self, principal) -> "ResourceGrantQuerySet":
        ref = ObjectRef.of(principal)
        return self.filter(principal_type=ref.type_label, principal_id=ref.object_id)

    def for_resource(self, resource) -> "ResourceGrantQuerySet":
        ref = ObjectRef.of(resource)
        return self.filter(resource_type=ref.type_label, resource_id=ref.object_id)

    def for_permission(self, permission_id) -> "ResourceGrantQuerySet":
        return self.filter(permission_id=permission_id)

    def for_role(self, role_id) -> "ResourceGrantQuerySet":
        return self.filter(role_id=role_id)

    def permission_grants(self) -> "ResourceGrantQuerySet":
        return self.filter(permission__isnull=False)

    def role_grants(self) -> "ResourceGrantQuerySet":
        return self.filter(role__isnull=False)


class ResourceGrant(models.Model):
    id = primary_key_field(_conf)
    principal_type = models.CharField(max_length=255)
    principal_id = reference_id_field(_conf)
    resource_type = models.CharField(max_length=255)
    resource_id = reference_id_field(_conf)
    permission = models.ForeignKey(
        _conf.permission_model,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="resource_grants",
    )
    role = models.ForeignKey(
        _conf.role_model,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="resource_grants",
    )
    granted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ResourceGrantQuerySet.as_manager()

    class Meta:
        db_table = _conf.table_name
        ordering = ["principal_type", "principal_id", "resource_type", "resource_id", "id"]
        indexes = [
            models.Index(
                fields=["principal_type", "principal_id"],
                name=IDX_GRANT_PRINCIPAL,
            ),
            models.Index(
                fields=["resource_type", "resource_id"],
                name=IDX_GRANT_RESOURCE,
            ),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=[
                    "principal_type",
                    "principal_id",
                    "resource_type",
                    "resource_id",
                    "permission",
                ],
                name=UQ_PERMISSION_GRANT,
            ),
            models.UniqueConstraint(
                fields=[
                    "principal_type",
                    "principal_id",
                    "resource_type",
                    "resource_id",
                    "role",
                ],
                name=UQ_ROLE_GRANT,
            ),
        ]

    @property
    def principal(self) -> ObjectRef:
        return ObjectRef(type_label=self.principal_type, object_id=self.principal_id)

    @property
    def resource(self) -> ObjectRef:
        return ObjectRef(type_label=self.resource_type, object_id=self.resource_id)

    def __str__(self) -> str:
        target = (
            f"permission:{self.permission_id}"
            if self.permission_id is not None
            else f"role:{self.role_id}"
        )
        return f"{self.principal}@{self.resource}:{target}"
