"""
Resource Permissions - django.contrib.auth Registry
===================================================
Permissions are auth.Permission rows addressed as ``"app_label.codename"``
(or a bare codename); roles are auth.Group rows addressed by name.
"""

from __future__ import annotations

from typing import Any, Iterable

from resource_permissions.db_store import translate_db_errors
from resource_permissions.models import PermissionRef, RoleRef


def _permission_ref(permission) -> PermissionRef:
    return PermissionRef(
        id=permission.pk,
        name=f"{permission.content_type.app_label}.{permission.codename}",
    )


def _role_ref(group) -> RoleRef:
    return RoleRef(id=group.pk, name=group.name)


class DjangoAuthRegistry:
    def lookup_permission(self, value: Any) -> PermissionRef | None:
        from django.contrib.auth.models import Permission

        if isinstance(value, PermissionRef):
            return value
        if isinstance(value, Permission):
            return _permission_ref(value) if value.pk is not None else None
        if not isinstance(value, str) or not value.strip():
            return None

        name = value.strip()
        qs = Permission.objects.select_related("content_type")
        if "." in name:
            app_label, codename = name.split(".", 1)
            qs = qs.filter(content_type__app_label=app_label, codename=codename)
        else:
            qs = qs.filter(codename=name)

        with translate_db_errors("lookup_permission"):
            permission = qs.order_by("pk").first()
        return None if permission is None else _permission_ref(permission)

    def lookup_role(self, value: Any) -> RoleRef | None:
        from django.contrib.auth.models import Group

        if isinstance(value, RoleRef):
            return value
        if isinstance(value, Group):
            return _role_ref(value) if value.pk is not None else None
        if not isinstance(value, str) or not value.strip():
            return None

        with translate_db_errors("lookup_role"):
            group = Group.objects.filter(name=value.strip()).first()
        return None if group is None else _role_ref(group)

    def role_has_permission(self, role: RoleRef, permission: PermissionRef) -> bool:
        from django.contrib.auth.models import Group

        with translate_db_errors("role_has_permission"):
            return Group.permissions.through.objects.filter(
                group_id=role.id,
                permission_id=permission.id,
            ).exists()

    def get_permissions(self, ids: Iterable[Any]) -> tuple[PermissionRef, ...]:
        from django.contrib.auth.models import Permission

        ids = tuple(set(ids))
        if not ids:
            return tuple()
        with translate_db_errors("get_permissions"):
            rows = (
                Permission.objects.filter(pk__in=ids)
                .select_related("content_type")
                .order_by("pk")
            )
            return tuple(_permission_ref(row) for row in rows)

    def get_roles(self, ids: Iterable[Any]) -> tuple[RoleRef, ...]:
        from django.contrib.auth.models import Group

        ids = tuple(set(ids))
        if not ids:
            return tuple()
        with translate_db_errors("get_roles"):
            return tuple(
                _role_ref(row) for row in Group.objects.filter(pk__in=ids).order_by("pk")
            )
