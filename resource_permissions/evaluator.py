"""
Resource Permissions - Scoped Permission Evaluator
==================================================
Answers "may principal P do A on resource R".

A permission is held when a direct grant row exists for
(principal, resource, permission), or when any role granted to the principal
on that resource carries the permission in the registry. Grants are purely
additive; there is no deny. Nothing is cached between calls.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from resource_permissions.constants import GRANT_KIND_ROLE
from resource_permissions.errors import UnknownPermissionName
from resource_permissions.models import GrantFilter, ObjectRef, PermissionRef, RoleRef
from resource_permissions.registry import PermissionRegistry
from resource_permissions.store import GrantStore

logger = logging.getLogger("resource_permissions.evaluator")


def as_list(values: Any) -> list[Any]:
    """Accept a single name/reference or an iterable of them."""
    if values is None:
        return []
    if isinstance(values, (str, PermissionRef, RoleRef)):
        return [values]
    return list(values)


class ResourcePermissionEvaluator:
    def __init__(self, store: GrantStore, registry: PermissionRegistry):
        self._store = store
        self._registry = registry

    def _require_permission(self, value: Any) -> PermissionRef:
        permission = self._registry.lookup_permission(value)
        if permission is None:
            raise UnknownPermissionName(value)
        return permission

    def _holds(self, principal: ObjectRef, resource: ObjectRef, permission: PermissionRef) -> bool:
        if self._store.exists_matching(
            GrantFilter(principal=principal, resource=resource, permission_id=permission.id)
        ):
            return True

        role_rows = self._store.find_matching(
            GrantFilter(principal=principal, resource=resource, kind=GRANT_KIND_ROLE)
        )
        if not role_rows:
            return False
        roles = self._registry.get_roles(row.role_id for row in role_rows)
        return any(self._registry.role_has_permission(role, permission) for role in roles)

    def has_permission(self, principal, resource, permission) -> bool:
        """Direct or role-derived permission on this resource."""
        permission_ref = self._registry.lookup_permission(permission)
        if permission_ref is None:
            logger.debug(f"Unknown permission '{permission}' grants nothing.")
            return False
        return self._holds(ObjectRef.of(principal), ObjectRef.of(resource), permission_ref)

    def has_any_permission(self, principal, resource, permissions: Iterable[Any]) -> bool:
        """False for an empty list; unknown names count as not granted."""
        for permission in as_list(permissions):
            if self.has_permission(principal, resource, permission):
                return True
        return False

    def has_all_permissions(self, principal, resource, permissions: Iterable[Any]) -> bool:
        """
        True for an empty list. A single name the registry cannot resolve
        fails the whole check, before any grant is consulted.
        """
        try:
            permission_refs = [self._require_permission(p) for p in as_list(permissions)]
        except UnknownPermissionName as exc:
            logger.debug(f"All-of check failed on unknown permission '{exc.name}'.")
            return False

        principal_ref = ObjectRef.of(principal)
        resource_ref = ObjectRef.of(resource)
        return all(
            self._holds(principal_ref, resource_ref, permission_ref)
            for permission_ref in permission_refs
        )

    def has_role(self, principal, resource, role) -> bool:
        """Exact role grant on this resource; no indirection."""
        role_ref = self._registry.lookup_role(role)
        if role_ref is None:
            return False
        return self._store.exists_matching(
            GrantFilter(
                principal=ObjectRef.of(principal),
                resource=ObjectRef.of(resource),
                role_id=role_ref.id,
            )
        )
