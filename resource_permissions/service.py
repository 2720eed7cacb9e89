"""
Resource Permissions - Grant Mutation Service
=============================================
Grant, revoke and sync resource-scoped permissions and roles.

Every operation returns the principal it was given so calls can be chained.
Names the registry cannot resolve are ignored, never raised. Permission and
role grants are managed independently: permission operations never touch
role rows and vice versa.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional

from resource_permissions.constants import GRANT_KIND_PERMISSION, GRANT_KIND_ROLE
from resource_permissions.evaluator import as_list
from resource_permissions.models import GrantFilter, GrantRecord, ObjectRef
from resource_permissions.registry import PermissionRegistry
from resource_permissions.store import GrantStore

logger = logging.getLogger("resource_permissions.grants")

ActingPrincipal = Callable[[], Any]


def _actor_id(actor: Any) -> Any:
    if actor is None:
        return None
    if isinstance(actor, ObjectRef):
        return actor.object_id
    pk = getattr(actor, "pk", None)
    if pk is not None:
        return pk
    return actor


class ResourcePermissionService:
    def __init__(
        self,
        store: GrantStore,
        registry: PermissionRegistry,
        acting_principal: Optional[ActingPrincipal] = None,
    ):
        self._store = store
        self._registry = registry
        self._acting_principal = acting_principal

    def _granted_by(self, granted_by: Any) -> Any:
        if granted_by is None and self._acting_principal is not None:
            granted_by = self._acting_principal()
        return _actor_id(granted_by)

    # ------------------------------------------------------------------
    # Permissions
    def grant_permission(self, principal, resource, permission, granted_by=None):
        permission_ref = self._registry.lookup_permission(permission)
        if permission_ref is None:
            logger.debug(f"Ignoring grant of unknown permission '{permission}'.")
            return principal

        record = self._store.insert_if_absent(
            GrantRecord(
                principal=ObjectRef.of(principal),
                resource=ObjectRef.of(resource),
                permission_id=permission_ref.id,
                granted_by_id=self._granted_by(granted_by),
            )
        )
        logger.debug(
            f"Granted '{permission_ref.name}' to {record.principal} on {record.resource}"
        )
        return principal

    def revoke_permission(self, principal, resource, permission):
        permission_ref = self._registry.lookup_permission(permission)
        if permission_ref is None:
            logger.debug(f"Ignoring revoke of unknown permission '{permission}'.")
            return principal

        deleted = self._store.delete_matching(
            GrantFilter(
                principal=ObjectRef.of(principal),
                resource=ObjectRef.of(resource),
                permission_id=permission_ref.id,
            )
        )
        logger.debug(f"Revoked '{permission_ref.name}' ({deleted} row(s))")
        return principal

    def sync_permissions(self, principal, resource, permissions: Iterable[Any], granted_by=None):
        """Make the direct permission grants exactly ``permissions``."""
        target = {}
        for permission in as_list(permissions):
            permission_ref = self._registry.lookup_permission(permission)
            if permission_ref is not None:
                target[permission_ref.id] = permission_ref

        self._sync(
            ObjectRef.of(principal),
            ObjectRef.of(resource),
            GRANT_KIND_PERMISSION,
            tuple(target),
            self._granted_by(granted_by),
        )
        return principal

    # ------------------------------------------------------------------
    # Roles
    def assign_role(self, principal, resource, role, granted_by=None):
        role_ref = self._registry.lookup_role(role)
        if role_ref is None:
            logger.debug(f"Ignoring assignment of unknown role '{role}'.")
            return principal

        record = self._store.insert_if_absent(
            GrantRecord(
                principal=ObjectRef.of(principal),
                resource=ObjectRef.of(resource),
                role_id=role_ref.id,
                granted_by_id=self._granted_by(granted_by),
            )
        )
        logger.debug(
            f"Assigned role '{role_ref.name}' to {record.principal} on {record.resource}"
        )
        return principal

    def remove_role(self, principal, resource, role):
        role_ref = self._registry.lookup_role(role)
        if role_ref is None:
            logger.debug(f"Ignoring removal of unknown role '{role}'.")
            return principal

        deleted = self._store.delete_matching(
            GrantFilter(
                principal=ObjectRef.of(principal),
                resource=ObjectRef.of(resource),
                role_id=role_ref.id,
            )
        )
        logger.debug(f"Removed role '{role_ref.name}' ({deleted} row(s))")
        return principal

    def sync_roles(self, principal, resource, roles: Iterable[Any], granted_by=None):
        """Make the role grants exactly ``roles``."""
        target = {}
        for role in as_list(roles):
            role_ref = self._registry.lookup_role(role)
            if role_ref is not None:
                target[role_ref.id] = role_ref

        self._sync(
            ObjectRef.of(principal),
            ObjectRef.of(resource),
            GRANT_KIND_ROLE,
            tuple(target),
            self._granted_by(granted_by),
        )
        return principal

    # ------------------------------------------------------------------
    def _sync(
        self,
        principal: ObjectRef,
        resource: ObjectRef,
        kind: str,
        target_ids: tuple,
        granted_by_id: Any,
    ) -> None:
        column = "permission_id" if kind == GRANT_KIND_PERMISSION else "role_id"
        ids_column = "permission_ids" if kind == GRANT_KIND_PERMISSION else "role_ids"

        with self._store.atomic():
            current = self._store.find_matching(
                GrantFilter(principal=principal, resource=resource, kind=kind)
            )
            current_ids = {getattr(record, column) for record in current}

            to_remove = tuple(i for i in current_ids if i not in target_ids)
            if to_remove:
                self._store.delete_matching(
                    GrantFilter(
                        principal=principal,
                        resource=resource,
                        **{ids_column: to_remove},
                    )
                )

            to_add = [i for i in target_ids if i not in current_ids]
            for target_id in to_add:
                self._store.insert_if_absent(
                    GrantRecord(
                        principal=principal,
                        resource=resource,
                        granted_by_id=granted_by_id,
                        **{column: target_id},
                    )
                )

        logger.debug(
            f"Synced {kind} grants for {principal} on {resource}: "
            f"+{len(to_add)} -{len(to_remove)}"
        )
