"""
Resource Permissions - Bulk Grant Queries
=========================================
Resource-centric and principal-centric enumeration over grant rows.

Permission enumeration reflects direct grants only; role-derived permissions
are answered by the evaluator, not listed here.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from resource_permissions.constants import GRANT_KIND_PERMISSION, GRANT_KIND_ROLE
from resource_permissions.models import (
    GrantFilter,
    ObjectRef,
    PermissionRef,
    RoleRef,
)
from resource_permissions.registry import PermissionRegistry
from resource_permissions.resolvers import PrincipalResolver, resolve_refs
from resource_permissions.store import GrantStore


def _refs(principals: Iterable[Any] | None) -> Optional[tuple[ObjectRef, ...]]:
    if principals is None:
        return None
    return tuple(dict.fromkeys(ObjectRef.of(p) for p in principals))


class ResourceGrantQueries:
    def __init__(
        self,
        store: GrantStore,
        registry: PermissionRegistry,
        resolver: Optional[PrincipalResolver] = None,
    ):
        self._store = store
        self._registry = registry
        self._resolver = resolver

    def get_permissions(self, principal, resource) -> frozenset[PermissionRef]:
        rows = self._store.find_matching(
            GrantFilter(
                principal=ObjectRef.of(principal),
                resource=ObjectRef.of(resource),
                kind=GRANT_KIND_PERMISSION,
            )
        )
        if not rows:
            return frozenset()
        return frozenset(self._registry.get_permissions(r.permission_id for r in rows))

    def get_roles(self, principal, resource) -> frozenset[RoleRef]:
        rows = self._store.find_matching(
            GrantFilter(
                principal=ObjectRef.of(principal),
                resource=ObjectRef.of(resource),
                kind=GRANT_KIND_ROLE,
            )
        )
        if not rows:
            return frozenset()
        return frozenset(self._registry.get_roles(r.role_id for r in rows))

    def get_assigned_principals(self, resource, candidates=None) -> frozenset[ObjectRef]:
        """
        Distinct principals holding any grant on ``resource``. With
        ``candidates`` the store only considers those principals.
        """
        return frozenset(
            self._store.distinct_principals(
                GrantFilter(resource=ObjectRef.of(resource), principals=_refs(candidates))
            )
        )

    def get_assigned_objects(self, resource, candidates=None) -> list[Any]:
        if self._resolver is None:
            raise RuntimeError("No principal resolver is configured.")
        refs = self._store.distinct_principals(
            GrantFilter(resource=ObjectRef.of(resource), principals=_refs(candidates))
        )
        return resolve_refs(refs, self._resolver)

    def is_assigned(self, principal, resource) -> bool:
        return self._store.exists_matching(
            GrantFilter(principal=ObjectRef.of(principal), resource=ObjectRef.of(resource))
        )

    def has_all_assigned(self, principals, resource) -> bool:
        wanted = _refs(principals)
        if not wanted:
            return True
        assigned = self._store.distinct_principals(
            GrantFilter(resource=ObjectRef.of(resource), principals=wanted)
        )
        return set(wanted) <= set(assigned)

    def has_any_assigned(self, principals, resource) -> bool:
        wanted = _refs(principals)
        if not wanted:
            return False
        return self._store.exists_matching(
            GrantFilter(resource=ObjectRef.of(resource), principals=wanted)
        )

    def get_resources_for_principal(
        self,
        principal,
        permission=None,
        resource_type: Optional[str] = None,
    ) -> frozenset[ObjectRef]:
        """
        Resources where ``principal`` holds any grant, or, when ``permission``
        is given, holds it directly or through a resource-scoped role.
        """
        principal_ref = ObjectRef.of(principal)
        if permission is None:
            rows = self._store.find_matching(
                GrantFilter(principal=principal_ref, resource_type=resource_type)
            )
            return frozenset(r.resource for r in rows)

        permission_ref = self._registry.lookup_permission(permission)
        if permission_ref is None:
            return frozenset()

        resources = {
            r.resource
            for r in self._store.find_matching(
                GrantFilter(
                    principal=principal_ref,
                    resource_type=resource_type,
                    permission_id=permission_ref.id,
                )
            )
        }

        role_rows = self._store.find_matching(
            GrantFilter(principal=principal_ref, resource_type=resource_type, kind=GRANT_KIND_ROLE)
        )
        if role_rows:
            carrying = {
                role.id
                for role in self._registry.get_roles(r.role_id for r in role_rows)
                if self._registry.role_has_permission(role, permission_ref)
            }
            resources.update(r.resource for r in role_rows if r.role_id in carrying)
        return frozenset(resources)
