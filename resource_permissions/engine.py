"""
Resource Permissions - Facade
=============================
One object exposing the evaluator, mutation service and bulk queries over a
single store and registry.

Usage:
    permissions = ResourcePermissions(
        store=InMemoryGrantStore(),
        registry=InMemoryPermissionRegistry(
            permissions=("view", "edit"),
            roles={"editor": ("edit",)},
        ),
    )

    permissions.grant_permission(user, article, "view")
    permissions.assign_role(user, article, "editor")
    permissions.has_permission(user, article, "edit")    # True (via role)
    permissions.get_permissions(user, article)            # {view} only
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Optional

from django.core.signals import setting_changed
from django.dispatch import receiver
from django.utils.module_loading import import_string

from resource_permissions.conf import get_settings
from resource_permissions.constants import SETTINGS_NAME
from resource_permissions.evaluator import ResourcePermissionEvaluator
from resource_permissions.queries import ResourceGrantQueries
from resource_permissions.registry import PermissionRegistry
from resource_permissions.resolvers import PrincipalResolver
from resource_permissions.service import ActingPrincipal, ResourcePermissionService
from resource_permissions.store import GrantStore


class ResourcePermissions:
    def __init__(
        self,
        store: GrantStore,
        registry: PermissionRegistry,
        resolver: Optional[PrincipalResolver] = None,
        acting_principal: Optional[ActingPrincipal] = None,
    ):
        self.store = store
        self.registry = registry
        self.evaluator = ResourcePermissionEvaluator(store, registry)
        self.service = ResourcePermissionService(store, registry, acting_principal)
        self.queries = ResourceGrantQueries(store, registry, resolver)

    @classmethod
    def from_settings(
        cls, acting_principal: Optional[ActingPrincipal] = None
    ) -> "ResourcePermissions":
        from resource_permissions.db_store import DbGrantStore

        conf = get_settings()
        return cls(
            store=DbGrantStore(),
            registry=import_string(conf.registry)(),
            resolver=import_string(conf.principal_resolver)(),
            acting_principal=acting_principal,
        )

    # ── Resolution ────────────────────────────────────────────
    def has_permission(self, principal, resource, permission) -> bool:
        return self.evaluator.has_permission(principal, resource, permission)

    def has_any_permission(self, principal, resource, permissions) -> bool:
        return self.evaluator.has_any_permission(principal, resource, permissions)

    def has_all_permissions(self, principal, resource, permissions) -> bool:
        return self.evaluator.has_all_permissions(principal, resource, permissions)

    def has_role(self, principal, resource, role) -> bool:
        return self.evaluator.has_role(principal, resource, role)

    # ── Mutation ──────────────────────────────────────────────
    def grant_permission(self, principal, resource, permission, granted_by=None):
        return self.service.grant_permission(principal, resource, permission, granted_by)

    def revoke_permission(self, principal, resource, permission):
        return self.service.revoke_permission(principal, resource, permission)

    def sync_permissions(self, principal, resource, permissions, granted_by=None):
        return self.service.sync_permissions(principal, resource, permissions, granted_by)

    def assign_role(self, principal, resource, role, granted_by=None):
        return self.service.assign_role(principal, resource, role, granted_by)

    def remove_role(self, principal, resource, role):
        return self.service.remove_role(principal, resource, role)

    def sync_roles(self, principal, resource, roles, granted_by=None):
        return self.service.sync_roles(principal, resource, roles, granted_by)

    # ── Bulk queries ──────────────────────────────────────────
    def get_permissions(self, principal, resource):
        return self.queries.get_permissions(principal, resource)

    def get_roles(self, principal, resource):
        return self.queries.get_roles(principal, resource)

    def get_assigned_principals(self, resource, candidates=None):
        return self.queries.get_assigned_principals(resource, candidates)

    def get_assigned_objects(self, resource, candidates=None) -> list[Any]:
        return self.queries.get_assigned_objects(resource, candidates)

    def is_assigned(self, principal, resource) -> bool:
        return self.queries.is_assigned(principal, resource)

    def has_all_assigned(self, principals, resource) -> bool:
        return self.queries.has_all_assigned(principals, resource)

    def has_any_assigned(self, principals, resource) -> bool:
        return self.queries.has_any_assigned(principals, resource)

    def get_resources_for_principal(self, principal, permission=None, resource_type=None):
        return self.queries.get_resources_for_principal(principal, permission, resource_type)


@lru_cache(maxsize=None)
def get_resource_permissions() -> ResourcePermissions:
    """Process-wide facade built from ``settings.RESOURCE_PERMISSIONS``."""
    return ResourcePermissions.from_settings()


@receiver(setting_changed)
def _reset_resource_permissions(*, setting, **kwargs) -> None:
    if setting == SETTINGS_NAME:
        get_resource_permissions.cache_clear()
