"""
Resource Permissions - Public API
=================================
"""

from resource_permissions.errors import (
    IntegrityViolation,
    ResourcePermissionError,
    StoreUnavailable,
    UnknownPermissionName,
)
from resource_permissions.models import (
    GrantFilter,
    GrantRecord,
    ObjectRef,
    PermissionRef,
    Referenceable,
    RoleRef,
)
from resource_permissions.registry import (
    InMemoryPermissionRegistry,
    PermissionRegistry,
)
from resource_permissions.store import GrantStore, InMemoryGrantStore

_LAZY = {
    "ResourcePermissions": "resource_permissions.engine",
    "get_resource_permissions": "resource_permissions.engine",
    "ResourcePermissionEvaluator": "resource_permissions.evaluator",
    "ResourcePermissionService": "resource_permissions.service",
    "ResourceGrantQueries": "resource_permissions.queries",
    "DbGrantStore": "resource_permissions.db_store",
    "DjangoAuthRegistry": "resource_permissions.db_registry",
    "DjangoModelResolver": "resource_permissions.resolvers",
}


def __getattr__(name: str):
    if name in _LAZY:
        from importlib import import_module

        return getattr(import_module(_LAZY[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")

__all__ = [
    "ObjectRef",
    "Referenceable",
    "PermissionRef",
    "RoleRef",
    "GrantRecord",
    "GrantFilter",
    "GrantStore",
    "InMemoryGrantStore",
    "PermissionRegistry",
    "InMemoryPermissionRegistry",
    "ResourcePermissionError",
    "StoreUnavailable",
    "IntegrityViolation",
    "UnknownPermissionName",
    *_LAZY,
]
