"""
Resource Permissions - Constants
================================
"""

from __future__ import annotations

DEFAULT_TABLE_NAME = "model_has_resource_and_permissions"

DEFAULT_PERMISSION_MODEL = "auth.Permission"
DEFAULT_ROLE_MODEL = "auth.Group"

DEFAULT_REGISTRY = "resource_permissions.db_registry.DjangoAuthRegistry"
DEFAULT_PRINCIPAL_RESOLVER = "resource_permissions.resolvers.DjangoModelResolver"

GRANT_KIND_PERMISSION = "permission"
GRANT_KIND_ROLE = "role"

VALID_GRANT_KINDS = frozenset({GRANT_KIND_PERMISSION, GRANT_KIND_ROLE})

SETTINGS_NAME = "RESOURCE_PERMISSIONS"

UQ_PERMISSION_GRANT = "uq_resource_grant_permission"
UQ_ROLE_GRANT = "uq_resource_grant_role"
IDX_GRANT_PRINCIPAL = "idx_grant_principal"
IDX_GRANT_RESOURCE = "idx_grant_resource"
