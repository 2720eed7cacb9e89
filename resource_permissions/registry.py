"""
Resource Permissions - Registry Protocol and In-Memory Registry
===============================================================
The registry owns permission and role definitions. This package only reads
it: names resolve to references, and roles are asked whether they carry a
permission.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Protocol

from resource_permissions.models import PermissionRef, RoleRef


class PermissionRegistry(Protocol):
    def lookup_permission(self, value: Any) -> PermissionRef | None:
        ...

    def lookup_role(self, value: Any) -> RoleRef | None:
        ...

    def role_has_permission(self, role: RoleRef, permission: PermissionRef) -> bool:
        ...

    def get_permissions(self, ids: Iterable[Any]) -> tuple[PermissionRef, ...]:
        ...

    def get_roles(self, ids: Iterable[Any]) -> tuple[RoleRef, ...]:
        ...


class InMemoryPermissionRegistry:
    """
    Deterministic in-memory registry used for bootstrap/tests.

    Usage:
        registry = InMemoryPermissionRegistry(
            permissions=("view", "edit"),
            roles={"editor": ("view", "edit")},
        )
    """

    def __init__(
        self,
        permissions: Iterable[str] | None = None,
        roles: Mapping[str, Iterable[str]] | None = None,
    ):
        self._permissions: dict[str, PermissionRef] = {}
        self._permissions_by_id: dict[int, PermissionRef] = {}
        self._roles: dict[str, RoleRef] = {}
        self._roles_by_id: dict[int, RoleRef] = {}
        self._role_permissions: dict[int, set[int]] = {}

        for name in permissions or ():
            self.add_permission(name)
        for role_name, role_permissions in (roles or {}).items():
            self.add_role(role_name, role_permissions)

    def add_permission(self, name: str) -> PermissionRef:
        if not isinstance(name, str) or not name:
            raise ValueError("permission name must be a non-empty string.")
        if name in self._permissions:
            raise ValueError(f"Duplicate permission name '{name}'.")
        ref = PermissionRef(id=len(self._permissions_by_id) + 1, name=name)
        self._permissions[name] = ref
        self._permissions_by_id[ref.id] = ref
        return ref

    def add_role(self, name: str, permissions: Iterable[str] = ()) -> RoleRef:
        if not isinstance(name, str) or not name:
            raise ValueError("role name must be a non-empty string.")
        if name in self._roles:
            raise ValueError(f"Duplicate role name '{name}'.")
        ref = RoleRef(id=len(self._roles_by_id) + 1, name=name)
        self._roles[name] = ref
        self._roles_by_id[ref.id] = ref
        self._role_permissions[ref.id] = set()
        for permission_name in permissions:
            self.give_permission_to_role(name, permission_name)
        return ref

    def give_permission_to_role(self, role_name: str, permission_name: str) -> None:
        role = self._roles.get(role_name)
        if role is None:
            raise ValueError(f"Role '{role_name}' is not registered.")
        permission = self._permissions.get(permission_name)
        if permission is None:
            raise ValueError(f"Permission '{permission_name}' is not registered.")
        self._role_permissions[role.id].add(permission.id)

    def lookup_permission(self, value: Any) -> PermissionRef | None:
        if isinstance(value, PermissionRef):
            return self._permissions_by_id.get(value.id)
        if not isinstance(value, str):
            return None
        return self._permissions.get(value)

    def lookup_role(self, value: Any) -> RoleRef | None:
        if isinstance(value, RoleRef):
            return self._roles_by_id.get(value.id)
        if not isinstance(value, str):
            return None
        return self._roles.get(value)

    def role_has_permission(self, role: RoleRef, permission: PermissionRef) -> bool:
        return permission.id in self._role_permissions.get(role.id, ())

    def get_permissions(self, ids: Iterable[Any]) -> tuple[PermissionRef, ...]:
        found = (self._permissions_by_id.get(i) for i in set(ids))
        return tuple(sorted((ref for ref in found if ref is not None), key=lambda r: r.id))

    def get_roles(self, ids: Iterable[Any]) -> tuple[RoleRef, ...]:
        found = (self._roles_by_id.get(i) for i in set(ids))
        return tuple(sorted((ref for ref in found if ref is not None), key=lambda r: r.id))
