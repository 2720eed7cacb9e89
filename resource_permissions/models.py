"""
Resource Permissions - Immutable Reference/Grant Models
=======================================================
Principals and resources are tagged pairs ``(type_label, object_id)``.
Anything exposing that pair can hold or receive grants; the engine never
depends on a concrete class hierarchy.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Protocol, Union, runtime_checkable

from resource_permissions.constants import (
    GRANT_KIND_PERMISSION,
    GRANT_KIND_ROLE,
    VALID_GRANT_KINDS,
)

IdValue = Union[int, uuid.UUID, str]


@runtime_checkable
class Referenceable(Protocol):
    ref_type: str
    ref_id: Any


def normalize_id(value: Any) -> IdValue:
    """
    Canonicalise an identifier into ``int``, ``UUID`` or an opaque string.

    A string only becomes an ``int`` or ``UUID`` when it is that value's
    canonical spelling, so ``"007"`` and ``"7"`` stay different ids.
    """
    if isinstance(value, bool):
        raise ValueError("object_id must not be a bool.")
    if isinstance(value, (int, uuid.UUID)):
        return value
    if isinstance(value, str):
        if not value.strip():
            raise ValueError("object_id must be a non-empty value.")
        if value.isascii() and value.isdigit() and str(int(value)) == value:
            return int(value)
        try:
            parsed = uuid.UUID(value)
        except ValueError:
            return value
        return parsed if str(parsed) == value.lower() else value
    raise ValueError(
        f"object_id must be int, UUID or str, got {type(value).__name__}."
    )


@dataclass(frozen=True)
class ObjectRef:
    type_label: str
    object_id: IdValue

    def __post_init__(self):
        if not isinstance(self.type_label, str) or not self.type_label.strip():
            raise ValueError("type_label must be a non-empty string.")
        object.__setattr__(self, "type_label", self.type_label.strip())
        object.__setattr__(self, "object_id", normalize_id(self.object_id))

    @classmethod
    def of(cls, obj: Any) -> "ObjectRef":
        """
        Build a reference from an ObjectRef, a Django model instance, or any
        object exposing ``ref_type`` and ``ref_id``.
        """
        if isinstance(obj, ObjectRef):
            return obj

        meta = getattr(obj, "_meta", None)
        if meta is not None and hasattr(meta, "label_lower"):
            if obj.pk is None:
                raise ValueError(
                    f"Unsaved {meta.label} instance cannot be referenced."
                )
            return cls(type_label=meta.label_lower, object_id=obj.pk)

        if isinstance(obj, Referenceable):
            return cls(type_label=obj.ref_type, object_id=obj.ref_id)

        raise TypeError(
            f"Cannot build an ObjectRef from {type(obj).__name__}; expected "
            "ObjectRef, a model instance, or an object with ref_type/ref_id."
        )

    def sort_key(self) -> tuple[str, str]:
        return (self.type_label, str(self.object_id))

    def __str__(self) -> str:
        return f"{self.type_label}:{self.object_id}"


@dataclass(frozen=True)
class PermissionRef:
    id: Any
    name: str


@dataclass(frozen=True)
class RoleRef:
    id: Any
    name: str


@dataclass(frozen=True)
class GrantRecord:
    principal: ObjectRef
    resource: ObjectRef
    permission_id: Any = None
    role_id: Any = None
    granted_by_id: Any = None
    id: Any = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_permission_grant(self) -> bool:
        return self.permission_id is not None

    @property
    def is_role_grant(self) -> bool:
        return self.role_id is not None

    def uniqueness_key(self) -> tuple:
        """
        Key of the constraint this record falls under. Records carrying
        neither a permission nor a role are keyed by their own id.
        """
        pair = (
            self.principal.type_label,
            self.principal.object_id,
            self.resource.type_label,
            self.resource.object_id,
        )
        if self.permission_id is not None:
            return pair + (GRANT_KIND_PERMISSION, self.permission_id)
        if self.role_id is not None:
            return pair + (GRANT_KIND_ROLE, self.role_id)
        return pair + (None, self.id)


@dataclass(frozen=True)
class GrantFilter:
    """
    Exact-match filter over grant columns. Every field is optional; an empty
    filter matches every record.
    """

    principal: Optional[ObjectRef] = None
    resource: Optional[ObjectRef] = None
    resource_type: Optional[str] = None
    permission_id: Any = None
    role_id: Any = None
    permission_ids: Optional[tuple] = None
    role_ids: Optional[tuple] = None
    kind: Optional[str] = None
    principals: Optional[tuple[ObjectRef, ...]] = None

    def __post_init__(self):
        if self.kind is not None and self.kind not in VALID_GRANT_KINDS:
            raise ValueError(
                f"kind '{self.kind}' not valid. "
                f"Must be one of: {sorted(VALID_GRANT_KINDS)}"
            )
        for name in ("permission_ids", "role_ids", "principals"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, tuple):
                object.__setattr__(self, name, tuple(value))

    def matches(self, record: GrantRecord) -> bool:
        if self.principal is not None and record.principal != self.principal:
            return False
        if self.resource is not None and record.resource != self.resource:
            return False
        if (
            self.resource_type is not None
            and record.resource.type_label != self.resource_type
        ):
            return False
        if self.permission_id is not None and record.permission_id != self.permission_id:
            return False
        if self.role_id is not None and record.role_id != self.role_id:
            return False
        if self.permission_ids is not None and record.permission_id not in self.permission_ids:
            return False
        if self.role_ids is not None and record.role_id not in self.role_ids:
            return False
        if self.kind == GRANT_KIND_PERMISSION and not record.is_permission_grant:
            return False
        if self.kind == GRANT_KIND_ROLE and not record.is_role_grant:
            return False
        if self.principals is not None and record.principal not in self.principals:
            return False
        return True
