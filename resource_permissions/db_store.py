"""
Resource Permissions - DB-backed Grant Store
============================================
Reads and writes ResourceGrant rows through the Django ORM.

Uniqueness is enforced by the table's unique constraints. insert_if_absent
relies on get_or_create, which inserts inside a savepoint and falls back to
fetching the existing row when the constraint rejects a concurrent insert.
"""

from __future__ import annotations

import logging
import operator
from contextlib import contextmanager
from functools import reduce
from typing import Iterator

from django.db import DatabaseError, IntegrityError, InterfaceError, transaction
from django.db.models import Q

from resource_permissions.constants import GRANT_KIND_PERMISSION, GRANT_KIND_ROLE
from resource_permissions.errors import IntegrityViolation, StoreUnavailable
from resource_permissions.models import GrantFilter, GrantRecord, ObjectRef

logger = logging.getLogger("resource_permissions.store")


@contextmanager
def translate_db_errors(operation: str) -> Iterator[None]:
    """Surface Django database failures as resource permission errors."""
    try:
        yield
    except IntegrityError as exc:
        logger.error(f"Integrity violation during {operation}: {exc}")
        raise IntegrityViolation(operation, exc) from exc
    except (DatabaseError, InterfaceError) as exc:
        logger.error(f"Grant store unavailable during {operation}: {exc}")
        raise StoreUnavailable(operation, exc) from exc


def _to_record(row) -> GrantRecord:
    return GrantRecord(
        id=row.id,
        principal=ObjectRef(type_label=row.principal_type, object_id=row.principal_id),
        resource=ObjectRef(type_label=row.resource_type, object_id=row.resource_id),
        permission_id=row.permission_id,
        role_id=row.role_id,
        granted_by_id=row.granted_by_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class DbGrantStore:
    def _queryset(self):
        from resource_permissions.grants_store.models import ResourceGrant

        return ResourceGrant.objects.all()

    def _filtered(self, grant_filter: GrantFilter):
        qs = self._queryset()

        if grant_filter.principal is not None:
            qs = qs.filter(
                principal_type=grant_filter.principal.type_label,
                principal_id=grant_filter.principal.object_id,
            )
        if grant_filter.resource is not None:
            qs = qs.filter(
                resource_type=grant_filter.resource.type_label,
                resource_id=grant_filter.resource.object_id,
            )
        if grant_filter.resource_type is not None:
            qs = qs.filter(resource_type=grant_filter.resource_type)
        if grant_filter.permission_id is not None:
            qs = qs.filter(permission_id=grant_filter.permission_id)
        if grant_filter.role_id is not None:
            qs = qs.filter(role_id=grant_filter.role_id)
        if grant_filter.permission_ids is not None:
            qs = qs.filter(permission_id__in=grant_filter.permission_ids)
        if grant_filter.role_ids is not None:
            qs = qs.filter(role_id__in=grant_filter.role_ids)
        if grant_filter.kind == GRANT_KIND_PERMISSION:
            qs = qs.filter(permission__isnull=False)
        elif grant_filter.kind == GRANT_KIND_ROLE:
            qs = qs.filter(role__isnull=False)

        if grant_filter.principals is not None:
            if not grant_filter.principals:
                return qs.none()
            qs = qs.filter(
                reduce(
                    operator.or_,
                    (
                        Q(principal_type=ref.type_label, principal_id=ref.object_id)
                        for ref in grant_filter.principals
                    ),
                )
            )
        return qs

    def atomic(self):
        return transaction.atomic()

    def insert_if_absent(self, record: GrantRecord) -> GrantRecord:
        lookup = {
            "principal_type": record.principal.type_label,
            "principal_id": record.principal.object_id,
            "resource_type": record.resource.type_label,
            "resource_id": record.resource.object_id,
        }
        if record.permission_id is not None:
            lookup["permission_id"] = record.permission_id
        if record.role_id is not None:
            lookup["role_id"] = record.role_id

        with translate_db_errors("insert_if_absent"):
            if record.permission_id is None and record.role_id is None:
                row = self._queryset().create(
                    granted_by_id=record.granted_by_id, **lookup
                )
                return _to_record(row)

            row, created = self._queryset().get_or_create(
                defaults={"granted_by_id": record.granted_by_id},
                **lookup,
            )
        if created:
            logger.debug(f"Created grant {row.id} for {row.principal} on {row.resource}")
        return _to_record(row)

    def delete_matching(self, grant_filter: GrantFilter) -> int:
        with translate_db_errors("delete_matching"):
            deleted, _ = self._filtered(grant_filter).delete()
        return deleted

    def find_matching(self, grant_filter: GrantFilter) -> list[GrantRecord]:
        with translate_db_errors("find_matching"):
            return [_to_record(row) for row in self._filtered(grant_filter)]

    def exists_matching(self, grant_filter: GrantFilter) -> bool:
        with translate_db_errors("exists_matching"):
            return self._filtered(grant_filter).exists()

    def distinct_principals(self, grant_filter: GrantFilter) -> list[ObjectRef]:
        with translate_db_errors("distinct_principals"):
            pairs = (
                self._filtered(grant_filter)
                .order_by("principal_type", "principal_id")
                .values_list("principal_type", "principal_id")
                .distinct()
            )
            return [
                ObjectRef(type_label=principal_type, object_id=principal_id)
                for principal_type, principal_id in pairs
            ]
