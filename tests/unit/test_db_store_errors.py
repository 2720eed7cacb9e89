from __future__ import annotations

from unittest import mock

import pytest
from django.db import (
    DataError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    ProgrammingError,
)

from resource_permissions.db_store import DbGrantStore
from resource_permissions.engine import ResourcePermissions
from resource_permissions.errors import IntegrityViolation, StoreUnavailable
from resource_permissions.models import GrantFilter, GrantRecord, ObjectRef
from resource_permissions.registry import InMemoryPermissionRegistry

USER_1 = ObjectRef("auth.user", 1)
ARTICLE_1 = ObjectRef("articles.article", 1)


@pytest.mark.parametrize(
    "cause",
    [
        OperationalError("db down"),
        InterfaceError("closed"),
        ProgrammingError("no such table: model_has_resource_and_permissions"),
        DataError("value out of range"),
    ],
)
def test_infrastructure_failures_surface_as_store_unavailable(cause) -> None:
    store = DbGrantStore()
    with mock.patch.object(DbGrantStore, "_queryset", side_effect=cause):
        with pytest.raises(StoreUnavailable) as excinfo:
            store.find_matching(GrantFilter(principal=USER_1))

    assert excinfo.value.operation == "find_matching"
    assert excinfo.value.__cause__ is cause


def test_constraint_failures_surface_as_integrity_violation() -> None:
    queryset = mock.Mock()
    queryset.get_or_create.side_effect = IntegrityError("UNIQUE constraint failed")
    store = DbGrantStore()

    with mock.patch.object(DbGrantStore, "_queryset", return_value=queryset):
        with pytest.raises(IntegrityViolation):
            store.insert_if_absent(
                GrantRecord(principal=USER_1, resource=ARTICLE_1, permission_id=1)
            )


def test_checks_propagate_store_failures_instead_of_denying() -> None:
    perms = ResourcePermissions(
        store=DbGrantStore(),
        registry=InMemoryPermissionRegistry(permissions=("view",)),
    )
    with mock.patch.object(DbGrantStore, "_queryset", side_effect=OperationalError("db down")):
        with pytest.raises(StoreUnavailable):
            perms.has_permission(USER_1, ARTICLE_1, "view")
