"""
Grant table with UUID primary keys and UUID principal/resource references.

Only meaningful under ``config.settings_uuid``; the default suite runs this
module in a separate pytest process (tests/integration/test_uuid_schema.py).
"""

from __future__ import annotations

import uuid

import pytest
from django.contrib.auth.models import Group, Permission
from django.contrib.contenttypes.models import ContentType
from django.db import connection

from resource_permissions.conf import get_settings
from resource_permissions.engine import ResourcePermissions
from resource_permissions.grants_store.models import ResourceGrant
from resource_permissions.models import ObjectRef
from tests.articles.models import Article

pytestmark = [
    pytest.mark.django_db,
    pytest.mark.skipif(
        not (get_settings().uuid_primary_key and get_settings().uuid_references),
        reason="requires --ds=config.settings_uuid",
    ),
]


def _member() -> ObjectRef:
    return ObjectRef("accounts.member", uuid.uuid4())


def _doc() -> ObjectRef:
    return ObjectRef("docs.doc", uuid.uuid4())


@pytest.fixture
def perms() -> ResourcePermissions:
    content_type = ContentType.objects.get_for_model(Article)
    for codename in ("view", "edit"):
        Permission.objects.get_or_create(
            codename=codename, content_type=content_type, defaults={"name": codename}
        )
    editor, _ = Group.objects.get_or_create(name="editor")
    editor.permissions.add(Permission.objects.get(codename="edit", content_type=content_type))
    return ResourcePermissions.from_settings()


def test_grant_rows_use_uuid_keys(perms) -> None:
    member, doc = _member(), _doc()

    perms.grant_permission(member, doc, "edit")

    grant = ResourceGrant.objects.get()
    assert isinstance(grant.pk, uuid.UUID)
    assert grant.principal == member
    assert grant.resource == doc


def test_grant_and_check_on_uuid_refs(perms) -> None:
    member, doc, other_doc = _member(), _doc(), _doc()

    perms.grant_permission(member, doc, "edit")
    perms.assign_role(member, other_doc, "editor")

    assert perms.has_permission(member, doc, "edit") is True
    assert perms.has_permission(member, doc, "view") is False
    assert perms.has_permission(member, other_doc, "edit") is True
    assert perms.has_permission(member, _doc(), "edit") is False
    # string spelling of the same UUID addresses the same resource
    assert perms.has_permission(member, ObjectRef("docs.doc", str(doc.object_id)), "edit") is True


def test_double_grant_creates_one_row(perms) -> None:
    member, doc = _member(), _doc()

    perms.grant_permission(member, doc, "edit")
    perms.grant_permission(member, doc, "edit")

    assert ResourceGrant.objects.for_principal(member).for_resource(doc).count() == 1


def test_assigned_principals_with_uuid_candidates(perms) -> None:
    doc = _doc()
    p1, p2, p3, p4 = (_member() for _ in range(4))
    perms.grant_permission(p1, doc, "view")
    perms.assign_role(p2, doc, "editor")
    perms.grant_permission(p3, _doc(), "view")

    assert perms.get_assigned_principals(doc) == {p1, p2}
    assert perms.get_assigned_principals(doc, candidates=[p1, p4]) == {p1}
    assert perms.has_all_assigned([p1, p2], doc) is True
    assert perms.has_all_assigned([p1, p3], doc) is False
    assert perms.has_any_assigned([p3, p4], doc) is False


def test_reference_columns_are_uuid(perms) -> None:
    with connection.cursor() as cursor:
        description = connection.introspection.get_table_description(
            cursor, ResourceGrant._meta.db_table
        )
    columns = {column.name for column in description}
    assert {"id", "principal_id", "resource_id", "permission_id", "role_id"} <= columns
    assert ResourceGrant._meta.get_field("principal_id").get_internal_type() == "UUIDField"
    assert ResourceGrant._meta.get_field("resource_id").get_internal_type() == "UUIDField"
