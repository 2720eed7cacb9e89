from __future__ import annotations

import uuid
from concurrent.futures import ThreadPoolExecutor

from resource_permissions.models import GrantFilter, GrantRecord, ObjectRef
from resource_permissions.store import InMemoryGrantStore

USER_1 = ObjectRef("auth.user", 1)
USER_2 = ObjectRef("auth.user", 2)
ARTICLE_1 = ObjectRef("articles.article", 1)


def test_insert_if_absent_returns_existing_record() -> None:
    store = InMemoryGrantStore()
    first = store.insert_if_absent(
        GrantRecord(principal=USER_1, resource=ARTICLE_1, permission_id=1, granted_by_id=9)
    )
    second = store.insert_if_absent(
        GrantRecord(principal=USER_1, resource=ARTICLE_1, permission_id=1, granted_by_id=10)
    )

    assert second == first
    assert second.granted_by_id == 9
    assert len(store) == 1


def test_permission_and_role_rows_coexist() -> None:
    store = InMemoryGrantStore()
    store.insert_if_absent(GrantRecord(principal=USER_1, resource=ARTICLE_1, permission_id=1))
    store.insert_if_absent(GrantRecord(principal=USER_1, resource=ARTICLE_1, role_id=1))

    assert len(store) == 2
    assert store.exists_matching(GrantFilter(principal=USER_1, kind="role"))


def test_concurrent_inserts_collapse_into_one_row() -> None:
    store = InMemoryGrantStore()
    record = GrantRecord(principal=USER_1, resource=ARTICLE_1, permission_id=1)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: store.insert_if_absent(record), range(64)))

    assert len(store) == 1
    assert len({r.id for r in results}) == 1


def test_delete_matching_returns_count() -> None:
    store = InMemoryGrantStore()
    for permission_id in (1, 2, 3):
        store.insert_if_absent(
            GrantRecord(principal=USER_1, resource=ARTICLE_1, permission_id=permission_id)
        )

    deleted = store.delete_matching(GrantFilter(principal=USER_1, permission_ids=(1, 3)))

    assert deleted == 2
    assert [r.permission_id for r in store.find_matching(GrantFilter())] == [2]


def test_distinct_principals() -> None:
    store = InMemoryGrantStore()
    store.insert_if_absent(GrantRecord(principal=USER_1, resource=ARTICLE_1, permission_id=1))
    store.insert_if_absent(GrantRecord(principal=USER_1, resource=ARTICLE_1, role_id=1))
    store.insert_if_absent(GrantRecord(principal=USER_2, resource=ARTICLE_1, role_id=1))

    assert store.distinct_principals(GrantFilter(resource=ARTICLE_1)) == [USER_1, USER_2]


def test_uuid_primary_keys() -> None:
    store = InMemoryGrantStore(uuid_primary_key=True)
    record = store.insert_if_absent(
        GrantRecord(principal=USER_1, resource=ARTICLE_1, permission_id=1)
    )
    assert isinstance(record.id, uuid.UUID)
    assert record.created_at is not None
