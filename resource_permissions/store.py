"""
Resource Permissions - Grant Store Protocol and In-Memory Store
===============================================================
The store is the only shared mutable resource. Every implementation must be
safe for concurrent callers and must enforce grant uniqueness itself.
"""

from __future__ import annotations

import itertools
import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from threading import RLock
from typing import ContextManager, Iterable, Protocol

from resource_permissions.models import GrantFilter, GrantRecord, ObjectRef

logger = logging.getLogger("resource_permissions.store")


class GrantStore(Protocol):
    def insert_if_absent(self, record: GrantRecord) -> GrantRecord:
        ...

    def delete_matching(self, grant_filter: GrantFilter) -> int:
        ...

    def find_matching(self, grant_filter: GrantFilter) -> list[GrantRecord]:
        ...

    def exists_matching(self, grant_filter: GrantFilter) -> bool:
        ...

    def distinct_principals(self, grant_filter: GrantFilter) -> list[ObjectRef]:
        ...

    def atomic(self) -> ContextManager:
        ...


class InMemoryGrantStore:
    """
    Thread-safe in-memory grant store used for bootstrap/tests.

    Data is not persisted across process restarts. Uniqueness is keyed on
    GrantRecord.uniqueness_key(), so concurrent inserts for the same
    (principal, resource, permission) or (principal, resource, role) collapse
    into one record.
    """

    def __init__(
        self,
        records: Iterable[GrantRecord] | None = None,
        *,
        uuid_primary_key: bool = False,
    ):
        self._uuid_primary_key = uuid_primary_key
        self._sequence = itertools.count(1)
        self._records: dict[tuple, GrantRecord] = {}
        self._lock = RLock()

        for record in records or ():
            self.insert_if_absent(record)

    def _next_id(self):
        if self._uuid_primary_key:
            return uuid.uuid4()
        return next(self._sequence)

    def atomic(self) -> RLock:
        return self._lock

    def insert_if_absent(self, record: GrantRecord) -> GrantRecord:
        with self._lock:
            if record.permission_id is not None or record.role_id is not None:
                existing = self._records.get(record.uniqueness_key())
                if existing is not None:
                    return existing

            now = datetime.now(timezone.utc)
            stored = replace(
                record,
                id=self._next_id() if record.id is None else record.id,
                created_at=record.created_at or now,
                updated_at=record.updated_at or now,
            )
            self._records[stored.uniqueness_key()] = stored
            logger.debug(f"Inserted grant {stored.id} for {stored.principal} on {stored.resource}")
            return stored

    def delete_matching(self, grant_filter: GrantFilter) -> int:
        with self._lock:
            doomed = [
                key
                for key, record in self._records.items()
                if grant_filter.matches(record)
            ]
            for key in doomed:
                del self._records[key]
            return len(doomed)

    def find_matching(self, grant_filter: GrantFilter) -> list[GrantRecord]:
        with self._lock:
            return [r for r in self._records.values() if grant_filter.matches(r)]

    def exists_matching(self, grant_filter: GrantFilter) -> bool:
        with self._lock:
            return any(grant_filter.matches(r) for r in self._records.values())

    def distinct_principals(self, grant_filter: GrantFilter) -> list[ObjectRef]:
        with self._lock:
            principals = {
                r.principal for r in self._records.values() if grant_filter.matches(r)
            }
        return sorted(principals, key=lambda ref: ref.sort_key())

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
