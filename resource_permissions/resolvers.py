"""
Resource Permissions - Principal Resolution
===========================================
Turns ObjectRefs back into live entities, one fetch per distinct type.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Iterable, Protocol

from resource_permissions.models import ObjectRef

logger = logging.getLogger("resource_permissions.resolvers")


class PrincipalResolver(Protocol):
    def resolve(self, type_label: str, ids: list[Any]) -> list[Any]:
        ...


class DjangoModelResolver:
    """Resolve ``app_label.model_name`` labels through the app registry."""

    def resolve(self, type_label: str, ids: list[Any]) -> list[Any]:
        from django.apps import apps

        try:
            model = apps.get_model(type_label)
        except (LookupError, ValueError):
            logger.warning(f"Skipping unresolvable principal type '{type_label}'.")
            return []

        found = model._default_manager.in_bulk(ids)
        missing = [object_id for object_id in ids if object_id not in found]
        if missing:
            logger.debug(f"Dangling {type_label} references ignored: {missing}")
        return [found[object_id] for object_id in ids if object_id in found]


def resolve_refs(refs: Iterable[ObjectRef], resolver: PrincipalResolver) -> list[Any]:
    """
    Resolve references grouped by type, preserving first-seen type order.
    Query count is bounded by the number of distinct types, not references.
    """
    ids_by_type: dict[str, list[Any]] = defaultdict(list)
    for ref in refs:
        if ref.object_id not in ids_by_type[ref.type_label]:
            ids_by_type[ref.type_label].append(ref.object_id)

    resolved: list[Any] = []
    for type_label, ids in ids_by_type.items():
        resolved.extend(resolver.resolve(type_label, ids))
    return resolved
