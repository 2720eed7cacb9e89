"""
Resource Permissions - Authentication Backend
=============================================
Answers object-level ``user.has_perm(perm, obj)`` from resource-scoped
grants. Checks without ``obj`` are left to the other backends.

    AUTHENTICATION_BACKENDS = [
        "django.contrib.auth.backends.ModelBackend",
        "resource_permissions.backends.ResourcePermissionBackend",
    ]

ModelBackend ignores object-level checks, so global and scoped grants stay
independent. Allowing either is the caller's explicit choice:

    user.has_perm("articles.edit_article") or user.has_perm("articles.edit_article", article)
"""

from __future__ import annotations

from django.contrib.auth.backends import BaseBackend

from resource_permissions.engine import get_resource_permissions


class ResourcePermissionBackend(BaseBackend):
    def authenticate(self, request, **credentials):
        return None

    def has_perm(self, user_obj, perm, obj=None) -> bool:
        if obj is None:
            return False
        if not getattr(user_obj, "is_active", False) or user_obj.is_anonymous:
            return False
        return get_resource_permissions().has_permission(user_obj, obj, perm)
