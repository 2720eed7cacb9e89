"""
Resource Permissions - Errors
=============================
Infrastructure and programmer errors only.

Authorization denials are never exceptions: every check returns a bool.
"""

from __future__ import annotations


class ResourcePermissionError(Exception):
    """Base error for resource permission operations."""
    pass


class StoreUnavailable(ResourcePermissionError):
    """The grant store could not be read or written."""

    def __init__(self, operation: str, cause: Exception):
        self.operation = operation
        self.cause = cause
        super().__init__(
            f"Grant store unavailable during '{operation}': "
            f"{type(cause).__name__}: {cause}"
        )


class IntegrityViolation(ResourcePermissionError):
    """A grant uniqueness constraint was violated on write."""

    def __init__(self, operation: str, cause: Exception):
        self.operation = operation
        self.cause = cause
        super().__init__(
            f"Grant integrity violated during '{operation}': {cause}"
        )


class UnknownPermissionName(ResourcePermissionError):
    """A permission name does not resolve in the registry."""

    def __init__(self, name):
        self.name = name
        super().__init__(f"Permission '{name}' is not registered.")
