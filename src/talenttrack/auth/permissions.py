"""Static role -> resource -> actions table."""

from __future__ import annotations

from typing import Mapping

from ..core.enums import Role

_CRUD = ("create", "read", "update", "delete")

PERMISSIONS: dict[str, dict[str, tuple[str, ...]]] = {
    Role.ADMIN.value: {
        "users": _CRUD,
        "employees": _CRUD,
        "departments": _CRUD,
        "attendance": _CRUD,
        "leaves": _CRUD + ("approve", "reject"),
        "payroll": _CRUD,
        "performance": _CRUD,
        "training": _CRUD,
        "documents": _CRUD,
        "recruitment": _CRUD,
        "onboarding": _CRUD,
        "offboarding": _CRUD,
        "notifications": _CRUD,
        "reports": ("read", "export"),
    },
    Role.HR.value: {
        "users": ("create", "read", "update"),
        "employees": ("create", "read", "update"),
        "departments": ("read", "update"),
        "attendance": ("read", "update"),
        "leaves": ("read", "approve", "reject"),
        "payroll": ("create", "read", "update"),
        "performance": ("create", "read", "update"),
        "training": ("create", "read", "update"),
        "documents": ("create", "read", "update"),
        "recruitment": ("create", "read", "update"),
        "onboarding": ("create", "read", "update"),
        "offboarding": ("create", "read", "update"),
        "notifications": ("create", "read"),
        "reports": ("read", "export"),
    },
    Role.MANAGER.value: {
        "employees": ("read",),
        "attendance": ("read",),
        "leaves": ("read", "approve", "reject"),
        "performance": ("create", "read", "update"),
        "training": ("read", "assign"),
        "documents": ("read",),
        "notifications": ("read",),
        "reports": ("read",),
    },
    Role.EMPLOYEE.value: {
        "employees": ("read",),
        "attendance": ("create", "read"),
        "leaves": ("create", "read"),
        "performance": ("read",),
        "training": ("read",),
        "documents": ("read",),
        "notifications": ("read",),
        "profile": ("read", "update"),
    },
}


def get_permissions(role: str) -> Mapping[str, tuple[str, ...]]:
    return PERMISSIONS.get(getattr(role, "value", role), {})


def has_permission(permissions: Mapping[str, tuple[str, ...]], resource: str, action: str) -> bool:
    return action in permissions.get(resource, ())
