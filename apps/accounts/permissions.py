"""Authorization model: who may perform which action on which resource.

The decision is a pure function of the principal (role, access_level,
permissions map) and the requested (resource, action) pair.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

RESOURCES = ("dashboard", "sales", "customers", "products", "reports", "agents")
ACTIONS = ("view", "add", "edit", "delete")

ROLE_ADMIN = "admin"
ROLE_AGENT = "agent"
ROLE_ACCOUNTANT = "accountant"

EDIT_LEVEL_ACTIONS = frozenset({"view", "edit", "add"})

# Grants for accountants, and for agents without an access_level.
ROLE_DEFAULTS = {
    ROLE_ACCOUNTANT: {
        "*": {"view"},
        "sales": {"view", "payment"},
        "reports": {"view", "export"},
    },
    ROLE_AGENT: {
        "*": {"view"},
        "sales": {"view", "add", "edit"},
        "customers": {"view", "add", "edit"},
    },
}


@dataclass(frozen=True)
class PermissionMap:
    """resource -> action -> bool grid; missing entries are denials."""

    grid: Mapping[str, Mapping[str, bool]] = field(default_factory=dict)

    @classmethod
    def parse(cls, raw) -> "PermissionMap":
        """Build a map from a dict or JSON text; anything malformed denies all."""
        if raw is None or raw == "":
            return cls()
        if isinstance(raw, (str, bytes)):
            try:
                raw = json.loads(raw)
            except ValueError:
                return cls()
        if not isinstance(raw, Mapping):
            return cls()

        grid: Dict[str, Dict[str, bool]] = {}
        for resource in RESOURCES:
            actions = raw.get(resource)
            if not isinstance(actions, Mapping):
                continue
            grid[resource] = {action: actions.get(action) is True for action in ACTIONS}
        return cls(grid)

    @classmethod
    def from_flags(cls, flags: Mapping) -> "PermissionMap":
        """Build a full grid from `<resource>_<action>` flags; unflagged pairs are False."""
        grid = {
            resource: {action: _truthy(flags.get(f"{resource}_{action}")) for action in ACTIONS}
            for resource in RESOURCES
        }
        return cls(grid)

    def allows(self, resource: str, action: str) -> bool:
        return self.grid.get(resource, {}).get(action, False) is True

    def as_dict(self) -> Dict[str, Dict[str, bool]]:
        return {resource: dict(actions) for resource, actions in self.grid.items()}


def _truthy(value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "on", "yes"}
    return False


@dataclass(frozen=True)
class Principal:
    role: str
    access_level: Optional[str] = None
    permissions: PermissionMap = field(default_factory=PermissionMap)

    @classmethod
    def from_user(cls, user) -> "Principal":
        return cls(
            role=user.role,
            access_level=user.access_level or None,
            permissions=PermissionMap.parse(user.permissions),
        )


def is_allowed(principal: Principal, resource: str, action: str) -> bool:
    if principal.role == ROLE_ADMIN:
        return True

    level = principal.access_level
    if level and principal.role == ROLE_AGENT:
        if level == "full":
            return True
        if level == "view":
            return action == "view"
        if level == "edit":
            return action in EDIT_LEVEL_ACTIONS
        if level == "custom":
            return principal.permissions.allows(resource, action)
        return False

    defaults = ROLE_DEFAULTS.get(principal.role)
    if not defaults:
        return False
    return action in defaults.get(resource, defaults.get("*", set()))
