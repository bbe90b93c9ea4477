"""
Permissions and Roles Configuration
This config defines the static permission table: which role may perform which
"resource:action". The table is built once at import time and is read-only
afterwards; roles and permissions are closed enums so a misspelt tag fails at
import instead of silently denying access.
"""

from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Union


class Role(str, Enum):
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    EDITOR = "editor"
    USER = "user"


class Permission(str, Enum):
    SERVICES_CREATE = "services:create"
    SERVICES_READ = "services:read"
    SERVICES_UPDATE = "services:update"
    SERVICES_DELETE = "services:delete"
    BLOG_CREATE = "blog:create"
    BLOG_READ = "blog:read"
    BLOG_UPDATE = "blog:update"
    BLOG_DELETE = "blog:delete"
    TRAINING_CREATE = "training:create"
    TRAINING_READ = "training:read"
    TRAINING_UPDATE = "training:update"
    TRAINING_DELETE = "training:delete"
    CONTACT_CREATE = "contact:create"
    CONTACT_READ = "contact:read"
    CONTACT_UPDATE = "contact:update"
    CONTACT_DELETE = "contact:delete"
    USERS_CREATE = "users:create"
    USERS_READ = "users:read"
    USERS_UPDATE = "users:update"

    @property
    def resource(self) -> str:
        return self.value.split(":", 1)[0]

    @property
    def action(self) -> str:
        return self.value.split(":", 1)[1]


# Grants every permission, present and future
WILDCARD = "*"

# Resource descriptions used when publishing the matrix
MODULES = {
    "services": "Services catalog",
    "blog": "Blog posts",
    "training": "Training content",
    "contact": "Contact form submissions",
    "users": "User accounts and roles",
}


def _grant(*permissions: Permission) -> FrozenSet[str]:
    return frozenset(p.value for p in permissions)


_ROLE_PERMISSIONS: Dict[Role, FrozenSet[str]] = {
    Role.SUPER_ADMIN: frozenset({WILDCARD}),
    Role.ADMIN: _grant(
        Permission.SERVICES_CREATE,
        Permission.SERVICES_READ,
        Permission.SERVICES_UPDATE,
        Permission.SERVICES_DELETE,
        Permission.BLOG_CREATE,
        Permission.BLOG_READ,
        Permission.BLOG_UPDATE,
        Permission.BLOG_DELETE,
        Permission.TRAINING_CREATE,
        Permission.TRAINING_READ,
        Permission.TRAINING_UPDATE,
        Permission.TRAINING_DELETE,
        Permission.CONTACT_READ,
        Permission.CONTACT_UPDATE,
        Permission.CONTACT_DELETE,
        Permission.USERS_READ,
    ),
    Role.EDITOR: _grant(
        Permission.SERVICES_CREATE,
        Permission.SERVICES_READ,
        Permission.SERVICES_UPDATE,
        Permission.BLOG_CREATE,
        Permission.BLOG_READ,
        Permission.BLOG_UPDATE,
        Permission.TRAINING_CREATE,
        Permission.TRAINING_READ,
        Permission.TRAINING_UPDATE,
        Permission.CONTACT_READ,
    ),
    Role.USER: _grant(
        Permission.SERVICES_READ,
        Permission.BLOG_READ,
        Permission.TRAINING_READ,
        Permission.CONTACT_CREATE,
    ),
}

ROLE_PERMISSIONS: Mapping[Role, FrozenSet[str]] = MappingProxyType(_ROLE_PERMISSIONS)


def parse_role(value: Union[Role, str, None]) -> Union[Role, None]:
    """Return the Role for a stored/claimed value, or None when it is not a known role."""
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError:
        return None


def permissions_for(role: Union[Role, str, None]) -> FrozenSet[str]:
    parsed = parse_role(role)
    if parsed is None:
        return frozenset()
    return ROLE_PERMISSIONS[parsed]


def is_allowed(role: Union[Role, str, None], permission: Union[Permission, str]) -> bool:
    """Exact match or wildcard only; "services:*" style prefixes are not supported."""
    granted = permissions_for(role)
    name = permission.value if isinstance(permission, Permission) else permission
    return WILDCARD in granted or name in granted


def expand_permissions(role: Union[Role, str, None]) -> List[str]:
    """Concrete permission names for a role, with the wildcard expanded."""
    granted = permissions_for(role)
    if WILDCARD in granted:
        return [p.value for p in Permission]
    return sorted(granted)


def get_permission_matrix():
    """
    Returns the table as plain data
    Format: {
        "permissions": [
            {"name": "blog:create", "resource": "blog", "action": "create", "description": "..."},
            ...
        ],
        "roles": [
            {"name": "editor", "permissions": ["blog:create", ...]},
            ...
        ]
    }
    """
    permissions = []
    for permission in Permission:
        permissions.append({
            "name": permission.value,
            "resource": permission.resource,
            "action": permission.action,
            "description": f"{permission.action.capitalize()} {MODULES[permission.resource].lower()}"
        })

    roles = []
    for role, granted in ROLE_PERMISSIONS.items():
        roles.append({
            "name": role.value,
            "permissions": sorted(granted)
        })

    return {
        "permissions": permissions,
        "roles": roles
    }
