"""Role hierarchy and role checks.

Two kinds of check exist and they are deliberately different:

- ``has_permission`` compares ranks ("at least as senior as").
- ``has_any_role`` is an exact allow-list test and ignores ranks entirely,
  so TRAINER-only resources stay closed to AIDE even though both rank 1.

Both accept ``Role`` members, plain strings or ``None`` and fail closed on
anything that is not a known role.
"""

import enum
from typing import Any, Iterable, Optional


class Role(str, enum.Enum):
    """User roles, persisted with these exact values."""

    HANDLER = "HANDLER"
    TRAINER = "TRAINER"
    AIDE = "AIDE"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"


ROLE_HIERARCHY: dict[Role, int] = {
    Role.HANDLER: 0,
    Role.TRAINER: 1,
    Role.AIDE: 1,
    Role.ADMIN: 2,
    Role.SUPER_ADMIN: 3,
}

UNKNOWN_ROLE_RANK = -1

ADMIN_ROLES = frozenset({Role.ADMIN, Role.SUPER_ADMIN})
# Roles a user may pick for themselves at registration
REGISTRABLE_ROLES = frozenset({Role.HANDLER, Role.TRAINER, Role.AIDE})


def parse_role(value: Any) -> Optional[Role]:
    """Return the ``Role`` for ``value`` or ``None`` if it is not a known role."""
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except (ValueError, TypeError):
        return None


def role_rank(role: Any) -> int:
    parsed = parse_role(role)
    if parsed is None:
        return UNKNOWN_ROLE_RANK
    return ROLE_HIERARCHY[parsed]


def has_permission(user_role: Any, required_role: Any) -> bool:
    """True if ``user_role`` ranks at least as high as ``required_role``."""
    if parse_role(user_role) is None or parse_role(required_role) is None:
        return False
    return role_rank(user_role) >= role_rank(required_role)


def has_any_role(user_role: Any, allowed_roles: Iterable[Any]) -> bool:
    """True if ``user_role`` is literally one of ``allowed_roles``."""
    parsed = parse_role(user_role)
    if parsed is None:
        return False
    return parsed in normalize_roles(allowed_roles)


def normalize_roles(roles: Iterable[Any]) -> frozenset[Role]:
    """Parse an iterable of role values, dropping unknown entries."""
    parsed = (parse_role(role) for role in roles)
    return frozenset(role for role in parsed if role is not None)


def is_admin(role: Any) -> bool:
    return has_any_role(role, ADMIN_ROLES)
