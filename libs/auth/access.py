"""Access gate: turns (identity, required roles) into an access decision.

The gate never raises. Callers decide what a denial means for them: the
FastAPI dependencies in ``libs.auth.dependencies`` turn it into 401/403, the
``/access/check`` endpoint reports it so the frontend can redirect or keep
showing a loading state.
"""

import enum
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Union

from libs.auth.roles import Role, has_any_role, parse_role


class SessionState(str, enum.Enum):
    """Identity placeholders for callers whose session is not a user."""

    LOADING = "loading"
    ANONYMOUS = "anonymous"


class AccessOutcome(str, enum.Enum):
    ALLOWED = "allowed"
    DENIED = "denied"
    INDETERMINATE = "indeterminate"


@dataclass(frozen=True)
class AccessDecision:
    outcome: AccessOutcome
    required_roles: tuple[str, ...] = ()
    actual_role: Optional[str] = None
    authenticated: bool = True

    @classmethod
    def allow(cls) -> "AccessDecision":
        return cls(AccessOutcome.ALLOWED)

    @classmethod
    def indeterminate(cls) -> "AccessDecision":
        return cls(AccessOutcome.INDETERMINATE, authenticated=False)

    @classmethod
    def deny(
        cls,
        required_roles: tuple[str, ...] = (),
        actual_role: Optional[str] = None,
        authenticated: bool = True,
    ) -> "AccessDecision":
        return cls(
            AccessOutcome.DENIED,
            required_roles=required_roles,
            actual_role=actual_role,
            authenticated=authenticated,
        )

    @property
    def allowed(self) -> bool:
        return self.outcome is AccessOutcome.ALLOWED

    @property
    def denied(self) -> bool:
        return self.outcome is AccessOutcome.DENIED

    @property
    def is_indeterminate(self) -> bool:
        return self.outcome is AccessOutcome.INDETERMINATE

    @property
    def message(self) -> Optional[str]:
        """User-facing explanation for a denial."""
        if not self.denied:
            return None
        if not self.authenticated:
            return "Authentication required"
        actual = self.actual_role or "none"
        required = " or ".join(self.required_roles)
        return f"Insufficient role: requires {required}, your role is {actual}"


Identity = Union[SessionState, Any, None]


def _role_names(roles: Iterable[Any]) -> tuple[str, ...]:
    names = []
    for role in roles:
        name = role.value if isinstance(role, Role) else str(role)
        if name not in names:
            names.append(name)
    return tuple(sorted(names))


def check_access(identity: Identity, required_roles: Iterable[Any]) -> AccessDecision:
    """Decide whether ``identity`` may use a resource gated by ``required_roles``.

    ``identity`` is ``SessionState.LOADING`` while the session is still being
    resolved, ``SessionState.ANONYMOUS`` or ``None`` without a session, and
    otherwise any object with a ``role`` attribute (``AuthUser``, ``User``).
    An empty ``required_roles`` admits any authenticated identity, with or
    without a recognised role.
    Required roles are matched exactly, not by hierarchy.
    """
    if identity is SessionState.LOADING:
        return AccessDecision.indeterminate()

    required = _role_names(required_roles)

    if identity is None or identity is SessionState.ANONYMOUS:
        return AccessDecision.deny(required, authenticated=False)

    raw_role = getattr(identity, "role", None)
    role = parse_role(raw_role)
    actual = role.value if role else (str(raw_role) if raw_role else None)

    if not required:
        return AccessDecision.allow()
    if role is None:
        return AccessDecision.deny(required, actual)
    if has_any_role(role, required):
        return AccessDecision.allow()
    return AccessDecision.deny(required, actual)


# ---------------------------------------------------------------------------
# Named resources
# ---------------------------------------------------------------------------

PUBLIC_RESOURCES: tuple[str, ...] = (
    "/",
    "/auth/login",
    "/auth/register",
    "/auth/forgot-password",
    "/auth/reset-password",
    "/auth/verify-email",
    "/auth/error",
    "/about",
    "/contact",
    "/privacy",
    "/terms",
    "/trainers",
    "/dogs",
)

# Path prefix -> roles allowed; an empty tuple means any authenticated user.
PROTECTED_RESOURCES: dict[str, tuple[Role, ...]] = {
    "/dashboard": (),
    "/dashboard/profile": (),
    "/dashboard/settings": (),
    "/dashboard/dogs": (),
    "/dashboard/agreements": (),
    "/dashboard/trainers": (Role.HANDLER,),
    "/dashboard/clients": (Role.TRAINER, Role.AIDE),
    "/dashboard/analytics": (Role.TRAINER, Role.ADMIN, Role.SUPER_ADMIN),
    "/dashboard/admin": (Role.ADMIN, Role.SUPER_ADMIN),
    "/dashboard/admin/users": (Role.SUPER_ADMIN,),
    "/dashboard/admin/organizations": (Role.SUPER_ADMIN,),
    "/api/dogs": (),
    "/api/profile": (),
    "/api/agreements": (),
    "/api/admin": (Role.ADMIN, Role.SUPER_ADMIN),
}


def _matches(resource: str, prefix: str) -> bool:
    if prefix == "/":
        return resource == "/"
    return resource == prefix or resource.startswith(prefix + "/")


def is_public_resource(resource: str) -> bool:
    return any(_matches(resource, route) for route in PUBLIC_RESOURCES)


def required_roles_for(resource: str) -> tuple[Role, ...]:
    """Allowed roles for ``resource``; the most specific prefix wins.

    Resources missing from the table require authentication only.
    """
    for prefix in sorted(PROTECTED_RESOURCES, key=len, reverse=True):
        if _matches(resource, prefix):
            return PROTECTED_RESOURCES[prefix]
    return ()


def check_resource_access(identity: Identity, resource: str) -> AccessDecision:
    if is_public_resource(resource):
        return AccessDecision.allow()
    return check_access(identity, required_roles_for(resource))
