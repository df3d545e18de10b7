"""
Role-based access policy.

Capabilities are derived from the role alone through ROLE_CAPABILITIES. Patients
hold no global capabilities; they reach their own records through the owner rule
in ``check``, limited to OWNER_CAPABILITIES.
"""

from typing import Optional

from clinic_scheduler.exceptions import AuthorizationError
from clinic_scheduler.models.enums import Role

APPOINTMENTS_READ = "appointments:read"
APPOINTMENTS_WRITE = "appointments:write"
APPOINTMENTS_DELETE = "appointments:delete"
PROFILES_READ = "profiles:read"
PROFILES_WRITE = "profiles:write"
PROFILES_DELETE = "profiles:delete"
USERS_READ = "users:read"
USERS_WRITE = "users:write"
USERS_DELETE = "users:delete"

_STAFF = frozenset({
    APPOINTMENTS_READ, APPOINTMENTS_WRITE,
    PROFILES_READ, PROFILES_WRITE,
    USERS_READ, USERS_WRITE,
})

ROLE_CAPABILITIES: dict[Role, frozenset[str]] = {
    Role.DOCTOR: _STAFF | {APPOINTMENTS_DELETE, PROFILES_DELETE, USERS_DELETE},
    Role.NURSE: _STAFF,
    Role.PATIENT: frozenset(),
}

# What an owner may do with a record linked to their own account
OWNER_CAPABILITIES = frozenset({APPOINTMENTS_READ, PROFILES_READ, PROFILES_WRITE, USERS_READ, USERS_WRITE})

# Account fields only staff may change, even on their own account
PRIVILEGED_USER_FIELDS = frozenset({"role", "active"})

# Patient profile fields only staff may change, even on their own profile
PRIVILEGED_PATIENT_FIELDS = frozenset({"active"})


def capabilities_for(role: Role) -> frozenset[str]:
    return ROLE_CAPABILITIES.get(role, frozenset())


def is_allowed(principal, capability: str, owner_user_id: Optional[int] = None) -> bool:
    if capability in principal.capabilities:
        return True
    return (
        owner_user_id is not None
        and owner_user_id == principal.id
        and capability in OWNER_CAPABILITIES
    )


def check(principal, capability: str, owner_user_id: Optional[int] = None) -> None:
    """Raise AuthorizationError unless the principal holds the capability or owns the record."""
    if not is_allowed(principal, capability, owner_user_id):
        raise AuthorizationError(f"Access denied: role {principal.role.value} lacks {capability}")
