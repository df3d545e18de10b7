"""
Auth module: password hashing, JWT creation/validation and the FastAPI
dependencies that resolve and authorize the current principal.

Every protected route depends on ``get_current_user``. The token subject is
resolved back to the stored account on each request, so deactivating a user
takes effect immediately instead of when their token expires.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

import bcrypt
from fastapi import Depends, Request
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_scheduler import policy
from clinic_scheduler.config import get_settings
from clinic_scheduler.database import get_db
from clinic_scheduler.exceptions import AuthenticationError
from clinic_scheduler.models.enums import Role
from clinic_scheduler.repositories.user import UserRepository

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

# bcrypt only looks at the first 72 bytes
_BCRYPT_MAX_BYTES = 72


@dataclass(frozen=True)
class UserPrincipal:
    """Resolved identity attached to each request."""
    id: int
    username: str
    name: str
    role: Role
    active: bool = True

    @property
    def capabilities(self) -> frozenset[str]:
        return policy.capabilities_for(self.role)

    @property
    def is_patient(self) -> bool:
        return self.role == Role.PATIENT

    def can(self, capability: str) -> bool:
        return capability in self.capabilities

    @classmethod
    def from_user(cls, user) -> "UserPrincipal":
        return cls(id=user.id, username=user.username, name=user.name, role=user.role, active=user.active)


def hash_password(password: str) -> str:
    settings = get_settings()
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8")[:_BCRYPT_MAX_BYTES], salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8")[:_BCRYPT_MAX_BYTES], password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def create_token(user) -> str:
    """Create a signed JWT for the given User model instance."""
    settings = get_settings()
    payload = {
        "sub": user.username,
        "uid": user.id,
        "role": user.role.value,
        "exp": int(time.time()) + settings.token_expire_seconds,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    """Decode and validate a JWT. Returns None if invalid/expired."""
    try:
        settings = get_settings()
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[ALGORITHM])
    except JWTError:
        return None


async def get_current_user(request: Request, db: AsyncSession = Depends(get_db)) -> UserPrincipal:
    """FastAPI dependency. Extracts the bearer token and loads the account behind it."""
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        raise AuthenticationError("Authentication required")
    payload = decode_token(auth_header[7:])
    if not payload or "sub" not in payload:
        raise AuthenticationError("Invalid or expired token")

    user = await UserRepository(db).get_by_username(payload["sub"])
    if user is None or not user.active:
        logger.warning("Rejected token for unknown or inactive user %s", payload["sub"])
        raise AuthenticationError("Invalid or expired token")
    return UserPrincipal.from_user(user)


def require(capability: str):
    """Dependency factory: the current principal, provided its role grants ``capability``."""

    async def dependency(current_user: UserPrincipal = Depends(get_current_user)) -> UserPrincipal:
        policy.check(current_user, capability)
        return current_user

    return dependency
