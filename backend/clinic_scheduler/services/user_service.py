import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from clinic_scheduler.auth import hash_password, verify_password
from clinic_scheduler.exceptions import AuthenticationError, BusinessError, NotFoundError
from clinic_scheduler.models.enums import Role
from clinic_scheduler.models.user import User
from clinic_scheduler.repositories.user import UserRepository
from clinic_scheduler.schemas.user import RegisterRequest, UserCreate, UserUpdate
from clinic_scheduler.services.partial import supplied_fields

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("name", "email", "role", "active", "password")


class UserService:
    """Account management: registration, bootstrap, credentials and profile edits."""

    async def create(self, db: AsyncSession, data: UserCreate, role: Optional[Role] = None) -> User:
        repo = UserRepository(db)
        # Username first: a taken username short-circuits before the email lookup
        if await repo.exists_by_username(data.username):
            raise BusinessError(f"Username already exists: {data.username}")
        if await repo.exists_by_email(data.email):
            raise BusinessError(f"Email already exists: {data.email}")

        user = User(
            username=data.username,
            email=data.email,
            password_hash=hash_password(data.password),
            name=data.name,
            phone=data.phone,
            role=role or data.role,
            active=True,
        )
        await repo.add(user, f"Username or email already exists: {data.username} / {data.email}")
        logger.info("Created user %s (id=%s, role=%s)", user.username, user.id, user.role.value)
        return user

    async def register(self, db: AsyncSession, data: RegisterRequest) -> User:
        """Self-service sign-up. Always a patient account."""
        return await self.create(db, UserCreate(**data.model_dump()), role=Role.PATIENT)

    async def bootstrap_admin(self, db: AsyncSession, data: UserCreate) -> User:
        """Seed the first privileged account. Only allowed while no user exists."""
        if await UserRepository(db).count() > 0:
            raise BusinessError("Bootstrap admin creation is only allowed when no users exist")
        return await self.create(db, data, role=Role.DOCTOR)

    async def authenticate(self, db: AsyncSession, username: str, password: str) -> User:
        user = await UserRepository(db).get_by_username(username)
        if user is None or not verify_password(password, user.password_hash) or not user.active:
            logger.warning("Failed login for username %s", username)
            raise AuthenticationError("Invalid credentials")
        return user

    async def get(self, db: AsyncSession, user_id: int) -> User:
        user = await UserRepository(db).get(user_id)
        if user is None:
            raise NotFoundError("User", "id", user_id)
        return user

    async def get_by_username(self, db: AsyncSession, username: str) -> User:
        user = await UserRepository(db).get_by_username(username)
        if user is None:
            raise NotFoundError("User", "username", username)
        return user

    async def list_all(self, db: AsyncSession) -> list[User]:
        return await UserRepository(db).list_all()

    async def list_by_role(self, db: AsyncSession, role: Role) -> list[User]:
        return await UserRepository(db).list_by_role(role)

    async def list_active(self, db: AsyncSession) -> list[User]:
        return await UserRepository(db).list_active()

    async def update(self, db: AsyncSession, user_id: int, changes: UserUpdate) -> User:
        repo = UserRepository(db)
        user = await self.get(db, user_id)
        fields = supplied_fields(changes, required=_REQUIRED_FIELDS)

        new_email = fields.get("email")
        if new_email is not None and new_email != user.email and await repo.exists_by_email(new_email):
            raise BusinessError(f"Email already exists: {new_email}")

        password = fields.pop("password", None)
        if password is not None:
            user.password_hash = hash_password(password)
        for key, value in fields.items():
            setattr(user, key, value)

        await repo.save(user, f"Email already exists: {user.email}")
        logger.info("Updated user %s (fields=%s)", user.id, sorted(changes.model_fields_set))
        return user

    async def set_active(self, db: AsyncSession, user_id: int, active: bool) -> User:
        repo = UserRepository(db)
        user = await self.get(db, user_id)
        user.active = active
        await repo.save(user, f"Could not update user {user_id}")
        logger.info("User %s %s", user_id, "activated" if active else "deactivated")
        return user

    async def activate(self, db: AsyncSession, user_id: int) -> User:
        return await self.set_active(db, user_id, True)

    async def deactivate(self, db: AsyncSession, user_id: int) -> User:
        return await self.set_active(db, user_id, False)

    async def delete(self, db: AsyncSession, user_id: int) -> None:
        user = await self.get(db, user_id)
        await UserRepository(db).delete(user)
        logger.info("Deleted user %s", user_id)


user_service = UserService()
