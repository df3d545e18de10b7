"""
Uniform registry behaviour for the doctor, nurse and patient profiles.

Subclasses name their entity, the unique registration number it carries and the
repository that stores it. Everything else (create, lookups, partial update,
activation and delete) is shared.
"""

import logging
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_scheduler.exceptions import BusinessError, NotFoundError
from clinic_scheduler.repositories.profile import ProfileRepository
from clinic_scheduler.repositories.user import UserRepository
from clinic_scheduler.services.partial import supplied_fields

logger = logging.getLogger(__name__)

ProfileT = TypeVar("ProfileT")


class ProfileService(Generic[ProfileT]):
    entity_name: str                                # "Doctor"
    identifier: str                                 # model attribute, e.g. "crm"
    identifier_label: str                           # shown to callers, e.g. "CRM"
    repository_class: type[ProfileRepository]
    required_fields: tuple[str, ...] = ("active",)  # columns a partial update may not null out

    def repository(self, db: AsyncSession) -> ProfileRepository:
        return self.repository_class(db)

    def _duplicate_message(self, value: Any) -> str:
        return f"{self.identifier_label} already exists: {value}"

    async def create(self, db: AsyncSession, data: BaseModel) -> ProfileT:
        repo = self.repository(db)
        value = getattr(data, self.identifier)
        if await repo.exists_by_identifier(value):
            raise BusinessError(self._duplicate_message(value))

        user = await UserRepository(db).get(data.user_id)
        if user is None:
            raise NotFoundError("User", "id", data.user_id)
        if await repo.get_by_user_id(user.id) is not None:
            raise BusinessError(f"User {user.id} already has a {self.entity_name.lower()} profile")

        profile = repo.model(**data.model_dump(exclude={"user_id"}), user=user, active=True)
        await repo.add(profile, self._duplicate_message(value))
        logger.info("Created %s %s=%s for user %s", self.entity_name, self.identifier, value, user.id)
        return profile

    async def get(self, db: AsyncSession, profile_id: int) -> ProfileT:
        profile = await self.repository(db).get(profile_id)
        if profile is None:
            raise NotFoundError(self.entity_name, "id", profile_id)
        return profile

    async def get_by_identifier(self, db: AsyncSession, value: str) -> ProfileT:
        profile = await self.repository(db).get_by_identifier(value)
        if profile is None:
            raise NotFoundError(self.entity_name, self.identifier, value)
        return profile

    async def get_by_user_id(self, db: AsyncSession, user_id: int) -> ProfileT:
        profile = await self.repository(db).get_by_user_id(user_id)
        if profile is None:
            raise NotFoundError(self.entity_name, "user_id", user_id)
        return profile

    async def list_all(self, db: AsyncSession) -> list[ProfileT]:
        return await self.repository(db).list_all()

    async def list_active(self, db: AsyncSession) -> list[ProfileT]:
        return await self.repository(db).list_active()

    async def search_by_name(self, db: AsyncSession, fragment: str) -> list[ProfileT]:
        return await self.repository(db).search_by_name(fragment)

    async def update(self, db: AsyncSession, profile_id: int, changes: BaseModel) -> ProfileT:
        repo = self.repository(db)
        profile = await self.get(db, profile_id)
        fields = supplied_fields(changes, required=(self.identifier, *self.required_fields))

        new_value = fields.get(self.identifier)
        current_value = getattr(profile, self.identifier)
        # Only a changed identifier needs the uniqueness lookup
        if new_value is not None and new_value != current_value and await repo.exists_by_identifier(new_value):
            raise BusinessError(self._duplicate_message(new_value))

        for key, value in fields.items():
            setattr(profile, key, value)
        await repo.save(profile, self._duplicate_message(getattr(profile, self.identifier)))
        logger.info("Updated %s %s (fields=%s)", self.entity_name, profile_id, sorted(fields))
        return profile

    async def set_active(self, db: AsyncSession, profile_id: int, active: bool) -> ProfileT:
        profile = await self.get(db, profile_id)
        profile.active = active
        await self.repository(db).save(profile, f"Could not update {self.entity_name} {profile_id}")
        logger.info("%s %s %s", self.entity_name, profile_id, "activated" if active else "deactivated")
        return profile

    async def activate(self, db: AsyncSession, profile_id: int) -> ProfileT:
        return await self.set_active(db, profile_id, True)

    async def deactivate(self, db: AsyncSession, profile_id: int) -> ProfileT:
        return await self.set_active(db, profile_id, False)

    async def delete(self, db: AsyncSession, profile_id: int) -> None:
        profile = await self.get(db, profile_id)
        await self.repository(db).delete(profile)
        logger.info("Deleted %s %s", self.entity_name, profile_id)
