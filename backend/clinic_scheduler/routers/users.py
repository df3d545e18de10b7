from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession
from clinic_scheduler import policy
from clinic_scheduler.auth import UserPrincipal, get_current_user, require
from clinic_scheduler.database import get_db
from clinic_scheduler.exceptions import AuthorizationError
from clinic_scheduler.models.enums import Role
from clinic_scheduler.schemas.user import UserCreate, UserResponse, UserUpdate
from clinic_scheduler.services.user_service import user_service

router = APIRouter()


def _to_responses(users) -> list[UserResponse]:
    return [UserResponse.model_validate(u) for u in users]


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    data: UserCreate,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(require(policy.USERS_WRITE)),
):
    return UserResponse.model_validate(await user_service.create(db, data))


@router.post("/bootstrap-admin", response_model=UserResponse, status_code=201)
async def bootstrap_admin(data: UserCreate, db: AsyncSession = Depends(get_db)):
    """Create the first account (always a doctor). Rejected once any user exists."""
    return UserResponse.model_validate(await user_service.bootstrap_admin(db, data))


@router.get("", response_model=list[UserResponse])
async def list_users(
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(require(policy.USERS_READ)),
):
    return _to_responses(await user_service.list_all(db))


@router.get("/active", response_model=list[UserResponse])
async def list_active_users(
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(require(policy.USERS_READ)),
):
    return _to_responses(await user_service.list_active(db))


@router.get("/role/{role}", response_model=list[UserResponse])
async def list_users_by_role(
    role: Role,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(require(policy.USERS_READ)),
):
    return _to_responses(await user_service.list_by_role(db, role))


@router.get("/username/{username}", response_model=UserResponse)
async def get_user_by_username(
    username: str,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(require(policy.USERS_READ)),
):
    return UserResponse.model_validate(await user_service.get_by_username(db, username))


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(get_current_user),
):
    policy.check(current_user, policy.USERS_READ, owner_user_id=user_id)
    return UserResponse.model_validate(await user_service.get(db, user_id))


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    data: UserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(get_current_user),
):
    policy.check(current_user, policy.USERS_WRITE, owner_user_id=user_id)
    if not current_user.can(policy.USERS_WRITE):
        privileged = sorted(policy.PRIVILEGED_USER_FIELDS & data.model_fields_set)
        if privileged:
            raise AuthorizationError(f"Your role does not permit changing: {', '.join(privileged)}")
    return UserResponse.model_validate(await user_service.update(db, user_id, data))


@router.put("/{user_id}/activate", response_model=UserResponse)
async def activate_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(require(policy.USERS_WRITE)),
):
    return UserResponse.model_validate(await user_service.activate(db, user_id))


@router.put("/{user_id}/deactivate", response_model=UserResponse)
async def deactivate_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(require(policy.USERS_WRITE)),
):
    return UserResponse.model_validate(await user_service.deactivate(db, user_id))


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(require(policy.USERS_DELETE)),
):
    await user_service.delete(db, user_id)
    return Response(status_code=204)
