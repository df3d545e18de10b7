from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from clinic_scheduler.auth import UserPrincipal, create_token, get_current_user
from clinic_scheduler.config import get_settings
from clinic_scheduler.database import get_db
from clinic_scheduler.schemas.auth import LoginRequest, LoginResponse
from clinic_scheduler.schemas.user import RegisterRequest, UserResponse
from clinic_scheduler.services.user_service import user_service

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Exchange username and password for a bearer token."""
    user = await user_service.authenticate(db, body.username, body.password)
    return LoginResponse(
        access_token=create_token(user),
        expires_in=get_settings().token_expire_seconds,
        user_id=user.id,
        username=user.username,
        role=user.role,
    )


@router.post("/register", response_model=UserResponse, status_code=201)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Public sign-up. New accounts are always patients."""
    user = await user_service.register(db, body)
    return UserResponse.model_validate(user)


@router.get("/me", response_model=UserResponse)
async def me(
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(get_current_user),
):
    user = await user_service.get(db, current_user.id)
    return UserResponse.model_validate(user)
