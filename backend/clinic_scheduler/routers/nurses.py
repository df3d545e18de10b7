from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession
from clinic_scheduler import policy
from clinic_scheduler.auth import UserPrincipal, require
from clinic_scheduler.database import get_db
from clinic_scheduler.schemas.nurse import NurseCreate, NurseResponse, NurseUpdate
from clinic_scheduler.services.nurse_service import nurse_service

router = APIRouter()

can_read = require(policy.PROFILES_READ)
can_write = require(policy.PROFILES_WRITE)


def _to_responses(nurses) -> list[NurseResponse]:
    return [NurseResponse.model_validate(n) for n in nurses]


@router.post("", response_model=NurseResponse, status_code=201)
async def create_nurse(
    data: NurseCreate,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(can_write),
):
    return NurseResponse.model_validate(await nurse_service.create(db, data))


@router.get("", response_model=list[NurseResponse])
async def list_nurses(db: AsyncSession = Depends(get_db), current_user: UserPrincipal = Depends(can_read)):
    return _to_responses(await nurse_service.list_all(db))


@router.get("/active", response_model=list[NurseResponse])
async def list_active_nurses(db: AsyncSession = Depends(get_db), current_user: UserPrincipal = Depends(can_read)):
    return _to_responses(await nurse_service.list_active(db))


@router.get("/search", response_model=list[NurseResponse])
async def search_nurses(
    nome: str = Query(..., min_length=1, description="Substring of the nurse's name"),
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(can_read),
):
    return _to_responses(await nurse_service.search_by_name(db, nome))


@router.get("/setor/{sector}/turno/{shift}", response_model=list[NurseResponse])
async def list_nurses_by_sector_and_shift(
    sector: str,
    shift: str,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(can_read),
):
    return _to_responses(await nurse_service.list_by_sector_and_shift(db, sector, shift))


@router.get("/setor/{sector}", response_model=list[NurseResponse])
async def list_nurses_by_sector(sector: str, db: AsyncSession = Depends(get_db), current_user: UserPrincipal = Depends(can_read)):
    return _to_responses(await nurse_service.list_by_sector(db, sector))


@router.get("/turno/{shift}", response_model=list[NurseResponse])
async def list_nurses_by_shift(shift: str, db: AsyncSession = Depends(get_db), current_user: UserPrincipal = Depends(can_read)):
    return _to_responses(await nurse_service.list_by_shift(db, shift))


@router.get("/especializacao/{specialization}", response_model=list[NurseResponse])
async def list_nurses_by_specialization(
    specialization: str,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(can_read),
):
    return _to_responses(await nurse_service.list_by_specialization(db, specialization))


@router.get("/coren/{coren}", response_model=NurseResponse)
async def get_nurse_by_coren(coren: str, db: AsyncSession = Depends(get_db), current_user: UserPrincipal = Depends(can_read)):
    return NurseResponse.model_validate(await nurse_service.get_by_coren(db, coren))


@router.get("/user/{user_id}", response_model=NurseResponse)
async def get_nurse_by_user(user_id: int, db: AsyncSession = Depends(get_db), current_user: UserPrincipal = Depends(can_read)):
    return NurseResponse.model_validate(await nurse_service.get_by_user_id(db, user_id))


@router.get("/{nurse_id}", response_model=NurseResponse)
async def get_nurse(nurse_id: int, db: AsyncSession = Depends(get_db), current_user: UserPrincipal = Depends(can_read)):
    return NurseResponse.model_validate(await nurse_service.get(db, nurse_id))


@router.put("/{nurse_id}", response_model=NurseResponse)
async def update_nurse(
    nurse_id: int,
    data: NurseUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(can_write),
):
    return NurseResponse.model_validate(await nurse_service.update(db, nurse_id, data))


@router.put("/{nurse_id}/activate", response_model=NurseResponse)
async def activate_nurse(nurse_id: int, db: AsyncSession = Depends(get_db), current_user: UserPrincipal = Depends(can_write)):
    return NurseResponse.model_validate(await nurse_service.activate(db, nurse_id))


@router.put("/{nurse_id}/deactivate", response_model=NurseResponse)
async def deactivate_nurse(nurse_id: int, db: AsyncSession = Depends(get_db), current_user: UserPrincipal = Depends(can_write)):
    return NurseResponse.model_validate(await nurse_service.deactivate(db, nurse_id))


@router.delete("/{nurse_id}", status_code=204)
async def delete_nurse(
    nurse_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(require(policy.PROFILES_DELETE)),
):
    await nurse_service.delete(db, nurse_id)
    return Response(status_code=204)
