from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession
from clinic_scheduler import policy
from clinic_scheduler.auth import UserPrincipal, require
from clinic_scheduler.database import get_db
from clinic_scheduler.models.enums import Specialty
from clinic_scheduler.schemas.doctor import DoctorCreate, DoctorResponse, DoctorUpdate
from clinic_scheduler.services.doctor_service import doctor_service

router = APIRouter()

can_read = require(policy.PROFILES_READ)
can_write = require(policy.PROFILES_WRITE)


def _to_responses(doctors) -> list[DoctorResponse]:
    return [DoctorResponse.model_validate(d) for d in doctors]


@router.post("", response_model=DoctorResponse, status_code=201)
async def create_doctor(
    data: DoctorCreate,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(can_write),
):
    return DoctorResponse.model_validate(await doctor_service.create(db, data))


@router.get("", response_model=list[DoctorResponse])
async def list_doctors(db: AsyncSession = Depends(get_db), current_user: UserPrincipal = Depends(can_read)):
    return _to_responses(await doctor_service.list_all(db))


@router.get("/active", response_model=list[DoctorResponse])
async def list_active_doctors(db: AsyncSession = Depends(get_db), current_user: UserPrincipal = Depends(can_read)):
    return _to_responses(await doctor_service.list_active(db))


@router.get("/search", response_model=list[DoctorResponse])
async def search_doctors(
    nome: str = Query(..., min_length=1, description="Substring of the doctor's name"),
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(can_read),
):
    return _to_responses(await doctor_service.search_by_name(db, nome))


@router.get("/especialidade/{specialty}", response_model=list[DoctorResponse])
async def list_doctors_by_specialty(
    specialty: Specialty,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(can_read),
):
    return _to_responses(await doctor_service.list_by_specialty(db, specialty))


@router.get("/crm/{crm}", response_model=DoctorResponse)
async def get_doctor_by_crm(crm: str, db: AsyncSession = Depends(get_db), current_user: UserPrincipal = Depends(can_read)):
    return DoctorResponse.model_validate(await doctor_service.get_by_crm(db, crm))


@router.get("/user/{user_id}", response_model=DoctorResponse)
async def get_doctor_by_user(user_id: int, db: AsyncSession = Depends(get_db), current_user: UserPrincipal = Depends(can_read)):
    return DoctorResponse.model_validate(await doctor_service.get_by_user_id(db, user_id))


@router.get("/{doctor_id}", response_model=DoctorResponse)
async def get_doctor(doctor_id: int, db: AsyncSession = Depends(get_db), current_user: UserPrincipal = Depends(can_read)):
    return DoctorResponse.model_validate(await doctor_service.get(db, doctor_id))


@router.put("/{doctor_id}", response_model=DoctorResponse)
async def update_doctor(
    doctor_id: int,
    data: DoctorUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(can_write),
):
    return DoctorResponse.model_validate(await doctor_service.update(db, doctor_id, data))


@router.put("/{doctor_id}/activate", response_model=DoctorResponse)
async def activate_doctor(doctor_id: int, db: AsyncSession = Depends(get_db), current_user: UserPrincipal = Depends(can_write)):
    return DoctorResponse.model_validate(await doctor_service.activate(db, doctor_id))


@router.put("/{doctor_id}/deactivate", response_model=DoctorResponse)
async def deactivate_doctor(doctor_id: int, db: AsyncSession = Depends(get_db), current_user: UserPrincipal = Depends(can_write)):
    return DoctorResponse.model_validate(await doctor_service.deactivate(db, doctor_id))


@router.delete("/{doctor_id}", status_code=204)
async def delete_doctor(
    doctor_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(require(policy.PROFILES_DELETE)),
):
    await doctor_service.delete(db, doctor_id)
    return Response(status_code=204)
