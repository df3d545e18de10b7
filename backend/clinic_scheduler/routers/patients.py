from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession
from clinic_scheduler import policy
from clinic_scheduler.auth import UserPrincipal, get_current_user, require
from clinic_scheduler.database import get_db
from clinic_scheduler.exceptions import AuthorizationError
from clinic_scheduler.repositories.patient import PatientRepository
from clinic_scheduler.schemas.patient import PatientCreate, PatientResponse, PatientUpdate
from clinic_scheduler.services.patient_service import patient_service

router = APIRouter()

can_read = require(policy.PROFILES_READ)
can_write = require(policy.PROFILES_WRITE)


def _to_responses(patients) -> list[PatientResponse]:
    return [PatientResponse.model_validate(p) for p in patients]


async def authorize_patient_record(db: AsyncSession, user: UserPrincipal, patient_id: int, capability: str) -> None:
    """Staff pass on role; a patient passes only for the profile linked to their own account."""
    if user.can(capability):
        return
    patient = await PatientRepository(db).get(patient_id)
    policy.check(user, capability, owner_user_id=patient.user_id if patient else None)


@router.post("", response_model=PatientResponse, status_code=201)
async def create_patient(
    data: PatientCreate,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(can_write),
):
    return PatientResponse.model_validate(await patient_service.create(db, data))


@router.get("", response_model=list[PatientResponse])
async def list_patients(db: AsyncSession = Depends(get_db), current_user: UserPrincipal = Depends(can_read)):
    return _to_responses(await patient_service.list_all(db))


@router.get("/active", response_model=list[PatientResponse])
async def list_active_patients(db: AsyncSession = Depends(get_db), current_user: UserPrincipal = Depends(can_read)):
    return _to_responses(await patient_service.list_active(db))


@router.get("/search", response_model=list[PatientResponse])
async def search_patients(
    nome: str = Query(..., min_length=1, description="Substring of the patient's name"),
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(can_read),
):
    return _to_responses(await patient_service.search_by_name(db, nome))


@router.get("/cpf/{cpf}", response_model=PatientResponse)
async def get_patient_by_cpf(cpf: str, db: AsyncSession = Depends(get_db), current_user: UserPrincipal = Depends(can_read)):
    return PatientResponse.model_validate(await patient_service.get_by_cpf(db, cpf))


@router.get("/user/{user_id}", response_model=PatientResponse)
async def get_patient_by_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(get_current_user),
):
    policy.check(current_user, policy.PROFILES_READ, owner_user_id=user_id)
    return PatientResponse.model_validate(await patient_service.get_by_user_id(db, user_id))


@router.get("/{patient_id}", response_model=PatientResponse)
async def get_patient(
    patient_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(get_current_user),
):
    await authorize_patient_record(db, current_user, patient_id, policy.PROFILES_READ)
    return PatientResponse.model_validate(await patient_service.get(db, patient_id))


@router.put("/{patient_id}", response_model=PatientResponse)
async def update_patient(
    patient_id: int,
    data: PatientUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(get_current_user),
):
    await authorize_patient_record(db, current_user, patient_id, policy.PROFILES_WRITE)
    if not current_user.can(policy.PROFILES_WRITE):
        privileged = sorted(policy.PRIVILEGED_PATIENT_FIELDS & data.model_fields_set)
        if privileged:
            raise AuthorizationError(f"Your role does not permit changing: {', '.join(privileged)}")
    return PatientResponse.model_validate(await patient_service.update(db, patient_id, data))


@router.put("/{patient_id}/activate", response_model=PatientResponse)
async def activate_patient(patient_id: int, db: AsyncSession = Depends(get_db), current_user: UserPrincipal = Depends(can_write)):
    return PatientResponse.model_validate(await patient_service.activate(db, patient_id))


@router.put("/{patient_id}/deactivate", response_model=PatientResponse)
async def deactivate_patient(patient_id: int, db: AsyncSession = Depends(get_db), current_user: UserPrincipal = Depends(can_write)):
    return PatientResponse.model_validate(await patient_service.deactivate(db, patient_id))


@router.delete("/{patient_id}", status_code=204)
async def delete_patient(
    patient_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(require(policy.PROFILES_DELETE)),
):
    await patient_service.delete(db, patient_id)
    return Response(status_code=204)
