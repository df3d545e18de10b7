from datetime import datetime
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession
from clinic_scheduler import policy
from clinic_scheduler.auth import UserPrincipal, get_current_user, require
from clinic_scheduler.database import get_db
from clinic_scheduler.models.enums import AppointmentStatus
from clinic_scheduler.repositories.appointment import AppointmentRepository
from clinic_scheduler.routers.patients import authorize_patient_record
from clinic_scheduler.schemas.appointment import AppointmentCreate, AppointmentResponse, AppointmentUpdate
from clinic_scheduler.services.appointment_service import appointment_service

router = APIRouter()

can_read = require(policy.APPOINTMENTS_READ)
can_write = require(policy.APPOINTMENTS_WRITE)


def _to_responses(appointments) -> list[AppointmentResponse]:
    return [AppointmentResponse.model_validate(a) for a in appointments]


@router.post("", response_model=AppointmentResponse, status_code=201)
async def schedule_appointment(
    data: AppointmentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(can_write),
):
    appointment = await appointment_service.schedule(db, data)
    return AppointmentResponse.model_validate(appointment)


@router.get("", response_model=list[AppointmentResponse])
async def list_appointments(db: AsyncSession = Depends(get_db), current_user: UserPrincipal = Depends(can_read)):
    return _to_responses(await appointment_service.list_all(db))


@router.get("/notificacoes", response_model=list[AppointmentResponse])
async def list_pending_notifications(db: AsyncSession = Depends(get_db), current_user: UserPrincipal = Depends(can_read)):
    """Upcoming scheduled or confirmed appointments that still need a reminder."""
    return _to_responses(await appointment_service.list_pending_notification(db))


@router.get("/periodo", response_model=list[AppointmentResponse])
async def list_appointments_by_period(
    start: datetime = Query(..., alias="inicio"),
    end: datetime = Query(..., alias="fim"),
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(can_read),
):
    return _to_responses(await appointment_service.list_by_period(db, start, end))


@router.get("/status/{status}", response_model=list[AppointmentResponse])
async def list_appointments_by_status(
    status: AppointmentStatus,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(can_read),
):
    return _to_responses(await appointment_service.list_by_status(db, status))


@router.get("/medico/{doctor_id}", response_model=list[AppointmentResponse])
async def list_appointments_by_doctor(
    doctor_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(can_read),
):
    return _to_responses(await appointment_service.list_by_doctor(db, doctor_id))


@router.get("/paciente/{patient_id}", response_model=list[AppointmentResponse])
async def list_appointments_by_patient(
    patient_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(get_current_user),
):
    await authorize_patient_record(db, current_user, patient_id, policy.APPOINTMENTS_READ)
    return _to_responses(await appointment_service.list_by_patient(db, patient_id))


@router.get("/paciente/{patient_id}/futuras", response_model=list[AppointmentResponse])
async def list_upcoming_appointments(
    patient_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(get_current_user),
):
    await authorize_patient_record(db, current_user, patient_id, policy.APPOINTMENTS_READ)
    return _to_responses(await appointment_service.list_upcoming_for_patient(db, patient_id))


@router.get("/paciente/{patient_id}/historico", response_model=list[AppointmentResponse])
async def list_appointment_history(
    patient_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(get_current_user),
):
    await authorize_patient_record(db, current_user, patient_id, policy.APPOINTMENTS_READ)
    return _to_responses(await appointment_service.list_history_for_patient(db, patient_id))


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(get_current_user),
):
    if current_user.can(policy.APPOINTMENTS_READ):
        return AppointmentResponse.model_validate(await appointment_service.get(db, appointment_id))

    # Patients only see their own appointments; a missing record is reported as forbidden
    appointment = await AppointmentRepository(db).get(appointment_id)
    owner_user_id = appointment.patient.user_id if appointment else None
    policy.check(current_user, policy.APPOINTMENTS_READ, owner_user_id=owner_user_id)
    return AppointmentResponse.model_validate(appointment)


@router.put("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: int,
    data: AppointmentUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(can_write),
):
    return AppointmentResponse.model_validate(await appointment_service.update(db, appointment_id, data))


@router.put("/{appointment_id}/status", response_model=AppointmentResponse)
async def update_appointment_status(
    appointment_id: int,
    status: AppointmentStatus = Query(...),
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(can_write),
):
    return AppointmentResponse.model_validate(await appointment_service.update_status(db, appointment_id, status))


@router.put("/{appointment_id}/cancelar", response_model=AppointmentResponse)
async def cancel_appointment(
    appointment_id: int,
    reason: str = Query(..., alias="motivo", min_length=1, max_length=500),
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(can_write),
):
    return AppointmentResponse.model_validate(await appointment_service.cancel(db, appointment_id, reason))


@router.delete("/{appointment_id}", status_code=204)
async def delete_appointment(
    appointment_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserPrincipal = Depends(require(policy.APPOINTMENTS_DELETE)),
):
    await appointment_service.delete(db, appointment_id)
    return Response(status_code=204)
