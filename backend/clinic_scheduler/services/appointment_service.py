"""
Appointment engine: scheduling, rescheduling, status changes and the read-only
projections used for listings and reminder scans.

Date-times are compared as naive UTC. An appointment must lie strictly in the
future when it is created and whenever its date-time is changed; updates that
leave the date-time alone never re-check it.
"""

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from clinic_scheduler.clock import to_naive_utc, utcnow
from clinic_scheduler.config import get_settings
from clinic_scheduler.exceptions import BusinessError, NotFoundError, ValidationError
from clinic_scheduler.models.appointment import Appointment
from clinic_scheduler.models.enums import NOTIFIABLE_STATUSES, AppointmentStatus
from clinic_scheduler.repositories.appointment import AppointmentRepository
from clinic_scheduler.repositories.doctor import DoctorRepository
from clinic_scheduler.repositories.nurse import NurseRepository
from clinic_scheduler.repositories.patient import PatientRepository
from clinic_scheduler.schemas.appointment import AppointmentCreate, AppointmentUpdate
from clinic_scheduler.services.partial import supplied_fields

logger = logging.getLogger(__name__)

CANCELLATION_PREFIX = "CANCELLATION: "
FUTURE_DATE_MESSAGE = "Appointment date-time must be in the future"


class AppointmentService:
    def _require_future(self, value: datetime) -> datetime:
        value = to_naive_utc(value)
        if value <= utcnow():
            raise ValidationError(
                FUTURE_DATE_MESSAGE,
                errors=[{"field": "date_time", "message": "must be in the future"}],
            )
        return value

    def _check_transition(self, appointment: Appointment, new_status: AppointmentStatus) -> None:
        if not get_settings().enforce_status_transitions:
            return
        current = appointment.status
        if current != new_status and current.is_terminal:
            raise BusinessError(
                f"Appointment {appointment.id} is {current.value} and cannot change to {new_status.value}"
            )

    async def _get_patient_or_raise(self, db: AsyncSession, patient_id: int):
        patient = await PatientRepository(db).get(patient_id)
        if patient is None:
            raise NotFoundError("Patient", "id", patient_id)
        return patient

    async def schedule(self, db: AsyncSession, data: AppointmentCreate) -> Appointment:
        date_time = self._require_future(data.date_time)

        # Doctor before patient before nurse
        doctor = await DoctorRepository(db).get(data.doctor_id)
        if doctor is None:
            raise NotFoundError("Doctor", "id", data.doctor_id)
        patient = await self._get_patient_or_raise(db, data.patient_id)
        nurse = None
        if data.nurse_id is not None:
            nurse = await NurseRepository(db).get(data.nurse_id)
            if nurse is None:
                raise NotFoundError("Nurse", "id", data.nurse_id)

        appointment = Appointment(
            doctor=doctor,
            patient=patient,
            nurse=nurse,
            date_time=date_time,
            status=AppointmentStatus.SCHEDULED,
            reason=data.reason,
            observations=data.observations,
            created_at=utcnow(),
        )
        await AppointmentRepository(db).add(appointment, "Could not schedule appointment")
        logger.info(
            "Scheduled appointment %s: doctor=%s patient=%s at %s",
            appointment.id, doctor.id, patient.id, date_time.isoformat(),
        )
        return appointment

    async def get(self, db: AsyncSession, appointment_id: int) -> Appointment:
        appointment = await AppointmentRepository(db).get(appointment_id)
        if appointment is None:
            raise NotFoundError("Appointment", "id", appointment_id)
        return appointment

    async def list_all(self, db: AsyncSession) -> list[Appointment]:
        return await AppointmentRepository(db).list_all()

    async def list_by_doctor(self, db: AsyncSession, doctor_id: int) -> list[Appointment]:
        if await DoctorRepository(db).get(doctor_id) is None:
            raise NotFoundError("Doctor", "id", doctor_id)
        return await AppointmentRepository(db).list_by_doctor(doctor_id)

    async def list_by_patient(self, db: AsyncSession, patient_id: int) -> list[Appointment]:
        await self._get_patient_or_raise(db, patient_id)
        return await AppointmentRepository(db).list_by_patient(patient_id)

    async def list_by_status(self, db: AsyncSession, status: AppointmentStatus) -> list[Appointment]:
        return await AppointmentRepository(db).list_by_status(status)

    async def list_by_period(self, db: AsyncSession, start: datetime, end: datetime) -> list[Appointment]:
        start, end = to_naive_utc(start), to_naive_utc(end)
        if start > end:
            raise ValidationError("Period start must not be after its end")
        return await AppointmentRepository(db).list_by_period(start, end)

    async def list_upcoming_for_patient(self, db: AsyncSession, patient_id: int) -> list[Appointment]:
        await self._get_patient_or_raise(db, patient_id)
        return await AppointmentRepository(db).list_upcoming_for_patient(patient_id, utcnow())

    async def list_history_for_patient(self, db: AsyncSession, patient_id: int) -> list[Appointment]:
        return await AppointmentRepository(db).list_history_for_patient(patient_id)

    async def list_pending_notification(self, db: AsyncSession) -> list[Appointment]:
        """Upcoming SCHEDULED/CONFIRMED appointments, for an external reminder job."""
        return await AppointmentRepository(db).list_pending_notification(utcnow(), NOTIFIABLE_STATUSES)

    async def update(self, db: AsyncSession, appointment_id: int, changes: AppointmentUpdate) -> Appointment:
        appointment = await self.get(db, appointment_id)
        fields = supplied_fields(changes, required=("date_time", "status"))

        # Validate everything before touching the record
        if "date_time" in fields:
            fields["date_time"] = self._require_future(fields["date_time"])
        if "status" in fields:
            self._check_transition(appointment, fields["status"])

        for key, value in fields.items():
            setattr(appointment, key, value)
        appointment.updated_at = utcnow()
        await AppointmentRepository(db).save(appointment, f"Could not update appointment {appointment_id}")
        logger.info("Updated appointment %s (fields=%s)", appointment_id, sorted(fields))
        return appointment

    async def update_status(
        self, db: AsyncSession, appointment_id: int, status: AppointmentStatus
    ) -> Appointment:
        appointment = await self.get(db, appointment_id)
        self._check_transition(appointment, status)
        previous = appointment.status
        appointment.status = status
        appointment.updated_at = utcnow()
        await AppointmentRepository(db).save(appointment, f"Could not update appointment {appointment_id}")
        logger.info("Appointment %s status %s -> %s", appointment_id, previous.value, status.value)
        return appointment

    async def cancel(self, db: AsyncSession, appointment_id: int, reason: str) -> Appointment:
        appointment = await self.get(db, appointment_id)
        self._check_transition(appointment, AppointmentStatus.CANCELLED)

        note = f"{CANCELLATION_PREFIX}{reason}"
        appointment.status = AppointmentStatus.CANCELLED
        appointment.observations = f"{appointment.observations}\n{note}" if appointment.observations else note
        appointment.updated_at = utcnow()
        await AppointmentRepository(db).save(appointment, f"Could not cancel appointment {appointment_id}")
        logger.info("Cancelled appointment %s", appointment_id)
        return appointment

    async def delete(self, db: AsyncSession, appointment_id: int) -> None:
        appointment = await self.get(db, appointment_id)
        await AppointmentRepository(db).delete(appointment)
        logger.info("Deleted appointment %s", appointment_id)


appointment_service = AppointmentService()
