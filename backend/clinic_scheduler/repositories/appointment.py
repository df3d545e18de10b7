from datetime import datetime
from typing import Iterable

from sqlalchemy import select

from clinic_scheduler.models.appointment import Appointment
from clinic_scheduler.models.enums import AppointmentStatus
from clinic_scheduler.repositories.base import BaseRepository


class AppointmentRepository(BaseRepository[Appointment]):
    model = Appointment

    async def list_by_doctor(self, doctor_id: int) -> list[Appointment]:
        return await self._scalars(
            select(Appointment).where(Appointment.doctor_id == doctor_id).order_by(Appointment.date_time)
        )

    async def list_by_patient(self, patient_id: int) -> list[Appointment]:
        return await self._scalars(
            select(Appointment).where(Appointment.patient_id == patient_id).order_by(Appointment.date_time)
        )

    async def list_by_status(self, status: AppointmentStatus) -> list[Appointment]:
        return await self._scalars(
            select(Appointment).where(Appointment.status == status).order_by(Appointment.date_time)
        )

    async def list_by_period(self, start: datetime, end: datetime) -> list[Appointment]:
        return await self._scalars(
            select(Appointment)
            .where(Appointment.date_time.between(start, end))
            .order_by(Appointment.date_time)
        )

    async def list_upcoming_for_patient(self, patient_id: int, now: datetime) -> list[Appointment]:
        return await self._scalars(
            select(Appointment)
            .where(Appointment.patient_id == patient_id, Appointment.date_time > now)
            .order_by(Appointment.date_time.asc())
        )

    async def list_history_for_patient(self, patient_id: int) -> list[Appointment]:
        return await self._scalars(
            select(Appointment)
            .where(Appointment.patient_id == patient_id)
            .order_by(Appointment.date_time.desc(), Appointment.id.desc())
        )

    async def list_pending_notification(
        self, now: datetime, statuses: Iterable[AppointmentStatus]
    ) -> list[Appointment]:
        return await self._scalars(
            select(Appointment)
            .where(Appointment.date_time > now, Appointment.status.in_(list(statuses)))
            .order_by(Appointment.date_time.asc())
        )
