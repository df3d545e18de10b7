from datetime import date
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import select

from clinic_scheduler.exceptions import BusinessError, NotFoundError, ValidationError
from clinic_scheduler.models.doctor import Doctor
from clinic_scheduler.models.enums import Specialty
from clinic_scheduler.repositories.doctor import DoctorRepository
from clinic_scheduler.repositories.nurse import NurseRepository
from clinic_scheduler.repositories.patient import PatientRepository
from clinic_scheduler.schemas.doctor import DoctorCreate, DoctorUpdate
from clinic_scheduler.schemas.nurse import NurseCreate, NurseUpdate
from clinic_scheduler.schemas.patient import PatientCreate, PatientUpdate
from clinic_scheduler.services.doctor_service import doctor_service
from clinic_scheduler.services.nurse_service import nurse_service
from clinic_scheduler.services.patient_service import patient_service


class TestDoctorService:
    @pytest.mark.asyncio
    async def test_create_links_user_and_forces_active(self, db_session, make_user):
        user = await make_user("gregory.house", name="Gregory House")

        doctor = await doctor_service.create(
            db_session, DoctorCreate(user_id=user.id, crm="CRM-SP-123", specialty=Specialty.NEUROLOGY)
        )

        assert doctor.id is not None
        assert doctor.user_id == user.id
        assert doctor.name == "Gregory House"
        assert doctor.active is True

    @pytest.mark.asyncio
    async def test_create_duplicate_crm(self, db_session, make_doctor, make_user):
        await make_doctor(crm="CRM-42")
        user = await make_user("other.doctor")

        with pytest.raises(BusinessError) as exc_info:
            await doctor_service.create(
                db_session, DoctorCreate(user_id=user.id, crm="CRM-42", specialty=Specialty.UROLOGY)
            )

        assert exc_info.value.message == "CRM already exists: CRM-42"

    @pytest.mark.asyncio
    async def test_create_for_unknown_user(self, db_session):
        with pytest.raises(NotFoundError) as exc_info:
            await doctor_service.create(
                db_session, DoctorCreate(user_id=999, crm="CRM-9", specialty=Specialty.ONCOLOGY)
            )

        assert exc_info.value.entity == "User"

    @pytest.mark.asyncio
    async def test_user_cannot_hold_two_doctor_profiles(self, db_session, make_doctor):
        doctor = await make_doctor(crm="CRM-1")

        with pytest.raises(BusinessError):
            await doctor_service.create(
                db_session, DoctorCreate(user_id=doctor.user_id, crm="CRM-2", specialty=Specialty.ONCOLOGY)
            )

    @pytest.mark.asyncio
    async def test_storage_constraint_catches_race(self, db_session, make_doctor, make_user):
        await make_doctor(crm="CRM-RACE")
        user = await make_user("late.doctor")

        # Simulate a concurrent insert that slipped past the pre-check
        with patch.object(DoctorRepository, "exists_by_identifier", new=AsyncMock(return_value=False)):
            with pytest.raises(BusinessError) as exc_info:
                await doctor_service.create(
                    db_session, DoctorCreate(user_id=user.id, crm="CRM-RACE", specialty=Specialty.PEDIATRICS)
                )

        assert "CRM-RACE" in exc_info.value.message
        rows = (await db_session.execute(select(Doctor).where(Doctor.crm == "CRM-RACE"))).scalars().all()
        assert len(rows) == 1

    @pytest.mark.asyncio
    async def test_update_with_unchanged_crm_skips_uniqueness_check(self, db_session, make_doctor):
        doctor = await make_doctor(crm="CRM-7")

        with patch.object(DoctorRepository, "exists_by_identifier", new=AsyncMock(return_value=True)) as exists:
            updated = await doctor_service.update(
                db_session, doctor.id, DoctorUpdate(crm="CRM-7", description="Head of cardiology")
            )

        exists.assert_not_called()
        assert updated.description == "Head of cardiology"

    @pytest.mark.asyncio
    async def test_update_with_colliding_crm_writes_nothing(self, db_session, make_doctor):
        await make_doctor(crm="CRM-A")
        doctor = await make_doctor(crm="CRM-B")

        with pytest.raises(BusinessError):
            await doctor_service.update(
                db_session, doctor.id, DoctorUpdate(crm="CRM-A", specialty=Specialty.DERMATOLOGY)
            )

        assert doctor.crm == "CRM-B"
        assert doctor.specialty == Specialty.CARDIOLOGY

    @pytest.mark.asyncio
    async def test_update_with_new_free_crm(self, db_session, make_doctor):
        doctor = await make_doctor(crm="CRM-OLD")

        updated = await doctor_service.update(db_session, doctor.id, DoctorUpdate(crm="CRM-NEW"))

        assert updated.crm == "CRM-NEW"
        assert (await doctor_service.get_by_crm(db_session, "CRM-NEW")).id == doctor.id

    @pytest.mark.asyncio
    async def test_update_cannot_clear_specialty(self, db_session, make_doctor):
        doctor = await make_doctor()

        with pytest.raises(ValidationError):
            await doctor_service.update(db_session, doctor.id, DoctorUpdate.model_validate({"specialty": None}))

    @pytest.mark.asyncio
    async def test_lookups(self, db_session, make_doctor):
        cardiologist = await make_doctor(crm="CRM-C", specialty=Specialty.CARDIOLOGY, name="Ana Souza")
        await make_doctor(crm="CRM-D", specialty=Specialty.DERMATOLOGY, name="Bruno Lima")

        assert (await doctor_service.get_by_user_id(db_session, cardiologist.user_id)).id == cardiologist.id
        by_specialty = await doctor_service.list_by_specialty(db_session, Specialty.CARDIOLOGY)
        assert [d.id for d in by_specialty] == [cardiologist.id]
        found = await doctor_service.search_by_name(db_session, "souz")
        assert [d.id for d in found] == [cardiologist.id]

    @pytest.mark.asyncio
    async def test_missing_lookups_raise_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            await doctor_service.get(db_session, 1)
        with pytest.raises(NotFoundError):
            await doctor_service.get_by_crm(db_session, "nope")
        with pytest.raises(NotFoundError):
            await doctor_service.get_by_user_id(db_session, 1)

    @pytest.mark.asyncio
    async def test_activate_deactivate_and_list_active(self, db_session, make_doctor):
        doctor = await make_doctor(crm="CRM-X")
        await make_doctor(crm="CRM-Y")

        await doctor_service.deactivate(db_session, doctor.id)
        active = await doctor_service.list_active(db_session)
        assert doctor.id not in [d.id for d in active]

        reactivated = await doctor_service.activate(db_session, doctor.id)
        assert reactivated.active is True

    @pytest.mark.asyncio
    async def test_delete(self, db_session, make_doctor):
        doctor = await make_doctor()
        doctor_id = doctor.id

        await doctor_service.delete(db_session, doctor_id)

        with pytest.raises(NotFoundError):
            await doctor_service.delete(db_session, doctor_id)


class TestNurseService:
    @pytest.mark.asyncio
    async def test_create_duplicate_coren(self, db_session, make_nurse, make_user):
        await make_nurse(coren="COREN-1")
        user = await make_user("new.nurse")

        with pytest.raises(BusinessError) as exc_info:
            await nurse_service.create(db_session, NurseCreate(user_id=user.id, coren="COREN-1"))

        assert exc_info.value.message == "COREN already exists: COREN-1"

    @pytest.mark.asyncio
    async def test_sector_and_shift_filters(self, db_session, make_nurse):
        er_night = await make_nurse(coren="C-1", sector="Emergency", shift="Night")
        er_day = await make_nurse(coren="C-2", sector="Emergency", shift="Day")
        icu_night = await make_nurse(coren="C-3", sector="ICU", shift="Night")

        by_sector = await nurse_service.list_by_sector(db_session, "Emergency")
        by_shift = await nurse_service.list_by_shift(db_session, "Night")
        both = await nurse_service.list_by_sector_and_shift(db_session, "Emergency", "Night")

        assert [n.id for n in by_sector] == [er_night.id, er_day.id]
        assert [n.id for n in by_shift] == [er_night.id, icu_night.id]
        assert [n.id for n in both] == [er_night.id]

    @pytest.mark.asyncio
    async def test_specialization_lists_active_only(self, db_session, make_nurse):
        active = await make_nurse(coren="C-10", specialization="Oncology")
        await make_nurse(coren="C-11", specialization="Oncology", active=False)

        result = await nurse_service.list_by_specialization(db_session, "Oncology")

        assert [n.id for n in result] == [active.id]

    @pytest.mark.asyncio
    async def test_update_with_unchanged_coren_skips_uniqueness_check(self, db_session, make_nurse):
        nurse = await make_nurse(coren="C-20")

        with patch.object(NurseRepository, "exists_by_identifier", new=AsyncMock(return_value=True)) as exists:
            updated = await nurse_service.update(db_session, nurse.id, NurseUpdate(coren="C-20", shift="Day"))

        exists.assert_not_called()
        assert updated.shift == "Day"

    @pytest.mark.asyncio
    async def test_update_can_clear_optional_field(self, db_session, make_nurse):
        nurse = await make_nurse(coren="C-30", sector="ICU")

        updated = await nurse_service.update(db_session, nurse.id, NurseUpdate.model_validate({"sector": None}))

        assert updated.sector is None
        assert updated.shift == "Night"

    @pytest.mark.asyncio
    async def test_get_by_coren(self, db_session, make_nurse):
        nurse = await make_nurse(coren="C-40")

        assert (await nurse_service.get_by_coren(db_session, "C-40")).id == nurse.id


class TestPatientService:
    @pytest.mark.asyncio
    async def test_create_and_get_by_cpf(self, db_session, make_user):
        user = await make_user("maria.silva", name="Maria Silva")

        patient = await patient_service.create(
            db_session,
            PatientCreate(user_id=user.id, cpf="11122233344", date_of_birth=date(1990, 1, 31), health_plan="Unimed"),
        )

        found = await patient_service.get_by_cpf(db_session, "11122233344")
        assert found.id == patient.id
        assert found.name == "Maria Silva"
        assert found.active is True

    @pytest.mark.asyncio
    async def test_duplicate_cpf_checked_before_user_lookup(self, db_session, make_patient):
        await make_patient(cpf="55566677788")

        with pytest.raises(BusinessError):
            await patient_service.create(
                db_session, PatientCreate(user_id=999, cpf="55566677788", date_of_birth=date(2000, 5, 5))
            )

    @pytest.mark.asyncio
    async def test_update_with_unchanged_cpf_skips_uniqueness_check(self, db_session, make_patient):
        patient = await make_patient(cpf="12312312312")

        with patch.object(PatientRepository, "exists_by_identifier", new=AsyncMock(return_value=True)) as exists:
            updated = await patient_service.update(
                db_session, patient.id, PatientUpdate(cpf="12312312312", address="Rua das Flores, 10")
            )

        exists.assert_not_called()
        assert updated.address == "Rua das Flores, 10"

    @pytest.mark.asyncio
    async def test_update_with_colliding_cpf(self, db_session, make_patient):
        await make_patient(cpf="10000000001")
        patient = await make_patient(cpf="10000000002")

        with pytest.raises(BusinessError):
            await patient_service.update(db_session, patient.id, PatientUpdate(cpf="10000000001"))

        assert patient.cpf == "10000000002"

    @pytest.mark.asyncio
    async def test_update_cannot_clear_date_of_birth(self, db_session, make_patient):
        patient = await make_patient()

        with pytest.raises(ValidationError):
            await patient_service.update(db_session, patient.id, PatientUpdate.model_validate({"date_of_birth": None}))
