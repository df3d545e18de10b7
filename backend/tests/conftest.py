"""
Shared pytest fixtures for all tests.

Every test gets its own in-memory SQLite database with the full schema, a
session bound to it, and an HTTP client whose requests run against the same
database through a ``get_db`` override.
"""

import os
from datetime import date, datetime, timedelta
from typing import AsyncGenerator, Optional

# Ensure test environment before the application reads its settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from clinic_scheduler.auth import create_token, hash_password
from clinic_scheduler.clock import utcnow
from clinic_scheduler.database import Base, create_engine_for, get_db
from clinic_scheduler.main import app
from clinic_scheduler.models import Appointment, AppointmentStatus, Doctor, Nurse, Patient, Role, Specialty, User

DEFAULT_PASSWORD = "secret123"


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest_asyncio.fixture
async def async_engine():
    """In-memory database shared by every connection of a single test."""
    engine = create_engine_for(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def async_session_factory(async_engine) -> async_sessionmaker:
    return async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(async_session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(async_session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the app, with request sessions bound to the test database."""

    async def override_get_db():
        async with async_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# ============================================================================
# TEST DATA FACTORIES
# ============================================================================


@pytest.fixture
def make_user(db_session):
    async def factory(
        username: str,
        role: Role = Role.PATIENT,
        name: Optional[str] = None,
        password: str = DEFAULT_PASSWORD,
        active: bool = True,
    ) -> User:
        user = User(
            username=username,
            email=f"{username}@clinica.com",
            password_hash=hash_password(password),
            name=name or username.replace(".", " ").title(),
            role=role,
            active=active,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return factory


@pytest.fixture
def make_doctor(db_session, make_user):
    async def factory(
        crm: str = "CRM-1001",
        specialty: Specialty = Specialty.CARDIOLOGY,
        username: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Doctor:
        user = await make_user(username or f"dr.{crm.lower()}", role=Role.DOCTOR, name=name)
        doctor = Doctor(user=user, crm=crm, specialty=specialty, active=True)
        db_session.add(doctor)
        await db_session.commit()
        return doctor

    return factory


@pytest.fixture
def make_nurse(db_session, make_user):
    async def factory(
        coren: str = "COREN-2001",
        sector: Optional[str] = "Emergency",
        shift: Optional[str] = "Night",
        specialization: Optional[str] = None,
        active: bool = True,
        name: Optional[str] = None,
    ) -> Nurse:
        user = await make_user(f"nurse.{coren.lower()}", role=Role.NURSE, name=name)
        nurse = Nurse(
            user=user,
            coren=coren,
            sector=sector,
            shift=shift,
            specialization=specialization,
            active=active,
        )
        db_session.add(nurse)
        await db_session.commit()
        return nurse

    return factory


@pytest.fixture
def make_patient(db_session, make_user):
    async def factory(cpf: str = "12345678901", username: Optional[str] = None, name: Optional[str] = None) -> Patient:
        user = await make_user(username or f"patient.{cpf}", role=Role.PATIENT, name=name)
        patient = Patient(user=user, cpf=cpf, date_of_birth=date(1985, 4, 12), active=True)
        db_session.add(patient)
        await db_session.commit()
        return patient

    return factory


@pytest.fixture
def make_appointment(db_session):
    """Insert an appointment directly, bypassing the future-date rule."""

    async def factory(
        doctor: Doctor,
        patient: Patient,
        date_time: datetime,
        status: AppointmentStatus = AppointmentStatus.SCHEDULED,
        observations: Optional[str] = None,
        nurse: Optional[Nurse] = None,
    ) -> Appointment:
        appointment = Appointment(
            doctor=doctor,
            patient=patient,
            nurse=nurse,
            date_time=date_time,
            status=status,
            observations=observations,
            created_at=utcnow(),
        )
        db_session.add(appointment)
        await db_session.commit()
        return appointment

    return factory


def tomorrow() -> datetime:
    return utcnow() + timedelta(days=1)


def yesterday() -> datetime:
    return utcnow() - timedelta(days=1)


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_token(user)}"}
