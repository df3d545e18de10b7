import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from clinic_scheduler import models  # noqa: F401  registers tables on Base.metadata
from clinic_scheduler.config import get_settings
from clinic_scheduler.database import engine, Base
from clinic_scheduler.exception_handlers import register_exception_handlers
from clinic_scheduler.middleware.request_logging import RequestLoggingMiddleware
from clinic_scheduler.routers import appointments, doctors, nurses, patients, users
from clinic_scheduler.routers import auth as auth_router

logger = logging.getLogger(__name__)

settings = get_settings()


def configure_logging(level: str = settings.log_level) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: create tables unless migrations manage the schema
    if settings.create_tables_on_startup:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ready")
    yield
    # Shutdown
    await engine.dispose()


configure_logging()

app = FastAPI(
    title="Clinic Scheduler",
    description="Appointments, staff and patient records for a medical clinic",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)

app.include_router(auth_router.router, prefix="/auth", tags=["Auth"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(doctors.router, prefix="/api/medicos", tags=["Doctors"])
app.include_router(nurses.router, prefix="/api/enfermeiros", tags=["Nurses"])
app.include_router(patients.router, prefix="/api/pacientes", tags=["Patients"])
app.include_router(appointments.router, prefix="/api/consultas", tags=["Appointments"])


@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "service": "clinic-scheduler"}
