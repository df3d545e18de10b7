from sqlalchemy import Column, Integer, String, Boolean, Enum
from clinic_scheduler.database import Base
from clinic_scheduler.models.enums import Role


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    email = Column(String(200), unique=True, nullable=False, index=True)
    password_hash = Column(String(128), nullable=False)  # bcrypt digest, never the plaintext
    name = Column(String(200), nullable=False)
    phone = Column(String(20))
    role = Column(Enum(Role, native_enum=False, length=20), nullable=False)
    active = Column(Boolean, nullable=False, default=True)
