from sqlalchemy import Column, Integer, String, Text, Boolean, Enum, ForeignKey
from sqlalchemy.orm import relationship
from clinic_scheduler.database import Base
from clinic_scheduler.models.enums import Specialty


class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    crm = Column(String(20), unique=True, nullable=False, index=True)
    specialty = Column(Enum(Specialty, native_enum=False, length=30), nullable=False)
    description = Column(Text)
    active = Column(Boolean, nullable=False, default=True)

    user = relationship("User", lazy="selectin")

    @property
    def name(self):
        return self.user.name if self.user else None
