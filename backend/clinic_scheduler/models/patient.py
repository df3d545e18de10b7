from sqlalchemy import Column, Integer, String, Date, Text, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from clinic_scheduler.database import Base


class Patient(Base):
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    cpf = Column(String(11), unique=True, nullable=False, index=True)
    date_of_birth = Column(Date, nullable=False)
    address = Column(Text)
    sus_card_number = Column(String(20))
    health_plan = Column(String(100))
    emergency_contact = Column(String(200))
    medical_notes = Column(Text)
    active = Column(Boolean, nullable=False, default=True)

    user = relationship("User", lazy="selectin")

    @property
    def name(self):
        return self.user.name if self.user else None
