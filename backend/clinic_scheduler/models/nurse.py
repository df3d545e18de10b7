from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from clinic_scheduler.database import Base


class Nurse(Base):
    __tablename__ = "nurses"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    coren = Column(String(20), unique=True, nullable=False, index=True)
    sector = Column(String(100), index=True)
    shift = Column(String(50), index=True)
    specialization = Column(String(100))
    description = Column(Text)
    active = Column(Boolean, nullable=False, default=True)

    user = relationship("User", lazy="selectin")

    @property
    def name(self):
        return self.user.name if self.user else None
