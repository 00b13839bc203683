import uuid

from sqlalchemy import Column, String, Date, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from ponto.database import Base


class Absence(Base):
    __tablename__ = "absences"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    type = Column(String(20), nullable=False, default="ferias")
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    reason = Column(Text)
    status = Column(String(20), nullable=False, default="pendente")  # 'pendente', 'aprovado', 'rejeitado'
    reviewed_by = Column(String(36), ForeignKey("profiles.id"))
    reviewed_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("Profile", foreign_keys=[user_id], backref="absences")
