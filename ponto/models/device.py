import uuid

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship
from ponto.database import Base


class ActiveDevice(Base):
    __tablename__ = "active_devices"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    device_id = Column(String(128), nullable=False)
    device_model = Column(String(100))
    last_login = Column(DateTime(timezone=True), server_default=func.now())
    is_active = Column(Boolean, nullable=False, default=False)
    reviewed_by = Column(String(36), ForeignKey("profiles.id"))
    reviewed_at = Column(DateTime(timezone=True))

    user = relationship("Profile", foreign_keys=[user_id], backref="devices")

    __table_args__ = (
        UniqueConstraint("user_id", "device_id", name="uix_device_user"),
    )
