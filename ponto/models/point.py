import uuid

from sqlalchemy import Column, String, Float, Boolean, DateTime, ForeignKey, UniqueConstraint, CheckConstraint, func
from sqlalchemy.orm import relationship
from ponto.database import Base


class Point(Base):
    __tablename__ = "points"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    type = Column(String(20), nullable=False)  # 'entrada', 'saida', 'almoco', 'pausa'
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)
    client_timestamp_local = Column(String(40))
    client_timestamp_utc = Column(String(40))
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    accuracy_meters = Column(Float, nullable=False)
    photo_reference = Column(String(500), nullable=False)
    fingerprint = Column(String(128), nullable=False)
    distance_meters = Column(Float, nullable=False)
    within_geofence = Column(Boolean, nullable=False)
    status = Column(String(20), nullable=False, default="pendente")  # 'pendente', 'aprovado', 'rejeitado'
    reviewed_by = Column(String(36), ForeignKey("profiles.id"))
    reviewed_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("Profile", foreign_keys=[user_id], backref="points")

    __table_args__ = (
        UniqueConstraint("user_id", "fingerprint", name="uix_point_user_fingerprint"),
        CheckConstraint("type IN ('entrada', 'saida', 'almoco', 'pausa')", name="ck_points_type"),
        CheckConstraint("status IN ('pendente', 'aprovado', 'rejeitado')", name="ck_points_status"),
    )
