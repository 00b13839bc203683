from sqlalchemy import Column, String, Float, Integer, DateTime, CheckConstraint, func
from ponto.database import Base

SINGLETON_ID = "default"


class CompanySettings(Base):
    __tablename__ = "company_settings"

    id = Column(String(20), primary_key=True, default=SINGLETON_ID)
    geofence_center_lat = Column(Float, nullable=False)
    geofence_center_lng = Column(Float, nullable=False)
    geofence_radius = Column(Integer, nullable=False)  # meters
    tolerance_minutes = Column(Integer, nullable=False, default=15)
    photo_retention_days = Column(Integer, nullable=False, default=30)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("geofence_radius > 0", name="ck_company_settings_radius_positive"),
    )
