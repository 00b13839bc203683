from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class GeofenceCenter(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class CompanySettingsUpdate(BaseModel):
    geofence_center: Optional[GeofenceCenter] = None
    geofence_radius: Optional[int] = Field(None, gt=0)
    tolerance_minutes: Optional[int] = Field(None, ge=0)
    photo_retention_days: Optional[int] = Field(None, ge=0)


class CompanySettingsResponse(BaseModel):
    configured: bool = True
    geofence_center: GeofenceCenter
    geofence_radius: int
    tolerance_minutes: int
    photo_retention_days: int
    updated_at: Optional[datetime] = None
