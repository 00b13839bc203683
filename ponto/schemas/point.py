from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from enum import Enum

from .review import ReviewDecision


class PointType(str, Enum):
    ENTRADA = "entrada"
    SAIDA = "saida"
    ALMOCO = "almoco"
    PAUSA = "pausa"


class PointMetadata(BaseModel):
    """Validated metadata part of a point submission"""
    type: PointType
    lat: float
    lon: float
    accuracy_m: float
    timestamp_local: str
    timestamp_utc: str
    fingerprint: str


class PointSubmissionResult(BaseModel):
    success: bool = True
    message: str
    status: str
    distance_m: str
    geofence_radius: int
    point_id: str


class PointReviewRequest(BaseModel):
    point_id: str
    decision: ReviewDecision


class PointResponse(BaseModel):
    id: str
    user_id: str
    type: PointType
    timestamp: datetime
    latitude: float
    longitude: float
    accuracy_meters: float
    photo_reference: str
    distance_meters: float
    within_geofence: bool
    status: str
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PointListResponse(BaseModel):
    records: List[PointResponse]
    total: int
    skip: int
    limit: int
